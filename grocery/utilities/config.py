"""Configuration management for the grocery list service."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('GROCERY_DATA_DIR', str(BASE_DIR / 'data')))
GROCERY_DATA_FILE: Final[Path] = Path(os.getenv('GROCERY_DATA_FILE', str(DATA_DIR / 'grocery.json')))

# Duplicate merge policy: "concat" or "numeric"
GROCERY_MERGE_STRATEGY: Final[str] = os.getenv('GROCERY_MERGE_STRATEGY', 'concat').strip().lower()

# Recall buffer: how many removed names are remembered / offered for re-add
GROCERY_RECALL_CAPACITY: Final[int] = int(os.getenv('GROCERY_RECALL_CAPACITY', '10'))
GROCERY_RECALL_OFFERS: Final[int] = int(os.getenv('GROCERY_RECALL_OFFERS', '8'))

# Change events kept in memory for polling viewers
GROCERY_EVENTS_MAX: Final[int] = int(os.getenv('GROCERY_EVENTS_MAX', '300'))

# Data file snapshots kept before bulk sweeps
GROCERY_BACKUP_KEEP: Final[int] = int(os.getenv('GROCERY_BACKUP_KEEP', '10'))
