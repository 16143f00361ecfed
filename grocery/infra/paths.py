from grocery.utilities.config import DATA_DIR, GROCERY_DATA_FILE

# Centralized paths for data files (single source of truth)
BACKUP_DIR = DATA_DIR / 'backups'

__all__ = ['DATA_DIR', 'GROCERY_DATA_FILE', 'BACKUP_DIR']
