"""
Backup utility for the grocery data file.
Takes a timestamped copy before bulk sweeps such as clearing checked items.
"""
import shutil
from datetime import datetime
from pathlib import Path
import logging

from grocery.utilities.config import GROCERY_BACKUP_KEEP

logger = logging.getLogger(__name__)


class BackupManager:
    """Manages snapshots of one data file."""

    def __init__(self, data_file: Path, backup_dir: Path = None, keep: int = GROCERY_BACKUP_KEEP):
        if keep < 1:
            raise ValueError(f"Backup retention must keep at least one file, got {keep}")
        self.data_file = Path(data_file)
        self.backup_dir = Path(backup_dir) if backup_dir else self.data_file.parent / 'backups'
        self.keep = keep

    def _pattern(self) -> str:
        return f"{self.data_file.stem}_*{self.data_file.suffix}"

    def create_backup(self) -> bool:
        """Create a timestamped backup of the data file."""
        if not self.data_file.exists():
            logger.info(f"Nothing to back up yet: {self.data_file.name}")
            return False
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            destination = self.backup_dir / f"{self.data_file.stem}_{timestamp}{self.data_file.suffix}"
            shutil.copy2(self.data_file, destination)
            logger.info(f"Backup created: {destination.name}")
            self._cleanup_old_backups()
            return True
        except OSError as e:
            logger.error(f"Backup failed for {self.data_file.name}: {e}")
            return False

    def _cleanup_old_backups(self):
        """Remove old backups, keeping only the most recent ones."""
        backups = sorted(self.backup_dir.glob(self._pattern()), key=lambda p: p.name)
        for backup in backups[:-self.keep]:
            try:
                backup.unlink()
                logger.info(f"Removed old backup: {backup.name}")
            except OSError as e:
                logger.error(f"Failed to remove old backup {backup.name}: {e}")

    def list_backups(self) -> list:
        """List backups of the data file, newest first."""
        if not self.backup_dir.exists():
            return []
        backups = sorted(self.backup_dir.glob(self._pattern()), key=lambda p: p.name, reverse=True)
        return [
            {
                'name': b.name,
                'size': b.stat().st_size,
                'created': datetime.fromtimestamp(b.stat().st_mtime).strftime('%Y-%m-%d %H:%M:%S')
            }
            for b in backups
        ]
