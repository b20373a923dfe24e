# cmdguard/execution/__init__.py
"""Backup and restore of files touched by risky commands."""
from .backup import (
    BackupManager, BackupEntry, BackupFile, default_backup_dir,
    BackupError, BackupIOError, BackupNotFoundError, IndexCorruptedError,
    HomeDirUnresolvedError, BackupIntegrityError,
)

__all__ = [
    'BackupManager',
    'BackupEntry',
    'BackupFile',
    'default_backup_dir',
    'BackupError',
    'BackupIOError',
    'BackupNotFoundError',
    'IndexCorruptedError',
    'HomeDirUnresolvedError',
    'BackupIntegrityError',
]
