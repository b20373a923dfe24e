# cmdguard/execution/backup.py
"""
Content-addressed backup store for files a command is about to touch.

Each backup run gets its own directory, named by a fresh UUID, under the
backup root. A single JSON index next to those directories maps backup ids
to their entries:

    <root>/backup_index.json
    <root>/<id>/<original_basename>

The index is re-read from disk on every call. Writes go to a temporary
file that is renamed over the index, so a reader never sees a half
written document. Two processes committing at the same time can still
lose one of the updates.
"""
import os
import shutil
import tempfile
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from cmdguard.constants import BACKUP_DIR_NAME, BACKUP_INDEX_FILE
from cmdguard.utils.hashing import calculate_file_hash
from cmdguard.utils.logging import get_logger

logger = get_logger(__name__)


class BackupError(Exception):
    """Base class for backup store errors."""
    pass


class BackupIOError(BackupError):
    """A filesystem read, write or copy failed."""
    pass


class BackupNotFoundError(BackupError):
    """The requested backup id is not in the index, or there is no index."""
    pass


class IndexCorruptedError(BackupError):
    """The index file exists but cannot be decoded."""
    pass


class HomeDirUnresolvedError(BackupError):
    """No base directory could be determined for the backup root."""
    pass


class BackupIntegrityError(BackupError):
    """A backed-up copy no longer matches its recorded digest."""
    pass


class BackupFile(BaseModel):
    """One backed-up file."""
    original_path: Path = Field(..., description="Absolute path the file was copied from")
    backup_path: Path = Field(..., description="Absolute path of the copy in the store")
    file_hash: str = Field(..., description="SHA-256 hex digest of the copy")


class BackupEntry(BaseModel):
    """One backup run."""
    id: str
    timestamp: str = Field(..., description="ISO-8601 creation time")
    command: str
    files: List[BackupFile] = Field(default_factory=list)
    description: str = ""


_INDEX_ADAPTER = TypeAdapter(Dict[str, BackupEntry])


def default_backup_dir() -> Path:
    """
    Get the default backup root in the user's home directory.

    Raises:
        HomeDirUnresolvedError: If the home directory cannot be determined.
    """
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeDirUnresolvedError(f"Cannot determine home directory: {e}") from e
    return home / BACKUP_DIR_NAME


def _unique_name(name: str, used: Set[str]) -> str:
    """Disambiguate a base name already used in this backup run."""
    if name not in used:
        return name
    stem, suffix = os.path.splitext(name)
    counter = 1
    while f"{stem}_{counter}{suffix}" in used:
        counter += 1
    return f"{stem}_{counter}{suffix}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BackupManager:
    """Creates, lists, restores and prunes backups under one root directory."""

    def __init__(
        self,
        backup_dir: Optional[Union[str, Path]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the backup manager.

        Args:
            backup_dir: The backup root. Defaults to ~/.cmdguard_backups.
            clock: Returns the creation time of new entries.

        Raises:
            HomeDirUnresolvedError: If no root is given and there is no home directory.
            BackupIOError: If the root cannot be created.
        """
        self.backup_dir = Path(backup_dir).expanduser() if backup_dir else default_backup_dir()
        self.index_file = self.backup_dir / BACKUP_INDEX_FILE
        self._clock = clock or _utc_now
        self._lock = threading.RLock()

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackupIOError(f"Cannot create backup directory {self.backup_dir}: {e}") from e

    # --- Index I/O ---

    def _load_index(self) -> Dict[str, BackupEntry]:
        """Read the whole index; an absent index is empty."""
        if not self.index_file.exists():
            return {}

        try:
            data = self.index_file.read_bytes()
        except OSError as e:
            raise BackupIOError(f"Cannot read backup index {self.index_file}: {e}") from e

        try:
            return _INDEX_ADAPTER.validate_json(data)
        except ValidationError as e:
            logger.error(f"Backup index {self.index_file} is corrupted: {e}")
            raise IndexCorruptedError(f"Backup index {self.index_file} is corrupted") from e

    def _save_index(self, entries: Dict[str, BackupEntry]) -> None:
        """Replace the index with ``entries``."""
        payload = _INDEX_ADAPTER.dump_json(entries, indent=2)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.backup_dir, prefix=f".{BACKUP_INDEX_FILE}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.index_file)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise BackupIOError(f"Cannot write backup index {self.index_file}: {e}") from e

    # --- Operations ---

    def create_backup(self, command: str, paths: Iterable[Union[str, Path]]) -> BackupEntry:
        """
        Snapshot the given files before ``command`` runs.

        Paths that do not exist or are not regular files are skipped. Two
        files with the same base name are stored as ``name`` and
        ``name_1`` and so on. If any copy or the index update fails, the
        partial snapshot is removed and nothing is recorded.

        Args:
            command: The command about to be executed.
            paths: Files to back up.

        Returns:
            The new backup entry.

        Raises:
            BackupIOError: If copying or writing the index fails.
            IndexCorruptedError: If the existing index cannot be read.
        """
        backup_id = str(uuid.uuid4())
        # Stored in UTC so the ISO strings sort chronologically
        timestamp = self._clock().astimezone(timezone.utc).isoformat(timespec="microseconds")
        backup_subdir = self.backup_dir / backup_id

        try:
            backup_subdir.mkdir(parents=True)
        except OSError as e:
            raise BackupIOError(f"Cannot create backup directory {backup_subdir}: {e}") from e

        backup_files: List[BackupFile] = []
        used_names: Set[str] = set()

        try:
            for raw_path in paths:
                source = Path(raw_path)
                if not source.is_file():
                    logger.debug(f"Skipping {source}: not an existing regular file")
                    continue

                name = _unique_name(source.name, used_names)
                used_names.add(name)
                backup_path = backup_subdir / name

                shutil.copy2(source, backup_path)
                backup_files.append(BackupFile(
                    original_path=Path(os.path.abspath(source)),
                    backup_path=backup_path.absolute(),
                    file_hash=calculate_file_hash(backup_path),
                ))
        except OSError as e:
            shutil.rmtree(backup_subdir, ignore_errors=True)
            logger.error(f"Backup for '{command}' failed, partial copy removed: {e}")
            raise BackupIOError(f"Failed to back up files: {e}") from e

        entry = BackupEntry(
            id=backup_id,
            timestamp=timestamp,
            command=command,
            files=backup_files,
            description=f"Backup before executing: {command}",
        )

        with self._lock:
            try:
                entries = self._load_index()
                entries[entry.id] = entry
                self._save_index(entries)
            except BackupError:
                shutil.rmtree(backup_subdir, ignore_errors=True)
                raise

        logger.info(f"Created backup {backup_id} with {len(backup_files)} file(s) for '{command}'")
        return entry

    def list_backups(self) -> List[BackupEntry]:
        """
        List all backups, most recent first.

        Returns:
            The entries sorted by timestamp, descending. Empty if there is no index.
        """
        entries = self._load_index()
        return sorted(entries.values(), key=lambda e: e.timestamp, reverse=True)

    def get_backup_entry(self, backup_id: str) -> BackupEntry:
        """
        Look up one backup.

        Raises:
            BackupNotFoundError: If there is no index or the id is unknown.
        """
        if not self.index_file.exists():
            raise BackupNotFoundError("No backups found")

        entry = self._load_index().get(backup_id)
        if entry is None:
            raise BackupNotFoundError(f"Backup {backup_id} not found")
        return entry

    def verify_backup(self, backup_id: str) -> List[BackupFile]:
        """
        Check the stored copies of a backup against their recorded digests.

        Returns:
            Files whose copy is missing or no longer matches.
        """
        entry = self.get_backup_entry(backup_id)
        damaged: List[BackupFile] = []

        for backup_file in entry.files:
            if not backup_file.backup_path.is_file():
                damaged.append(backup_file)
                continue
            try:
                digest = calculate_file_hash(backup_file.backup_path)
            except OSError as e:
                raise BackupIOError(f"Cannot read {backup_file.backup_path}: {e}") from e
            if digest != backup_file.file_hash:
                damaged.append(backup_file)

        return damaged

    def restore_backup(self, backup_id: str, verify: bool = False) -> List[Path]:
        """
        Copy every file of a backup back to its original location.

        A missing copy is reported as a warning and skipped. Digests are
        only checked when ``verify`` is set, in which case a mismatch
        aborts the restore before any file is written.

        Args:
            backup_id: The backup to restore.
            verify: Whether to check digests first.

        Returns:
            The original paths that were restored.

        Raises:
            BackupNotFoundError: If the id is unknown.
            BackupIntegrityError: If ``verify`` is set and a copy was altered.
            BackupIOError: If an original path is now a directory, or a copy fails.
        """
        entry = self.get_backup_entry(backup_id)

        if verify:
            altered = [
                f for f in self.verify_backup(backup_id) if f.backup_path.is_file()
            ]
            if altered:
                names = ", ".join(str(f.original_path) for f in altered)
                raise BackupIntegrityError(f"Backup {backup_id} has altered copies: {names}")

        blocked = [f.original_path for f in entry.files if f.original_path.is_dir()]
        if blocked:
            names = ", ".join(str(p) for p in blocked)
            raise BackupIOError(f"Cannot restore over directories: {names}")

        restored: List[Path] = []
        for backup_file in entry.files:
            if not backup_file.backup_path.is_file():
                logger.warning(f"Backup file not found: {backup_file.backup_path}")
                continue

            try:
                backup_file.original_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(backup_file.backup_path, backup_file.original_path)
            except OSError as e:
                raise BackupIOError(f"Failed to restore {backup_file.original_path}: {e}") from e

            logger.info(f"Restored {backup_file.original_path}")
            restored.append(backup_file.original_path)

        logger.info(f"Backup {backup_id} restored ({len(restored)}/{len(entry.files)} files)")
        return restored

    def delete_backup(self, backup_id: str) -> None:
        """
        Remove a backup's directory and its index record.

        Raises:
            BackupNotFoundError: If the id is unknown.
            BackupIOError: If the directory or index cannot be updated.
        """
        with self._lock:
            if not self.index_file.exists():
                raise BackupNotFoundError("No backups found")

            entries = self._load_index()
            if backup_id not in entries:
                raise BackupNotFoundError(f"Backup {backup_id} not found")

            backup_subdir = self.backup_dir / backup_id
            if backup_subdir.exists():
                try:
                    shutil.rmtree(backup_subdir)
                except OSError as e:
                    raise BackupIOError(f"Cannot remove {backup_subdir}: {e}") from e

            del entries[backup_id]
            self._save_index(entries)

        logger.info(f"Backup {backup_id} deleted")

    def cleanup_old_backups(self, keep_count: int) -> List[str]:
        """
        Delete the oldest backups so that at most ``keep_count`` remain.

        Returns:
            Ids of the deleted backups, oldest first.
        """
        if keep_count < 0:
            raise ValueError(f"keep_count must be non-negative, got {keep_count}")

        with self._lock:
            backups = self.list_backups()
            if len(backups) <= keep_count:
                return []

            # Sort by timestamp (oldest first)
            backups.sort(key=lambda e: e.timestamp)
            to_delete = [b.id for b in backups[:len(backups) - keep_count]]
            for backup_id in to_delete:
                self.delete_backup(backup_id)

        logger.info(f"Cleaned up {len(to_delete)} old backup(s)")
        return to_delete
