# tests/conftest.py
"""
Common test fixtures for cmdguard.
"""
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from loguru import logger

from cmdguard.execution.backup import BackupManager


class FakeClock:
    """Returns strictly increasing timestamps, one second apart."""
    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(seconds=1)
        return now


@pytest.fixture
def work_dir(tmp_path, monkeypatch):
    """A working directory for commands that reference relative paths."""
    directory = tmp_path / "work"
    directory.mkdir()
    monkeypatch.chdir(directory)
    return directory


@pytest.fixture
def backup_root(tmp_path) -> Path:
    return tmp_path / "backups"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backup_manager(backup_root, clock) -> BackupManager:
    """A backup manager rooted in a temporary directory."""
    return BackupManager(backup_root, clock=clock)


@pytest.fixture
def sample_file(work_dir) -> Path:
    """Create a test file with content."""
    path = work_dir / "notes.txt"
    path.write_bytes(b"Original content\n")
    return path


@pytest.fixture
def log_messages():
    """Capture loguru records as 'LEVEL: message' strings."""
    messages = []
    handler_id = logger.add(
        lambda message: messages.append(f"{message.record['level'].name}: {message.record['message']}"),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
