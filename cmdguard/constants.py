"""
Constants for the cmdguard application.
"""
from pathlib import Path
import os

# Application information
APP_NAME = "cmdguard"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Pre-execution safety gate for assistant-proposed shell commands"

# Paths
CONFIG_DIR = Path(os.path.expanduser("~/.config/cmdguard"))
CONFIG_FILE = CONFIG_DIR / "config.toml"
LOG_DIR = CONFIG_DIR / "logs"

# Environment variable overrides
ENV_BACKUP_DIR = "CMDGUARD_BACKUP_DIR"
ENV_KEEP_COUNT = "CMDGUARD_KEEP_COUNT"

# Logging
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[name]} | {message}"
LOG_ROTATION = "10 MB"
LOG_RETENTION = "10 days"

# Backup store
BACKUP_DIR_NAME = ".cmdguard_backups"
BACKUP_INDEX_FILE = "backup_index.json"
DEFAULT_KEEP_COUNT = 50
HASH_CHUNK_SIZE = 64 * 1024
