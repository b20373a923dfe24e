# cmdguard/config.py
"""
Configuration management for cmdguard.
Uses TOML format for configuration files.
"""
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# --- TOML Library Handling ---

# Reader (tomllib for >= 3.11, tomli for < 3.11)
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Writer
import tomli_w

# --- Pydantic and Environment Handling ---
from pydantic import BaseModel, Field, ValidationError
from dotenv import load_dotenv

from cmdguard.constants import CONFIG_FILE, DEFAULT_KEEP_COUNT, ENV_BACKUP_DIR, ENV_KEEP_COUNT
from cmdguard.utils.logging import get_logger

logger = get_logger(__name__)

# --- Configuration Models ---

class BackupConfig(BaseModel):
    """Backup store settings."""
    backup_dir: Optional[Path] = Field(None, description="Backup root directory; defaults to ~/.cmdguard_backups")
    keep_count: int = Field(DEFAULT_KEEP_COUNT, ge=0, description="Number of backups kept by cleanup")
    auto_cleanup: bool = Field(False, description="Prune old backups after each new backup")
    verify_on_restore: bool = Field(False, description="Check content digests before restoring")


class AppConfig(BaseModel):
    """Application configuration settings."""
    backup: BackupConfig = Field(default_factory=BackupConfig, description="Backup configuration")
    debug: bool = Field(False, description="Enable debug mode")


# --- Configuration Manager ---

class ConfigManager:
    """Manages the configuration for cmdguard using TOML."""

    def __init__(self, config_file: Path = CONFIG_FILE):
        """Initializes the ConfigManager with default settings."""
        self.config_file = Path(config_file)
        self._config: AppConfig = AppConfig()
        self._load_environment()

    def _load_environment(self) -> None:
        """Applies overrides from environment variables and a .env file."""
        load_dotenv()  # Load .env file if present
        backup_dir = os.getenv(ENV_BACKUP_DIR)
        if backup_dir:
            self._config.backup.backup_dir = Path(backup_dir).expanduser()

        keep_count = os.getenv(ENV_KEEP_COUNT)
        if keep_count:
            try:
                self._config.backup.keep_count = max(0, int(keep_count))
            except ValueError:
                logger.warning(f"Ignoring non-integer {ENV_KEEP_COUNT}={keep_count!r}")

    def _reset(self) -> None:
        self._config = AppConfig()
        self._load_environment()

    def load_config(self) -> None:
        """Loads configuration from the TOML config file."""
        if not self.config_file.exists():
            logger.debug(f"Configuration file not found at '{self.config_file}'. Using defaults.")
            return

        try:
            logger.debug(f"Loading configuration from: {self.config_file}")
            with open(self.config_file, "rb") as f:  # TOML requires binary read mode
                config_data: Dict[str, Any] = tomllib.load(f)

            if "backup" in config_data and isinstance(config_data["backup"], dict):
                self._config.backup = BackupConfig(**config_data["backup"])

            if "debug" in config_data:
                if isinstance(config_data["debug"], bool):
                    self._config.debug = config_data["debug"]
                else:
                    logger.warning(
                        f"Invalid type for 'debug' in {self.config_file}. "
                        f"Expected boolean, got {type(config_data['debug'])}. Ignoring."
                    )

        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding TOML configuration file ({self.config_file}): {e}")
            logger.error("Using default configuration and environment variables.")
            self._reset()
            return
        except ValidationError as e:
            logger.error(f"Invalid values in configuration file ({self.config_file}): {e}")
            logger.error("Using default configuration and environment variables.")
            self._reset()
            return
        except OSError as e:
            logger.error(f"I/O error accessing configuration file: {e}")
            logger.error("Using default configuration and environment variables.")
            self._reset()
            return

        # Environment variables win over the file
        self._load_environment()

    def save_config(self) -> None:
        """Saves the current configuration to the config file (as TOML)."""
        config_dict = self._config.model_dump(mode="json", exclude_none=True)

        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "wb") as f:
            tomli_w.dump(config_dict, f)
        logger.info(f"Configuration saved to {self.config_file}")

    @property
    def config(self) -> AppConfig:
        """Provides access to the current application configuration."""
        return self._config


# --- Global Instance ---

# The CLI calls config_manager.load_config() before running a command
config_manager = ConfigManager()
