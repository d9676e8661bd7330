"""Configuration management for Pantry Sync."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .models import StorageLocation


@dataclass
class DataConfig:
    """Local data storage configuration."""

    storage_dir: Path


@dataclass
class SyncConfig:
    """Sync engine configuration."""

    expiring_threshold_days: int = 3
    image_folder: str = "inventory"
    image_content_type: str = "image/jpeg"


@dataclass
class DefaultsConfig:
    """Default values configuration."""

    user: str | None = None
    location: StorageLocation = StorageLocation.PANTRY
    unit: str = "item"
    category: str = "Uncategorized"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    sync: SyncConfig
    defaults: DefaultsConfig
    logging: LoggingConfig


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()

    @property
    def data(self) -> DataConfig:
        return self._config.data

    @property
    def sync(self) -> SyncConfig:
        return self._config.sync

    @property
    def defaults(self) -> DefaultsConfig:
        return self._config.defaults

    @property
    def logging(self) -> LoggingConfig:
        return self._config.logging

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "pantry-sync" / "config.toml",
            Path.home() / ".pantry-sync" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        # Return default location if none found
        return Path.home() / ".config" / "pantry-sync" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        sync = data.get("sync", {})
        defaults = data.get("defaults", {})
        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data.get("data", {}).get("storage_dir", "~/pantry-sync/data")
                ).expanduser(),
            ),
            sync=SyncConfig(
                expiring_threshold_days=int(sync.get("expiring_threshold_days", 3)),
                image_folder=sync.get("image_folder", "inventory"),
                image_content_type=sync.get("image_content_type", "image/jpeg"),
            ),
            defaults=DefaultsConfig(
                user=defaults.get("user"),
                location=StorageLocation(defaults.get("location", "pantry")),
                unit=defaults.get("unit", "item"),
                category=defaults.get("category", "Uncategorized"),
            ),
            logging=LoggingConfig(
                level=str(data.get("logging", {}).get("level", "WARNING")).upper(),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(
            data=DataConfig(storage_dir=Path.home() / "pantry-sync" / "data"),
            sync=SyncConfig(),
            defaults=DefaultsConfig(),
            logging=LoggingConfig(),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'sync.image_folder'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value: Any = self._config

        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            elif isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default
