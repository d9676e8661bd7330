"""Tests for configuration management."""

from pathlib import Path

import pytest

from pantry_sync.config import ConfigManager
from pantry_sync.models import StorageLocation


@pytest.fixture
def config_file(tmp_path):
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text("""
[data]
storage_dir = "/custom/data"

[sync]
expiring_threshold_days = 5
image_folder = "pantry"

[defaults]
user = "francisco"
location = "refrigerator"
category = "Produce"

[logging]
level = "debug"
""")
    return config_path


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_load_config_file(self, config_file):
        """Load configuration from file."""
        manager = ConfigManager(config_path=config_file)

        assert manager.data.storage_dir == Path("/custom/data")

    def test_sync_config(self, config_file):
        manager = ConfigManager(config_path=config_file)

        assert manager.sync.expiring_threshold_days == 5
        assert manager.sync.image_folder == "pantry"
        assert manager.sync.image_content_type == "image/jpeg"

    def test_defaults_config(self, config_file):
        """Load defaults configuration."""
        manager = ConfigManager(config_path=config_file)

        assert manager.defaults.user == "francisco"
        assert manager.defaults.location == StorageLocation.REFRIGERATOR
        assert manager.defaults.category == "Produce"
        assert manager.defaults.unit == "item"

    def test_logging_level_uppercased(self, config_file):
        manager = ConfigManager(config_path=config_file)

        assert manager.logging.level == "DEBUG"

    def test_missing_file_uses_defaults(self, tmp_path):
        """Missing config file falls back to defaults."""
        manager = ConfigManager(config_path=tmp_path / "nope.toml")

        assert manager.data.storage_dir == Path.home() / "pantry-sync" / "data"
        assert manager.sync.expiring_threshold_days == 3
        assert manager.defaults.user is None
        assert manager.defaults.location == StorageLocation.PANTRY
        assert manager.logging.level == "WARNING"

    def test_partial_file(self, tmp_path):
        """Sections left out keep their defaults."""
        config_path = tmp_path / "config.toml"
        config_path.write_text('[defaults]\nunit = "bag"\n')
        manager = ConfigManager(config_path=config_path)

        assert manager.defaults.unit == "bag"
        assert manager.sync.image_folder == "inventory"
        assert manager.data.storage_dir == Path("~/pantry-sync/data").expanduser()

    def test_storage_dir_expands_home(self, tmp_path):
        config_path = tmp_path / "config.toml"
        config_path.write_text('[data]\nstorage_dir = "~/elsewhere"\n')
        manager = ConfigManager(config_path=config_path)

        assert manager.data.storage_dir == Path.home() / "elsewhere"

    def test_get_dot_path(self, config_file):
        """Get config values by dot-notation path."""
        manager = ConfigManager(config_path=config_file)

        assert manager.get("sync.image_folder") == "pantry"
        assert manager.get("defaults.location") == StorageLocation.REFRIGERATOR
        assert manager.get("nonexistent.path", "fallback") == "fallback"
        assert manager.get("defaults.nope", 7) == 7
