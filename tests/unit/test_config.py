import pytest
from PyQt6.QtCore import QSettings

from core.config import AppConfig


@pytest.fixture
def config():
    # Dedicated scope so the real configuration is never touched
    settings = QSettings("ArticleShelf", "TestConfig")
    settings.clear()

    app_config = AppConfig()
    app_config.settings = settings
    yield app_config
    settings.clear()


def test_defaults(config):
    assert config.get_log_level() == "WARNING"
    assert config.get_log_components() == {}
    assert config.get_run_mode() is None


def test_set_get_values(config):
    config.set_log_level("debug")
    assert config.get_log_level() == "DEBUG"

    config.set_log_components({"vault": "DEBUG", "db.sql": "INFO"})
    assert config.get_log_components() == {"vault": "DEBUG", "db.sql": "INFO"}


def test_run_mode_override(config):
    config.set_run_mode("Packaged")
    assert config.get_run_mode() == "packaged"

    config.set_run_mode(None)
    assert config.get_run_mode() is None


def test_invalid_values_fall_back(config):
    config._set_setting("Storage", AppConfig.KEY_RUN_MODE, "cloud")
    assert config.get_run_mode() is None

    config._set_setting("Logging", AppConfig.KEY_LOG_COMPONENTS, "{not json")
    assert config.get_log_components() == {}


def test_profile_isolates_app_id():
    cfg = AppConfig(profile="unittest")
    try:
        assert cfg.active_id == "articleshelf-unittest"
        assert cfg.get_data_dir().name == "articleshelf-unittest"
        assert cfg.get_config_dir().name == "articleshelf-unittest"
        assert cfg.get_log_file_path() == cfg.get_data_dir() / "app.log"
    finally:
        AppConfig._active_profile = None
