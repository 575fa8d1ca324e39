"""
Tests for configuration management
"""

import json
import os
import pytest
from cmdmenu.config import ConfigManager
from cmdmenu.exceptions import ConfigurationError


@pytest.fixture
def home(tmp_path, monkeypatch):
    for key in list(os.environ):
        if key.startswith("CMDMENU_"):
            monkeypatch.delenv(key)
    return tmp_path


def test_defaults_and_paths(home):
    settings = ConfigManager(home)
    assert settings.get("keys.escape_timeout") == 0.1
    assert settings.menu_dir() == home / "menu"
    assert settings.variables_path() == home / "menu" / "menu.cfg"
    assert settings.activity_log_path() == home / "menu" / "menu.log"
    assert settings.logs_dir() == home / "logs"


def test_file_overrides_are_deep_merged(home):
    (home / "config.json").write_text(json.dumps({"executor": {"shell": "/bin/zsh"}}))
    settings = ConfigManager(home)
    assert settings.get("executor.shell") == "/bin/zsh"
    assert settings.get("log_viewer.session_name") == "MenuLogSession"


def test_environment_overrides(home, monkeypatch):
    monkeypatch.setenv("CMDMENU_MENU_DIRECTORY", str(home / "elsewhere"))
    monkeypatch.setenv("CMDMENU_LOG_VIEWER_ENABLED", "false")
    monkeypatch.setenv("CMDMENU_KEYS_ESCAPE_TIMEOUT", "0.25")
    settings = ConfigManager(home)
    assert settings.menu_dir() == home / "elsewhere"
    assert settings.get("log_viewer.enabled") is False
    assert settings.get("keys.escape_timeout") == 0.25


def test_defaults_are_not_shared_between_instances(home):
    first = ConfigManager(home)
    first.set("menu.separator", "==")
    assert ConfigManager(home).get("menu.separator") == "----------------"


def test_save_and_reload(home):
    settings = ConfigManager(home)
    settings.set("ui.animate_title", False)
    settings.save()
    settings.reload(home)
    assert settings.get("ui.animate_title") is False


def test_validate_creates_directories(home):
    settings = ConfigManager(home)
    settings.validate()
    assert (home / "menu").is_dir()
    assert (home / "logs").is_dir()


def test_validate_rejects_bad_timeout(home):
    settings = ConfigManager(home)
    settings.set("keys.escape_timeout", 0)
    with pytest.raises(ConfigurationError):
        settings.validate()
