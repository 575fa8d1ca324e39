"""
Tests for application start-up and shutdown
"""

import io
import os
import pytest
from unittest.mock import MagicMock
from rich.console import Console
from cmdmenu.app import MenuShellApp
from cmdmenu.config import ConfigManager


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.delenv("CMDMENU_MENU_DIRECTORY", raising=False)
    settings = ConfigManager(tmp_path)
    settings.set("ui.animate_title", False)
    return settings


@pytest.fixture
def shell_app(settings):
    return MenuShellApp(settings, log_viewer=False, console=Console(file=io.StringIO()))


def test_prepare_creates_files_and_loads_variables(shell_app, settings, monkeypatch):
    monkeypatch.setenv("cmdmenu_test_host", "unset")
    settings.menu_dir().mkdir(parents=True)
    settings.variables_path().write_text("cmdmenu_test_host=10.1.1.1\n")

    shell_app.prepare()

    assert settings.logs_dir().is_dir()
    assert settings.activity_log_path().read_text().startswith("Start menu: ")
    assert os.environ["cmdmenu_test_host"] == "10.1.1.1"


def test_log_viewer_disabled(shell_app):
    assert shell_app.viewer is None


def test_run_builds_root_and_closes_viewer(settings, monkeypatch):
    settings.menu_dir().mkdir(parents=True)
    (settings.menu_dir() / "tools.menu").write_text("Date=date\n")
    app = MenuShellApp(settings, console=Console(file=io.StringIO()))
    app.viewer = MagicMock()
    engine = MagicMock()
    monkeypatch.setattr(app, "build_engine", lambda: engine)

    app.run()

    root = engine.run.call_args[0][0]
    assert [e.display_name for e in root][0] == "tools"
    app.viewer.open.assert_called_once()
    app.viewer.close.assert_called_once()


def test_viewer_closed_even_if_engine_fails(settings, monkeypatch):
    app = MenuShellApp(settings, console=Console(file=io.StringIO()))
    app.viewer = MagicMock()
    engine = MagicMock()
    engine.run.side_effect = RuntimeError("boom")
    monkeypatch.setattr(app, "build_engine", lambda: engine)

    with pytest.raises(RuntimeError):
        app.run()
    app.viewer.close.assert_called_once()
