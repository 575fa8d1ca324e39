"""
Tests for the tmux log viewer
"""

import io
import subprocess
import pytest
from unittest.mock import patch
from rich.console import Console
from cmdmenu.log_viewer import TmuxLogViewer


class FakeTmux:
    """Stands in for subprocess.run, failing the tmux subcommands listed"""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append(command[1:])
        code = 1 if command[1] in self.failing else 0
        return subprocess.CompletedProcess(command, code, stdout="", stderr="")

    def subcommands(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def viewer():
    return TmuxLogViewer("/tmp/menu log.log", console=Console(file=io.StringIO()))


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("cmdmenu.log_viewer.time.sleep"):
        yield


def test_open_without_tmux_is_noop(viewer):
    with patch("cmdmenu.log_viewer.shutil.which", return_value=None), \
         patch("cmdmenu.log_viewer.subprocess.run") as run:
        assert viewer.open() is False
    run.assert_not_called()


def test_detached_session_created_and_closed(viewer, monkeypatch):
    monkeypatch.delenv("TMUX", raising=False)
    tmux = FakeTmux(failing={"has-session"})
    with patch("cmdmenu.log_viewer.shutil.which", return_value="/usr/bin/tmux"), \
         patch("cmdmenu.log_viewer.subprocess.run", tmux):
        assert viewer.open() is True
        assert viewer.created_session == "MenuLogSession"
        send_keys = [c for c in tmux.calls if c[0] == "send-keys"][0]
        assert "tail -f '/tmp/menu log.log'; exec bash" in send_keys

        viewer.close()
    assert tmux.calls[-1] == ["kill-session", "-t", "MenuLogSession"]
    assert viewer.created_session is None


def test_existing_session_window_is_reused(viewer, monkeypatch):
    monkeypatch.delenv("TMUX", raising=False)
    tmux = FakeTmux()
    with patch("cmdmenu.log_viewer.shutil.which", return_value="/usr/bin/tmux"), \
         patch("cmdmenu.log_viewer.subprocess.run", tmux):
        assert viewer.open() is True
        viewer.close()
    assert "new-session" not in tmux.subcommands()
    assert "kill-session" not in tmux.subcommands()


def test_inside_tmux_creates_window(viewer, monkeypatch):
    monkeypatch.setenv("TMUX", "/tmp/tmux-1000/default,1,0")
    tmux = FakeTmux(failing={"select-window"})
    with patch("cmdmenu.log_viewer.shutil.which", return_value="/usr/bin/tmux"), \
         patch("cmdmenu.log_viewer.subprocess.run", tmux):
        assert viewer.open() is True
        assert viewer.created_window == "Log"
        viewer.close()
    assert tmux.calls[-1] == ["kill-window", "-t", ":Log"]


def test_tmux_errors_are_swallowed(viewer, monkeypatch):
    monkeypatch.delenv("TMUX", raising=False)
    with patch("cmdmenu.log_viewer.shutil.which", return_value="/usr/bin/tmux"), \
         patch("cmdmenu.log_viewer.subprocess.run", side_effect=OSError("boom")):
        assert viewer.open() is False
    assert viewer.created_session is None
