"""
Optional live view of the activity log in a tmux window.

Inside tmux a ``Log`` window is added to the current session; outside tmux
a detached session is created that the user can attach to. Only what this
process created is torn down on exit. Every tmux failure is logged and
ignored: the menu works the same without a viewer.
"""

import os
import shlex
import shutil
import subprocess
import time
from typing import List, Optional

from rich.console import Console

from .logger import logger

log = logger.get_logger("log_viewer")


class TmuxLogViewer:

    def __init__(self, log_path, session_name: str = "MenuLogSession",
                 window_name: str = "Log", console: Optional[Console] = None):
        self.log_path = log_path
        self.session_name = session_name
        self.window_name = window_name
        self.console = console or Console(highlight=False)
        self.created_session: Optional[str] = None
        self.created_window: Optional[str] = None

    @staticmethod
    def in_tmux() -> bool:
        return bool(os.environ.get("TMUX"))

    @staticmethod
    def available() -> bool:
        return shutil.which("tmux") is not None

    def _tmux(self, *args: str) -> bool:
        command: List[str] = ["tmux", *args]
        try:
            result = subprocess.run(command, capture_output=True, text=True, timeout=5)
        except (OSError, subprocess.SubprocessError) as e:
            log.debug(f"tmux call failed {command}: {e}")
            return False
        if result.returncode != 0:
            log.debug(f"tmux {' '.join(args)} exited with {result.returncode}: {result.stderr.strip()}")
        return result.returncode == 0

    def _tail_command(self) -> str:
        return f"tail -f {shlex.quote(str(self.log_path))}; exec bash"

    def _start_tail(self, target: str) -> None:
        time.sleep(0.1)
        self._tmux("send-keys", "-t", target, self._tail_command(), "C-m")

    def open(self) -> bool:
        """Show the activity log in a tmux window; ``False`` if tmux is unavailable"""
        if not self.available():
            log.info("tmux not found, log viewer disabled")
            return False
        if self.in_tmux():
            return self._open_in_current_session()
        return self._open_detached()

    def _open_in_current_session(self) -> bool:
        window = self.window_name
        self._tmux("rename-window", "Main")
        if self._tmux("select-window", "-t", f":{window}"):
            self.console.print(f"[bold green]Switching to existing tmux window '{window}' in current session.[/]")
            return True

        self.console.print(f"[bold green]Creating new tmux window '{window}' for menu log...[/]")
        if not self._tmux("new-window", "-d", "-n", window, "bash"):
            return False
        self._start_tail(window)
        self.console.print("[bright_yellow]New window created. Switch to it: [bold]Ctrl+b p/n[/bold] "
                           "or [bold]Ctrl+b <number>[/bold][/]")
        self.created_window = window
        return True

    def _open_detached(self) -> bool:
        session, window = self.session_name, self.window_name
        target = f"{session}:{window}"
        attach_hint = f"[bright_yellow]To view: [bold]tmux attach-session -t {target}[/bold][/]"

        if self._tmux("has-session", "-t", session):
            if self._tmux("list-panes", "-t", target):
                self.console.print(f"[bold green]Existing detached tmux session '{session}' "
                                   f"with window '{window}' found.[/]")
                self.console.print(attach_hint)
                return True
            self.console.print(f"[bold green]Creating new window '{window}' in existing session '{session}'...[/]")
            if not self._tmux("new-window", "-t", session, "-d", "-n", window, "bash"):
                return False
            self._start_tail(target)
            self.created_window = window
        else:
            self.console.print(f"[bold green]Creating new detached tmux session '{session}' "
                               f"with window '{window}' for menu log...[/]")
            if not self._tmux("new-session", "-s", session, "-d", "-n", window, "bash"):
                return False
            self._start_tail(target)
            self.created_session = session
        self.console.print(attach_hint)
        return True

    def close(self) -> None:
        """Kill the session or window opened by :meth:`open`, if any"""
        if self.created_session:
            self.console.print(f"[yellow]Closing detached tmux session: {self.created_session}[/]")
            self._tmux("kill-session", "-t", self.created_session)
            self.created_session = None
        elif self.created_window:
            target = f":{self.created_window}" if self.in_tmux() else f"{self.session_name}:{self.created_window}"
            self.console.print(f"[yellow]Closing tmux window: {self.created_window}[/]")
            self._tmux("kill-window", "-t", target)
            self.created_window = None
