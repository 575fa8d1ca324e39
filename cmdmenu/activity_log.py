"""Append-only activity log of executed commands"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from .exceptions import PersistenceError
from .models import CommandExecution

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class ActivityLog:
    """
    Plain UTF-8 text file that is only ever appended to, one record at a
    time, so ``tail -f`` readers can follow it.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _append(self, text: str) -> None:
        try:
            with open(self.path, "a", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as e:
            raise PersistenceError(f"Failed to write activity log {self.path}: {e}",
                                   filepath=self.path, operation="append")

    def start_session(self, when: Optional[datetime] = None) -> None:
        when = when or datetime.now()
        self._append(f"Start menu: {when.strftime(TIMESTAMP_FORMAT)}\n")

    def record(self, execution: CommandExecution) -> None:
        output = execution.output
        if output and not output.endswith("\n"):
            output += "\n"
        self._append(
            f"\nStart: {execution.started_at.strftime(TIMESTAMP_FORMAT)}\n"
            f"Executing: {execution.display_name}\n"
            f"Command: {execution.resolved_command}\n"
            f"{output}"
        )
