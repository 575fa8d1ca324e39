#!/usr/bin/env python3
"""
Command execution for menu actions.
Runs a resolved command through the shell, mirrors its output to the
terminal while capturing it, and records the run in the activity log.
"""

import codecs
import subprocess
import sys
from datetime import datetime
from typing import Callable, List, Optional, TextIO

from .activity_log import ActivityLog
from .exceptions import PersistenceError
from .logger import logger
from .models import CommandExecution
from .renderer import MenuRenderer

log = logger.get_logger("executor")

CHUNK_SIZE = 4096
EXIT_NOT_STARTED = 127


class Executor:
    """Runs resolved commands, tees their output and logs the run"""

    def __init__(self, activity_log: ActivityLog, renderer: MenuRenderer,
                 shell: str = "/bin/bash", stream: Optional[TextIO] = None,
                 pause: Optional[Callable[[], None]] = None):
        self.activity_log = activity_log
        self.renderer = renderer
        self.shell = shell
        self.stream = stream
        self.pause = pause or renderer.press_enter

    def run(self, resolved_command: str, display_name: str, template: str = "") -> int:
        """Execute ``resolved_command`` and return its exit status"""
        execution = CommandExecution(
            template=template or resolved_command,
            resolved_command=resolved_command,
            display_name=display_name,
            started_at=datetime.now(),
        )

        self.renderer.display_execution_header(display_name, resolved_command)
        log.info(f"Running {display_name}: {resolved_command}")

        execution.output, execution.exit_status = self._execute(resolved_command)
        log.info(f"{display_name} finished with exit status {execution.exit_status}")

        try:
            self.activity_log.record(execution)
        except PersistenceError as e:
            log.error(f"{e.code}: {e.message}", extra={"details": e.details})
            self.renderer.display_error(e.message)

        self.pause()
        return execution.exit_status

    def _execute(self, command: str):
        out = self.stream or sys.stdout
        try:
            process = subprocess.Popen(
                command,
                shell=True,
                executable=self.shell,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            message = f"Failed to start {self.shell}: {e}\n"
            out.write(message)
            out.flush()
            return message, EXIT_NOT_STARTED

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        captured: List[str] = []
        with process.stdout:
            for chunk in iter(lambda: process.stdout.read1(CHUNK_SIZE), b""):
                text = decoder.decode(chunk)
                if text:
                    out.write(text)
                    out.flush()
                    captured.append(text)
            tail = decoder.decode(b"", final=True)
            if tail:
                out.write(tail)
                captured.append(tail)
        return "".join(captured), process.wait()
