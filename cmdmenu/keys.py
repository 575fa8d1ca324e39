"""
Keyboard decoding for menu navigation.

The terminal is switched to raw mode only while one key is being read,
so prompts and child commands always see a cooked terminal.
"""

import os
import select
import sys
import termios
import tty
from contextlib import contextmanager
from enum import Enum
from typing import Optional

from .logger import logger

log = logger.get_logger("keys")

ESC = b"\x1b"
CTRL_C = b"\x03"
ENTER_BYTES = (b"\r", b"\n", b"")
BACK_BYTES = (b"\x7f", b"\x08")
ARROWS = {
    b"[A": "UP",
    b"[B": "DOWN",
}


class NavigationEvent(Enum):
    UP = "up"
    DOWN = "down"
    CONFIRM = "confirm"
    BACK = "back"
    NOOP = "noop"


class TerminalByteSource:
    """Reads single bytes from a terminal file descriptor in raw mode"""

    def __init__(self, fd: Optional[int] = None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved = None

    @contextmanager
    def raw(self):
        """Keep the terminal in raw mode until the block exits; nests"""
        if self._saved is not None:
            yield
            return
        self._saved = termios.tcgetattr(self.fd)
        try:
            tty.setraw(self.fd, termios.TCSANOW)
            yield
        finally:
            termios.tcsetattr(self.fd, termios.TCSANOW, self._saved)
            self._saved = None

    def read(self, timeout: Optional[float] = None) -> Optional[bytes]:
        """Return one byte, or ``None`` if nothing arrived within ``timeout``"""
        with self.raw():
            if timeout is not None:
                ready, _, _ = select.select([self.fd], [], [], float(timeout))
                if not ready:
                    return None
            # os.read avoids Python-level buffering, which select() cannot see
            data = os.read(self.fd, 1)
        if not data and timeout is None:
            raise EOFError("stdin closed")
        return data


class KeyDecoder:
    """Turns raw terminal bytes into one :class:`NavigationEvent` per call"""

    def __init__(self, source, escape_timeout: float = 0.1):
        self.source = source
        self.escape_timeout = escape_timeout

    def read_event(self) -> NavigationEvent:
        # The terminal stays raw across every byte of one key
        with self.source.raw():
            return self._decode(self.source.read(None))

    def _decode(self, first: Optional[bytes]) -> NavigationEvent:
        if first == CTRL_C:
            raise KeyboardInterrupt
        if first in ENTER_BYTES:
            return NavigationEvent.CONFIRM
        if first in BACK_BYTES:
            return NavigationEvent.BACK
        if first == ESC:
            return self._read_escape()
        return NavigationEvent.NOOP

    def _read_escape(self) -> NavigationEvent:
        tail = b""
        for _ in range(2):
            byte = self.source.read(self.escape_timeout)
            if not byte:
                break
            tail += byte
        name = ARROWS.get(tail)
        if name is None:
            # A lone Escape or an unknown sequence is dropped, never buffered
            log.debug(f"Ignoring escape sequence {tail!r}")
            return NavigationEvent.NOOP
        return NavigationEvent[name]
