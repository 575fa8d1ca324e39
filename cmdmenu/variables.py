"""
Persistent placeholder values.

Values typed at a placeholder prompt survive restarts through a flat
``name=value`` file. The file is rebuilt in full on every save from the
placeholders the menu definitions currently use and the values exported in
the environment, so names that are no longer used or are now empty drop out.
"""

import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, MutableMapping, Optional

from .exceptions import PersistenceError
from .logger import logger
from .models import VariableBinding, VariableOrigin

log = logger.get_logger("variables")

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


class VariableStore:
    """``name=value`` store synchronised with the process environment"""

    def __init__(self, path, definitions, environ: Optional[MutableMapping[str, str]] = None):
        self.path = Path(path)
        self.definitions = definitions
        self.environ = os.environ if environ is None else environ
        self.origins: Dict[str, VariableOrigin] = {}

    def read(self) -> List[VariableBinding]:
        """Parse the store file without touching the environment"""
        if not self.path.is_file():
            return []
        try:
            lines = self.path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}", filepath=self.path, operation="read")

        bindings = []
        for line_num, line in enumerate(lines, start=1):
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            name, sep, value = line.partition("=")
            name = name.strip()
            if not sep or not NAME_PATTERN.match(name):
                log.debug(f"Skipping malformed line {line_num} in {self.path}")
                continue
            bindings.append(VariableBinding(name, value.strip(), VariableOrigin.STORED))
        return bindings

    def load(self) -> List[VariableBinding]:
        """Export every stored binding into the environment"""
        bindings = self.read()
        for binding in bindings:
            self.environ[binding.name] = binding.value
            self.origins[binding.name] = VariableOrigin.STORED
        log.info(f"Loaded {len(bindings)} variable(s) from {self.path}")
        return bindings

    def bindings(self) -> List[VariableBinding]:
        """Current non-empty values of every placeholder the menus use"""
        return [
            VariableBinding(name, self.environ[name], self.origins.get(name, VariableOrigin.ENVIRONMENT))
            for name in self.definitions.placeholder_names()
            if self.environ.get(name)
        ]

    def record_entered(self, names: Iterable[str]) -> None:
        """Mark values typed at a prompt in this session"""
        for name in names:
            self.origins[name] = VariableOrigin.USER_ENTERED

    def scan_and_save(self) -> List[VariableBinding]:
        """Rewrite the store from the current placeholders and environment"""
        bindings = self.bindings()
        content = "".join(f"{b.name}={b.value}\n" for b in bindings)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to save variables to {self.path}: {e}",
                                   filepath=self.path, operation="write")
        log.debug(f"Saved {len(bindings)} variable(s) to {self.path}")
        return bindings
