"""
Command template resolution.

A template such as ``nmap -p <port> <host>`` is turned into a runnable
command by asking for each ``<name>`` placeholder once, offering the value
already exported in the environment as the default.
"""

import os
import re
from typing import Callable, Dict, List, MutableMapping, Optional, Set, Tuple

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from .logger import logger

log = logger.get_logger("templates")

PLACEHOLDER_PATTERN = re.compile(r"<([A-Za-z0-9_]+)>")

PromptFunc = Callable[[str, str], str]


def placeholder_names(text: str) -> List[str]:
    """Distinct placeholder names in ``text``, in order of first appearance"""
    seen: List[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(text):
        if match.group(1) not in seen:
            seen.append(match.group(1))
    return seen


def ask_variable(name: str, current: str, console: Optional[Console] = None) -> str:
    """Prompt for a placeholder value; an empty answer returns ``""``"""
    message = f"Enter value for '{name}'"
    if current:
        message += f" (default: {escape(current)})"
    return Prompt.ask(message, console=console, default="", show_default=False)


class TemplateResolver:
    """Expands ``<name>`` placeholders using the environment and the user"""

    def __init__(self, prompt: Optional[PromptFunc] = None,
                 environ: Optional[MutableMapping[str, str]] = None,
                 console: Optional[Console] = None):
        self.console = console or Console(highlight=False)
        self.prompt = prompt or (lambda name, current: ask_variable(name, current, self.console))
        self.environ = os.environ if environ is None else environ
        self.entered: List[str] = []

    def resolve(self, template: str) -> Tuple[str, bool]:
        """
        Resolve every placeholder in ``template``.

        Returns the resolved command and whether any placeholder was present.
        Text coming from a value is scanned again, so a value may introduce
        new placeholders. A name whose value is still being expanded is left
        as ``<name>`` where it reappears, which ends self-referencing values.
        """
        resolved: Dict[str, str] = {}
        self.entered = []
        command = self._expand(template, resolved, set())

        if resolved:
            log.debug(f"Resolved placeholders {sorted(resolved)} in {template!r}")
        return command, bool(resolved)

    def _expand(self, text: str, resolved: Dict[str, str], expanding: Set[str]) -> str:
        parts = []
        position = 0
        for match in PLACEHOLDER_PATTERN.finditer(text):
            name = match.group(1)
            parts.append(text[position:match.start()])
            if name in expanding:
                parts.append(match.group(0))
            elif name in resolved:
                parts.append(resolved[name])
            else:
                value = self._resolve_name(name)
                expanding.add(name)
                resolved[name] = self._expand(value, resolved, expanding)
                expanding.discard(name)
                parts.append(resolved[name])
            position = match.end()
        parts.append(text[position:])
        return "".join(parts)

    def _resolve_name(self, name: str) -> str:
        current = self.environ.get(name, "")
        answer = self.prompt(name, current)

        if not answer:
            value = current
            if value:
                self.console.print(f"[yellow]Using default value for '{name}': {escape(value)}[/]")
            else:
                self.console.print(f"[yellow]No value provided for '{name}', leaving empty.[/]")
        else:
            value = answer
            self.entered.append(name)
            self.console.print(f"[yellow]Using user provided value for '{name}': {escape(value)}[/]")

        # Later prompts in this session default to the value just chosen
        self.environ[name] = value
        return value
