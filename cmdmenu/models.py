"""Menu data model: entries, menus, variable bindings and executions"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Tuple


SEPARATOR_TEXT = "----------------"


class EntryKind(Enum):
    """What selecting an entry does, decided once when the menu is loaded"""
    ACTION = "action"
    SUBMENU = "submenu"
    SEPARATOR = "separator"
    BACK = "back"
    VARIABLES = "variables"


@dataclass(frozen=True)
class MenuEntry:
    """A single row of a menu"""
    display_name: str
    kind: EntryKind
    command_template: str = ""

    @classmethod
    def separator(cls, text: str = SEPARATOR_TEXT) -> "MenuEntry":
        return cls(text, EntryKind.SEPARATOR)

    @classmethod
    def back(cls, text: str = "Back") -> "MenuEntry":
        return cls(text, EntryKind.BACK)

    @property
    def is_separator(self) -> bool:
        return self.kind is EntryKind.SEPARATOR

    @property
    def target(self) -> str:
        """Source identifier referenced by a submenu link"""
        return self.command_template if self.kind is EntryKind.SUBMENU else ""


def _normalize(entries: Iterable[MenuEntry]) -> Tuple[MenuEntry, ...]:
    # Drop leading, trailing and repeated separators so every separator
    # is followed by a selectable entry and index 0 is always selectable.
    result: List[MenuEntry] = []
    pending: Optional[MenuEntry] = None
    for entry in entries:
        if entry.is_separator:
            if result and pending is None:
                pending = entry
            continue
        if pending is not None:
            result.append(pending)
            pending = None
        result.append(entry)
    return tuple(result)


class MenuModel:
    """Ordered, immutable list of menu entries built from one source"""

    def __init__(self, title: str, entries: Iterable[MenuEntry], source: Optional[str] = None):
        self.title = title
        self.source = source
        self.entries = _normalize(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> MenuEntry:
        return self.entries[index]

    def __iter__(self):
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"MenuModel(title={self.title!r}, entries={len(self.entries)})"

    def is_empty(self) -> bool:
        return not self.entries

    def with_back(self, separator: str = SEPARATOR_TEXT) -> "MenuModel":
        """Copy of this menu with a trailing separator and ``Back`` entry"""
        entries = self.entries + (MenuEntry.separator(separator), MenuEntry.back())
        return MenuModel(self.title, entries, self.source)


class VariableOrigin(Enum):
    ENVIRONMENT = "environment"
    STORED = "stored"
    USER_ENTERED = "user_entered"


@dataclass(frozen=True)
class VariableBinding:
    name: str
    value: str
    origin: VariableOrigin


@dataclass
class CommandExecution:
    """One executed command, written once to the activity log"""
    template: str
    resolved_command: str
    display_name: str
    started_at: datetime = field(default_factory=datetime.now)
    output: str = ""
    exit_status: Optional[int] = None
