"""
Menu definition files.

Every ``*.menu`` file in the menu directory becomes an item of the main
menu. Each line of a definition is ``name=command``:

    # comment
    Ping host=ping -c 4 <host>
    ----=
    Web tools=submenu:web.subm
    Back=exit_menu

``submenu:<file>`` links to another definition in the same directory,
``exit_menu`` returns to the parent menu and an empty command renders the
name as a separator line.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from .exceptions import DefinitionLoadError
from .logger import logger
from .models import SEPARATOR_TEXT, EntryKind, MenuEntry, MenuModel
from .templates import placeholder_names

log = logger.get_logger("definitions")

MENU_SUFFIX = ".menu"
SUBMENU_DIRECTIVE = "submenu:"
BACK_DIRECTIVE = "exit_menu"


def classify(name: str, command: str) -> MenuEntry:
    """Build the entry for one ``name=command`` pair"""
    if not command:
        return MenuEntry(name, EntryKind.SEPARATOR)
    if command == BACK_DIRECTIVE:
        return MenuEntry(name, EntryKind.BACK)
    if command.startswith(SUBMENU_DIRECTIVE):
        return MenuEntry(name, EntryKind.SUBMENU, command[len(SUBMENU_DIRECTIVE):].strip())
    return MenuEntry(name, EntryKind.ACTION, command)


def parse_lines(lines: Iterable[str], source: str = "<menu>") -> Tuple[List[Tuple[str, str]], List[str]]:
    """
    Parse definition lines into ``(name, command)`` pairs.

    Returns the pairs and a list of warnings for skipped lines.
    """
    pairs: List[Tuple[str, str]] = []
    warnings: List[str] = []
    for line_num, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        name, _, command = line.partition("=")
        name = name.strip()
        command = command.strip()
        if not name:
            warnings.append(f"Skipping line {line_num} in {source} (missing command name).")
            continue
        pairs.append((name, command))
    return pairs, warnings


class MenuDirectory:
    """Definition source backed by a directory of ``*.menu`` files"""

    def __init__(self, directory, separator: str = SEPARATOR_TEXT):
        self.directory = Path(directory)
        self.separator = separator
        self._scanned: Set[Path] = set()

    def menu_files(self) -> List[Path]:
        if not self.directory.is_dir():
            log.warning(f"Menu directory '{self.directory}' not found. Dynamic menus will not be loaded.")
            return []
        return sorted(p for p in self.directory.glob(f"*{MENU_SUFFIX}") if p.is_file())

    def path_for(self, identifier: str) -> Path:
        return self.directory / identifier

    def read_pairs(self, identifier: str) -> List[Tuple[str, str]]:
        """Read one definition, raising :class:`DefinitionLoadError` if unreadable"""
        path = self.path_for(identifier)
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as handle:
                pairs, warnings = parse_lines(handle, str(path))
        except FileNotFoundError:
            raise DefinitionLoadError(f"MENU file '{path}' not found.", source=path, reason="missing")
        except OSError as e:
            raise DefinitionLoadError(f"Failed to load commands from {path}.", source=path, reason=str(e))

        for warning in warnings:
            log.warning(warning)
        self._scanned.add(path)
        return pairs

    def load(self, identifier: str, title: Optional[str] = None) -> MenuModel:
        """Load the menu for ``identifier`` (a file name in the directory)"""
        pairs = self.read_pairs(identifier)
        model = MenuModel(title or Path(identifier).stem,
                          (classify(name, command) for name, command in pairs),
                          source=identifier)
        if model.is_empty():
            raise DefinitionLoadError(
                f"No commands found or correctly parsed in '{self.path_for(identifier)}'.",
                source=self.path_for(identifier),
                reason="empty"
            )
        log.debug(f"Loaded {len(model)} entries from {identifier}")
        return model

    def build_root(self) -> MenuModel:
        """Main menu: one link per definition file, then Variables and Exit"""
        entries = [MenuEntry(path.stem, EntryKind.SUBMENU, path.name) for path in self.menu_files()]
        if entries:
            entries.append(MenuEntry.separator(self.separator))
            entries.append(MenuEntry("Variables", EntryKind.VARIABLES))
        entries.append(MenuEntry.back("Exit"))
        return MenuModel("Main menu", entries)

    def placeholder_names(self) -> List[str]:
        """Placeholders used by every root-level definition and any loaded submenu"""
        paths = list(self.menu_files())
        paths.extend(sorted(p for p in self._scanned if p not in paths))

        names: List[str] = []
        for path in paths:
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                log.debug(f"Skipping {path} while scanning placeholders: {e}")
                continue
            pairs, _ = parse_lines(text.splitlines(), str(path))
            for _, command in pairs:
                for name in placeholder_names(command):
                    if name not in names:
                        names.append(name)
        return names
