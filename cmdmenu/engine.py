"""
Menu navigation state machine.

The session is an explicit stack of frames. ``handle_event`` applies one
navigation event to the top frame and reports what happened; ``run`` is the
read-eval loop that redraws, reads the next key and stops on ``EXIT``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .exceptions import DefinitionLoadError, PersistenceError
from .keys import KeyDecoder, NavigationEvent
from .logger import logger
from .models import EntryKind, MenuEntry, MenuModel
from .renderer import MenuRenderer

log = logger.get_logger("engine")


class MenuKind(Enum):
    ROOT = "root"
    SUB = "sub"


class Outcome(Enum):
    STAY = "stay"
    PUSHED = "pushed"
    POPPED = "popped"
    EXIT = "exit"


@dataclass
class Frame:
    model: MenuModel
    selected: int = 0
    kind: MenuKind = MenuKind.SUB
    title: Optional[str] = None

    @property
    def entry(self) -> MenuEntry:
        return self.model[self.selected]

    def move(self, step: int) -> None:
        """Move the selection by ``step`` with wraparound, skipping separators"""
        count = len(self.model)
        if not count:
            return
        index = (self.selected + step) % count
        for _ in range(count):
            if not self.model[index].is_separator:
                break
            index = (index + step) % count
        self.selected = index


@dataclass
class NavigationSession:
    stack: List[Frame] = field(default_factory=list)

    @classmethod
    def start(cls, root: MenuModel) -> "NavigationSession":
        return cls([Frame(root, 0, MenuKind.ROOT)])

    @property
    def top(self) -> Frame:
        return self.stack[-1]

    @property
    def depth(self) -> int:
        return len(self.stack)

    def push(self, frame: Frame) -> None:
        self.stack.append(frame)

    def pop(self) -> Frame:
        frame = self.stack.pop()
        if self.stack:
            self.top.selected = 0
        return frame


class NavigationEngine:
    """Dispatches navigation events to selection changes and actions"""

    def __init__(self, definitions, resolver, store, executor,
                 renderer: MenuRenderer, decoder: Optional[KeyDecoder] = None,
                 separator: Optional[str] = None):
        self.definitions = definitions
        self.resolver = resolver
        self.store = store
        self.executor = executor
        self.renderer = renderer
        self.decoder = decoder
        self.separator = separator or definitions.separator

    def handle_event(self, session: NavigationSession, event: NavigationEvent) -> Outcome:
        frame = session.top
        if event is NavigationEvent.UP:
            frame.move(-1)
        elif event is NavigationEvent.DOWN:
            frame.move(1)
        elif event is NavigationEvent.BACK:
            return self._go_back(session)
        elif event is NavigationEvent.CONFIRM and len(frame.model):
            return self._confirm(session, frame.entry)
        return Outcome.STAY

    def _go_back(self, session: NavigationSession) -> Outcome:
        if session.top.kind is MenuKind.ROOT:
            return Outcome.EXIT
        session.pop()
        return Outcome.POPPED

    def _confirm(self, session: NavigationSession, entry: MenuEntry) -> Outcome:
        if entry.kind is EntryKind.ACTION:
            self.run_action(entry)
        elif entry.kind is EntryKind.SUBMENU:
            return self.open_submenu(session, entry)
        elif entry.kind is EntryKind.BACK:
            return self._go_back(session)
        elif entry.kind is EntryKind.VARIABLES:
            self.show_variables()
        return Outcome.STAY

    def run_action(self, entry: MenuEntry) -> int:
        command, substituted = self.resolver.resolve(entry.command_template)
        self.store.record_entered(self.resolver.entered)
        if substituted:
            self.save_variables()
        return self.executor.run(command, entry.display_name, entry.command_template)

    def open_submenu(self, session: NavigationSession, entry: MenuEntry) -> Outcome:
        try:
            model = self.definitions.load(entry.target, title=entry.display_name)
        except DefinitionLoadError as e:
            log.warning(f"{e.code}: {e.message}")
            self.renderer.display_error(e.message)
            self.renderer.press_enter()
            return Outcome.STAY
        session.push(Frame(model.with_back(self.separator), 0, MenuKind.SUB, entry.display_name))
        return Outcome.PUSHED

    def show_variables(self) -> None:
        self.renderer.display_variables(self.store.bindings())
        self.renderer.press_enter()

    def save_variables(self) -> None:
        try:
            self.store.scan_and_save()
        except PersistenceError as e:
            log.error(f"{e.code}: {e.message}")
            self.renderer.display_error(e.message)

    def run(self, root: MenuModel) -> NavigationSession:
        """Drive the menu until Back on the main menu, then persist variables"""
        session = NavigationSession.start(root)
        try:
            while True:
                frame = session.top
                self.renderer.render_menu(frame.model, frame.selected, frame.title)
                outcome = self.handle_event(session, self.decoder.read_event())
                if outcome is Outcome.EXIT:
                    break
        except (KeyboardInterrupt, EOFError):
            log.info("Input interrupted, leaving menu")
        finally:
            self.save_variables()
            session.stack.clear()
        return session
