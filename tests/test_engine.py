"""
Tests for the navigation engine
"""

import io
import random
import pytest
from unittest.mock import MagicMock
from rich.console import Console
from cmdmenu.definitions import MenuDirectory
from cmdmenu.engine import Frame, MenuKind, NavigationEngine, NavigationSession, Outcome
from cmdmenu.keys import NavigationEvent
from cmdmenu.models import EntryKind, MenuEntry, MenuModel, VariableOrigin
from cmdmenu.templates import TemplateResolver
from cmdmenu.variables import VariableStore

UP, DOWN = NavigationEvent.UP, NavigationEvent.DOWN
CONFIRM, BACK = NavigationEvent.CONFIRM, NavigationEvent.BACK


class ScriptedDecoder:
    def __init__(self, *events):
        self.events = list(events)

    def read_event(self):
        if not self.events:
            raise EOFError
        event = self.events.pop(0)
        if isinstance(event, type) and issubclass(event, BaseException):
            raise event
        return event


@pytest.fixture
def menu_dir(tmp_path):
    (tmp_path / "net.menu").write_text(
        "Ping=ping <host>\n"
        "Uptime=uptime\n"
        "---=\n"
        "Web=submenu:web.subm\n"
        "Broken=submenu:missing.subm\n",
        encoding="utf-8",
    )
    (tmp_path / "web.subm").write_text("Fetch=curl <url>\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def env():
    return {}


@pytest.fixture
def engine(menu_dir, env):
    definitions = MenuDirectory(menu_dir)
    console = Console(file=io.StringIO())
    answers = {"host": "10.0.0.5"}
    resolver = TemplateResolver(prompt=lambda name, current: answers.get(name, ""),
                                environ=env, console=console)
    store = VariableStore(menu_dir / "menu.cfg", definitions, env)
    executor = MagicMock()
    executor.run.return_value = 0
    return NavigationEngine(definitions, resolver, store, executor, MagicMock())


def submenu_session(engine):
    model = engine.definitions.load("net.menu", title="net")
    session = NavigationSession.start(engine.definitions.build_root())
    session.push(Frame(model.with_back(), 0, MenuKind.SUB, "net"))
    return session


def mixed_model():
    sep = MenuEntry.separator()
    entries = [MenuEntry(f"a{i}", EntryKind.ACTION, "true") for i in range(3)]
    return MenuModel("t", [entries[0], sep, entries[1], sep, entries[2]]).with_back()


def test_selection_never_rests_on_separator(engine):
    session = NavigationSession.start(mixed_model())
    rng = random.Random(7)
    for _ in range(500):
        engine.handle_event(session, rng.choice([UP, DOWN]))
        assert not session.top.entry.is_separator


def test_wraparound_both_directions(engine):
    session = NavigationSession.start(mixed_model())
    engine.handle_event(session, UP)
    assert session.top.entry.kind is EntryKind.BACK
    engine.handle_event(session, DOWN)
    assert session.top.selected == 0


def test_up_then_down_returns_to_start():
    model = MenuModel("t", [MenuEntry(str(i), EntryKind.ACTION, "true") for i in range(5)])
    for start in range(len(model)):
        frame = Frame(model, start)
        for _ in range(7):
            frame.move(-1)
        for _ in range(7):
            frame.move(1)
        assert frame.selected == start


def test_confirm_action_resolves_saves_and_executes(engine, menu_dir, env):
    session = submenu_session(engine)
    outcome = engine.handle_event(session, CONFIRM)

    assert outcome is Outcome.STAY
    engine.executor.run.assert_called_once_with("ping 10.0.0.5", "Ping", "ping <host>")
    assert env["host"] == "10.0.0.5"
    assert "host=10.0.0.5" in (menu_dir / "menu.cfg").read_text().splitlines()
    assert session.depth == 2 and session.top.selected == 0


def test_action_without_placeholders_does_not_save(engine):
    engine.store = MagicMock()
    session = submenu_session(engine)
    engine.handle_event(session, DOWN)
    engine.handle_event(session, CONFIRM)
    engine.store.scan_and_save.assert_not_called()
    engine.executor.run.assert_called_once_with("uptime", "Uptime", "uptime")


def test_confirm_submenu_pushes_frame_with_back(engine):
    session = submenu_session(engine)
    for _ in range(2):
        engine.handle_event(session, DOWN)
    assert session.top.entry.display_name == "Web"

    assert engine.handle_event(session, CONFIRM) is Outcome.PUSHED
    top = session.top
    assert session.depth == 3
    assert top.kind is MenuKind.SUB and top.selected == 0
    assert top.title == "Web"
    assert [e.kind for e in top.model] == [EntryKind.ACTION, EntryKind.SEPARATOR, EntryKind.BACK]


def test_missing_submenu_reports_and_stays(engine):
    session = submenu_session(engine)
    engine.handle_event(session, UP)
    engine.handle_event(session, UP)
    assert session.top.entry.display_name == "Broken"
    selected = session.top.selected

    assert engine.handle_event(session, CONFIRM) is Outcome.STAY
    assert session.depth == 2
    assert session.top.selected == selected
    engine.renderer.display_error.assert_called_once()
    assert "missing.subm" in engine.renderer.display_error.call_args[0][0]


def test_back_on_submenu_pops_and_resets_parent(engine):
    session = NavigationSession.start(engine.definitions.build_root())
    engine.handle_event(session, CONFIRM)
    assert session.depth == 2
    session.stack[0].selected = 2

    assert engine.handle_event(session, BACK) is Outcome.POPPED
    assert session.depth == 1
    assert session.top.selected == 0


def test_confirm_on_back_entry_pops(engine):
    session = submenu_session(engine)
    engine.handle_event(session, UP)
    assert session.top.entry.kind is EntryKind.BACK
    assert engine.handle_event(session, CONFIRM) is Outcome.POPPED
    assert session.top.kind is MenuKind.ROOT


def test_back_on_root_exits(engine):
    session = NavigationSession.start(engine.definitions.build_root())
    assert engine.handle_event(session, BACK) is Outcome.EXIT
    assert session.depth == 1


def test_variables_entry_shows_bindings(engine, env):
    env["host"] = "h"
    session = NavigationSession.start(engine.definitions.build_root())
    engine.handle_event(session, UP)
    engine.handle_event(session, UP)
    assert session.top.entry.kind is EntryKind.VARIABLES
    engine.handle_event(session, CONFIRM)
    shown = engine.renderer.display_variables.call_args[0][0]
    assert [(b.name, b.value) for b in shown] == [("host", "h")]


def test_typed_value_is_listed_as_user_entered(engine, env):
    session = submenu_session(engine)
    engine.handle_event(session, CONFIRM)
    binding = engine.store.bindings()[0]
    assert (binding.name, binding.value, binding.origin) == ("host", "10.0.0.5", VariableOrigin.USER_ENTERED)


def test_run_persists_store_on_root_back(engine, menu_dir, env):
    env["host"] = "kept"
    engine.decoder = ScriptedDecoder(CONFIRM, DOWN, BACK, BACK)
    session = engine.run(engine.definitions.build_root())
    assert session.depth == 0
    assert (menu_dir / "menu.cfg").read_text() == "host=kept\n"


def test_run_persists_store_on_interrupt(engine, menu_dir, env):
    env["url"] = "http://x"
    engine.definitions.load("web.subm")
    engine.decoder = ScriptedDecoder(DOWN, KeyboardInterrupt)
    engine.run(engine.definitions.build_root())
    assert (menu_dir / "menu.cfg").read_text() == "url=http://x\n"
