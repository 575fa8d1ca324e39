#!/usr/bin/env python3
"""
cmdmenu application bootstrap
Wires configuration, logging, definitions, variables and the engine together
"""

from pathlib import Path
from typing import Optional

from rich.console import Console

from .activity_log import ActivityLog
from .config import ConfigManager, config as default_config
from .definitions import MenuDirectory
from .engine import NavigationEngine
from .exceptions import PersistenceError
from .executor import Executor
from .keys import KeyDecoder, TerminalByteSource
from .log_viewer import TmuxLogViewer
from .logger import logger
from .renderer import MenuRenderer
from .templates import TemplateResolver
from .variables import VariableStore


class MenuShellApp:
    """One interactive session of the menu shell"""

    def __init__(self, settings: Optional[ConfigManager] = None,
                 menu_dir: Optional[Path] = None, log_viewer: Optional[bool] = None,
                 console: Optional[Console] = None):
        self.settings = settings or default_config
        if menu_dir is not None:
            self.settings.set("menu.directory", str(menu_dir))
        if log_viewer is not None:
            self.settings.set("log_viewer.enabled", log_viewer)

        self.console = console or Console(highlight=False, no_color=not self.settings.get("ui.color", True))
        self.renderer = MenuRenderer(self.console, animate=self.settings.get("ui.animate_title", True))
        self.definitions = MenuDirectory(self.settings.menu_dir(), self.settings.get("menu.separator"))
        self.store = VariableStore(self.settings.variables_path(), self.definitions)
        self.activity_log = ActivityLog(self.settings.activity_log_path())
        self.resolver = TemplateResolver(console=self.console)
        self.executor = Executor(self.activity_log, self.renderer, shell=self.settings.get("executor.shell"))
        self.viewer = None
        if self.settings.get("log_viewer.enabled"):
            self.viewer = TmuxLogViewer(
                self.settings.activity_log_path(),
                session_name=self.settings.get("log_viewer.session_name"),
                window_name=self.settings.get("log_viewer.window_name"),
                console=self.console,
            )

    def prepare(self) -> None:
        """Create directories, start logging and restore stored variables"""
        self.settings.validate()
        logger.configure(
            self.settings.logs_dir(),
            level=self.settings.get("logging.level", "DEBUG"),
            max_size_mb=self.settings.get("logging.max_size_mb", 10),
            backup_count=self.settings.get("logging.backup_count", 5),
        )
        logger.info(f"cmdmenu started with menu directory {self.settings.menu_dir()}")

        try:
            self.activity_log.start_session()
        except PersistenceError as e:
            logger.error(f"{e.code}: {e.message}")
            self.renderer.display_error(e.message)

        try:
            self.store.load()
        except PersistenceError as e:
            logger.error(f"{e.code}: {e.message}")
            self.renderer.display_error(e.message)

    def build_engine(self) -> NavigationEngine:
        decoder = KeyDecoder(TerminalByteSource(), escape_timeout=self.settings.get("keys.escape_timeout", 0.1))
        return NavigationEngine(self.definitions, self.resolver, self.store, self.executor,
                                self.renderer, decoder)

    def run(self) -> None:
        self.prepare()
        if self.viewer is not None:
            self.viewer.open()
        try:
            self.renderer.display_intro()
            self.build_engine().run(self.definitions.build_root())
        finally:
            self.renderer.clear()
            self.renderer.display_exit_message()
            if self.viewer is not None:
                self.viewer.close()
            logger.info("cmdmenu stopped")


def run_menu(menu_dir: Optional[Path] = None, log_viewer: Optional[bool] = None) -> None:
    """Start the interactive menu shell"""
    MenuShellApp(menu_dir=menu_dir, log_viewer=log_viewer).run()
