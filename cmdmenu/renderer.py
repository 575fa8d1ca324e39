# cmdmenu/renderer.py

import time
from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import MenuModel, VariableBinding

COLORS = {
    'menu': 'bright_white',
    'warning': 'yellow',
    'error': 'red',
    'muted': 'dim white',
    'command': 'cyan',
    'banner': 'bold bright_yellow',
}


def format_title(title: str) -> str:
    """``web_tools`` -> ``WEB TOOLS``"""
    return title.replace("_", " ").upper()


class MenuRenderer:
    """Console drawing for menus, messages and command output headers"""

    def __init__(self, console: Optional[Console] = None, animate: bool = True) -> None:
        self.console = console or Console(highlight=False)
        self.animate = animate

    def clear(self) -> None:
        self.console.clear()

    def render_menu(self, model: MenuModel, selected: int, title: Optional[str] = None) -> None:
        """Draw ``model`` with the ``selected`` row highlighted"""
        self.clear()
        color = COLORS['menu']
        self.console.print(f"[{color}]\\[{escape(format_title(title or model.title))}][/]")
        for index, entry in enumerate(model):
            name = escape(entry.display_name)
            if index == selected:
                self.console.print(f"[bold {color}]> [reverse]{name}[/reverse][/]")
            else:
                self.console.print(f"  [{color}]{name}[/]")
        self.console.print()

    def display_error(self, message: str) -> None:
        self.console.print(f"[{COLORS['error']}]✗[/] {escape(message)}")

    def display_info(self, message: str) -> None:
        self.console.print(f"[{COLORS['muted']}]ℹ[/] {escape(message)}")

    def display_execution_header(self, display_name: str, command: str) -> None:
        self.console.print(f"\n[{COLORS['banner']} reverse]Executing: {escape(display_name)}[/]")
        self.console.print(f"[{COLORS['command']}]Command: {escape(command)}[/]")

    def display_variables(self, bindings: Iterable[VariableBinding]) -> None:
        bindings = list(bindings)
        self.clear()
        self.console.print(f"[{COLORS['menu']}]\\[VARIABLES][/]")
        if not bindings:
            self.display_info("No stored variables.")
            return
        table = Table(show_header=True, show_lines=False, show_edge=False, pad_edge=False)
        table.add_column("Name", style=COLORS['warning'])
        table.add_column("Value", style=f"bold {COLORS['menu']}")
        table.add_column("Source", style=COLORS['muted'])
        for binding in bindings:
            table.add_row(binding.name, escape(binding.value), binding.origin.value.replace("_", " "))
        self.console.print(table)

    def press_enter(self) -> None:
        """Block until the user presses Enter"""
        self.console.print()
        self.console.input("Press Enter to continue...")
        self.console.print()

    def display_intro(self, text: str = "[Main Menu]") -> None:
        """Type out the main title once at start-up"""
        if not self.animate:
            return
        self.clear()
        for char in text:
            self.console.print(escape(char), end="")
            time.sleep(0.02)
        time.sleep(0.5)

    def display_exit_message(self) -> None:
        self.console.print(f"\n[{COLORS['muted']}]Goodbye![/]")
