#!/usr/bin/env python3
"""
cmdmenu - data-driven terminal menu shell
Command-line entry point using Typer
"""

import sys
import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.table import Table
from cmdmenu import __version__, __status__
from cmdmenu.app import run_menu
from cmdmenu.config import config
from cmdmenu.definitions import MenuDirectory
from cmdmenu.diagnostics import run_diagnostics
from cmdmenu.exceptions import CmdMenuException, DefinitionLoadError
from cmdmenu.logger import logger
from cmdmenu.variables import VariableStore

console = Console()

app = typer.Typer(
    name="cmdmenu",
    help="cmdmenu - data-driven terminal menu shell",
    add_completion=False
)

MenuDirOption = typer.Option(None, "--menu-dir", "-m", help="Directory holding the .menu files")


def _menu_directory(menu_dir: Optional[Path]) -> MenuDirectory:
    if menu_dir is not None:
        config.set("menu.directory", str(menu_dir))
    return MenuDirectory(config.menu_dir(), config.get("menu.separator"))


@app.command("version", help="Show version information")
def version():
    """Show version information"""
    console.print(f"[bold cyan]cmdmenu[/bold cyan] v{__version__} ({__status__})")


@app.command("run", help="Start the interactive menu")
def run(
    menu_dir: Optional[Path] = MenuDirOption,
    log_viewer: bool = typer.Option(True, "--log-viewer/--no-log-viewer", help="Open the tmux log window"),
):
    """Start the interactive menu"""
    run_menu(menu_dir, log_viewer)


@app.command("list-menus", help="List the menu definition files")
def list_menus(menu_dir: Optional[Path] = MenuDirOption):
    """List the menu definition files and how many entries each has"""
    directory = _menu_directory(menu_dir)
    table = Table(title=f"Menus in {directory.directory}")
    table.add_column("Menu", style="cyan")
    table.add_column("Entries", justify="right")
    for path in directory.menu_files():
        try:
            count = str(len(directory.load(path.name)))
        except DefinitionLoadError as e:
            count = f"[red]{e.details.get('reason', 'error')}[/red]"
        table.add_row(path.stem, count)
    console.print(table)


@app.command("vars", help="Show stored variables")
def show_vars(menu_dir: Optional[Path] = MenuDirOption):
    """Show the variables persisted for the menus"""
    directory = _menu_directory(menu_dir)
    store = VariableStore(config.variables_path(), directory)
    bindings = store.read()
    if not bindings:
        console.print("[dim]No stored variables.[/dim]")
        return
    for binding in bindings:
        console.print(f"{binding.name}={binding.value}", markup=False)


@app.command("config", help="Print the effective configuration")
def show_config():
    """Print the effective configuration"""
    config.print_config()


@app.command("diagnostic", help="Run system diagnostics and exit")
def diagnostic():
    """Run system diagnostics and exit"""
    run_diagnostics()


@app.callback(invoke_without_command=True)
def callback(ctx: typer.Context):
    """Start the interactive menu when no command is given"""
    if ctx.invoked_subcommand is None:
        run_menu()


def main():
    """
    Main entry point for cmdmenu.
    Parses arguments using Typer and routes to the interactive menu.
    """
    try:
        app()

    except CmdMenuException as e:
        console.print(f"\n[bold red]Error: {e.message}[/bold red]")
        if e.details:
            console.print(f"[dim]Details: {e.details}[/dim]")
        logger.error(f"{e.code}: {e.message}", extra={"details": e.details})
        sys.exit(1)

    except KeyboardInterrupt:
        console.print("\n[bold yellow]Operation cancelled by user[/bold yellow]")
        logger.info("User interrupted operation (Ctrl+C)")
        sys.exit(0)

    except Exception as e:
        console.print(f"\n[bold red]Unexpected error: {str(e)}[/bold red]")
        logger.critical(f"Unexpected error: {str(e)}", exc_info=True)
        console.print(f"[dim]Check logs for more details: {config.logs_dir()}[/dim]")
        sys.exit(1)


if __name__ == "__main__":
    main()
