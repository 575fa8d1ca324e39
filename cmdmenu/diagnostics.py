#!/usr/bin/env python3
"""
cmdmenu Diagnostic and Health Check System
"""

import os
import platform
import shutil
import sys
from datetime import datetime
from importlib import metadata
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from .config import config
from .definitions import MenuDirectory


class DiagnosticReport:
    """Check that the menu shell can run in this environment"""

    REQUIRED_PACKAGES = ['rich', 'typer']
    TOOLS = ['tmux', 'tail']

    def __init__(self, settings=None, console=None):
        self.settings = settings or config
        self.console = console or Console()
        self.issues = []
        self.warnings = []
        self.info = []

    def run_all_checks(self) -> dict:
        """Run all diagnostic checks"""
        return {
            "timestamp": datetime.now().isoformat(),
            "system": self._check_system(),
            "python": self._check_python(),
            "dependencies": self._check_dependencies(),
            "tools": self._check_tools(),
            "menus": self._check_menus(),
            "filesystem": self._check_filesystem(),
            "issues": self.issues,
            "warnings": self.warnings,
            "info": self.info
        }

    def _check_system(self) -> dict:
        return {
            "platform": platform.system(),
            "platform_release": platform.release(),
            "machine": platform.machine(),
            "interactive": sys.stdin.isatty()
        }

    def _check_python(self) -> dict:
        return {
            "version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "executable": sys.executable,
            "is_venv": sys.base_prefix != sys.prefix
        }

    def _check_dependencies(self) -> dict:
        installed = {}
        for package in self.REQUIRED_PACKAGES:
            try:
                installed[package] = {"status": "installed", "version": metadata.version(package)}
            except metadata.PackageNotFoundError:
                installed[package] = {"status": "missing"}
                self.issues.append(f"Missing dependency: {package}")
        return installed

    def _check_tools(self) -> dict:
        shell = self.settings.get("executor.shell")
        tools = {"shell": {"name": shell, "found": bool(shutil.which(shell))}}
        if not tools["shell"]["found"]:
            self.issues.append(f"Command interpreter not found: {shell}")
        for tool in self.TOOLS:
            found = shutil.which(tool) is not None
            tools[tool] = {"name": tool, "found": found}
            if not found:
                self.warnings.append(f"{tool} not found, live log viewer unavailable")
        return tools

    def _check_menus(self) -> dict:
        directory = MenuDirectory(self.settings.menu_dir())
        files = [path.name for path in directory.menu_files()]
        if not files:
            self.info.append(f"No .menu files in {directory.directory}")
        return {"directory": str(directory.directory), "files": files}

    def _check_filesystem(self) -> dict:
        paths = {
            "menu_dir": self.settings.menu_dir(),
            "variables": self.settings.variables_path(),
            "activity_log": self.settings.activity_log_path(),
            "logs": self.settings.logs_dir()
        }

        checks = {}
        for name, path in paths.items():
            target = path if path.exists() else path.parent
            checks[name] = {
                "path": str(path),
                "exists": path.exists(),
                "writable": target.exists() and os.access(target, os.W_OK)
            }
            if not checks[name]["exists"]:
                self.info.append(f"Does not exist yet: {path}")
            elif not checks[name]["writable"]:
                self.warnings.append(f"Not writable: {path}")
        return checks

    def print_report(self, report: dict):
        """Print formatted diagnostic report"""
        ok, bad = "[green]✓[/green]", "[red]✗[/red]"
        self.console.print(Panel("[bold cyan]cmdmenu System Diagnostic Report[/bold cyan]", style="blue"))

        sys_info = report["system"]
        self.console.print("\n[bold]System Information:[/bold]")
        self.console.print(f"  Platform: {sys_info['platform']} {sys_info['platform_release']}")
        self.console.print(f"  Interactive terminal: {'Yes' if sys_info['interactive'] else 'No'}")

        py_info = report["python"]
        self.console.print("\n[bold]Python Environment:[/bold]")
        self.console.print(f"  Version: {py_info['version']}")
        self.console.print(f"  Virtual Environment: {'Yes' if py_info['is_venv'] else 'No'}")

        table = Table(title="Dependencies")
        table.add_column("Package", style="cyan")
        table.add_column("Status")
        table.add_column("Version", style="yellow")
        for package, info in report["dependencies"].items():
            table.add_row(package, ok if info["status"] == "installed" else bad, info.get("version", "-"))
        self.console.print(table)

        self.console.print("\n[bold]Tools:[/bold]")
        for tool in report["tools"].values():
            self.console.print(f"  {tool['name']:12} {ok if tool['found'] else bad}")

        self.console.print("\n[bold]Menus:[/bold]")
        self.console.print(f"  Directory: {report['menus']['directory']}")
        self.console.print(f"  Files: {', '.join(report['menus']['files']) or '-'}")

        self.console.print("\n[bold]Filesystem Setup:[/bold]")
        for name, check in report["filesystem"].items():
            status = ok if check["exists"] else bad
            writable = ok if check["writable"] else bad
            self.console.print(f"  {name:13} {status}  (writable: {writable})")

        if report["issues"]:
            self.console.print("\n[bold red]Issues:[/bold red]")
            for issue in report["issues"]:
                self.console.print(f"  ⨯ {issue}")

        if report["warnings"]:
            self.console.print("\n[bold yellow]Warnings:[/bold yellow]")
            for warning in report["warnings"]:
                self.console.print(f"  ⚠ {warning}")

        if not report["issues"] and not report["warnings"]:
            self.console.print("\n[bold green]No issues detected![/bold green]")

        self.console.print(f"\n[dim]Timestamp: {report['timestamp']}[/dim]")


def run_diagnostics(settings=None) -> dict:
    """Run full diagnostic check"""
    diagnostic = DiagnosticReport(settings)
    report = diagnostic.run_all_checks()
    diagnostic.print_report(report)
    return report
