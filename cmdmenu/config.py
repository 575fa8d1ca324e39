#!/usr/bin/env python3
"""
cmdmenu Configuration Management System
Handles the configuration file, environment overrides, and defaults
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional
from .exceptions import ConfigurationError
from .logger import logger


def default_home() -> Path:
    """Return the cmdmenu home directory (``$CMDMENU_HOME`` or ``~/.cmdmenu``)"""
    override = os.environ.get("CMDMENU_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cmdmenu"


class ConfigManager:
    """Manage cmdmenu configuration"""

    # Default configuration
    DEFAULT_CONFIG = {
        "menu": {
            "directory": "",
            "variables_file": "menu.cfg",
            "log_file": "menu.log",
            "separator": "----------------"
        },
        "keys": {
            "escape_timeout": 0.1
        },
        "executor": {
            "shell": "/bin/bash"
        },
        "log_viewer": {
            "enabled": True,
            "session_name": "MenuLogSession",
            "window_name": "Log"
        },
        "ui": {
            "animate_title": True,
            "color": True
        },
        "logging": {
            "level": "DEBUG",
            "directory": "",
            "max_size_mb": 10,
            "backup_count": 5
        }
    }

    def __init__(self, home: Optional[Path] = None):
        self.config_dir = Path(home).expanduser() if home else default_home()
        self.config_file = self.config_dir / "config.json"
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from files and environment"""
        config = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    file_config = json.load(f)
                self._deep_merge(config, file_config)
                logger.debug(f"Loaded configuration from {self.config_file}")
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load config file: {e}")

        self._load_from_env(config)

        return config

    def _deep_merge(self, base: Dict, overlay: Dict):
        """Deep merge overlay config into base"""
        for key, value in overlay.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _load_from_env(self, config: Dict):
        """Load configuration from environment variables"""
        # Pattern: CMDMENU_SECTION_KEY=value, sections may contain underscores
        sections = sorted(config, key=len, reverse=True)
        for env_key, env_value in os.environ.items():
            if not env_key.startswith("CMDMENU_"):
                continue
            rest = env_key[8:].lower()
            for section in sections:
                if rest.startswith(section + "_") and len(rest) > len(section) + 1:
                    config[section][rest[len(section) + 1:]] = self._parse_env_value(env_value)
                    break

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """Parse environment variable value to appropriate type"""
        if value.lower() in ('true', 'yes'):
            return True
        elif value.lower() in ('false', 'no'):
            return False
        elif value.isdigit():
            return int(value)
        else:
            try:
                return float(value)
            except ValueError:
                return value

    def reload(self, home: Optional[Path] = None):
        """Re-read configuration, optionally from another home directory"""
        self.config_dir = Path(home).expanduser() if home else default_home()
        self.config_file = self.config_dir / "config.json"
        self.config = self._load_config()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value with dot notation

        Args:
            key: Configuration key (e.g., "keys.escape_timeout")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        parts = key.split(".")
        value = self.config

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set configuration value with dot notation"""
        parts = key.split(".")
        config = self.config

        for part in parts[:-1]:
            if part not in config:
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value
        logger.debug(f"Configuration updated: {key} = {value}")

    def save(self) -> Path:
        """Save configuration to file"""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
            logger.info(f"Configuration saved to {self.config_file}")
            return self.config_file
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

    # Paths -------------------------------------------------------------

    def menu_dir(self) -> Path:
        directory = self.get("menu.directory")
        if directory:
            return Path(directory).expanduser()
        return self.config_dir / "menu"

    def variables_path(self) -> Path:
        return self.menu_dir() / self.get("menu.variables_file", "menu.cfg")

    def activity_log_path(self) -> Path:
        return self.menu_dir() / self.get("menu.log_file", "menu.log")

    def logs_dir(self) -> Path:
        directory = self.get("logging.directory")
        if directory:
            return Path(directory).expanduser()
        return self.config_dir / "logs"

    def validate(self):
        """Validate configuration and create the directories it names"""
        for directory in (self.menu_dir(), self.logs_dir()):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigurationError(f"Cannot create directory {directory}: {e}", "menu.directory")

        timeout = self.get("keys.escape_timeout")
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            raise ConfigurationError("keys.escape_timeout must be a positive number", "keys.escape_timeout")

        if not self.get("executor.shell"):
            raise ConfigurationError("executor.shell must not be empty", "executor.shell")

        logger.debug("Configuration validation passed")

    def to_dict(self) -> Dict[str, Any]:
        """Get entire configuration as dictionary"""
        return copy.deepcopy(self.config)

    def print_config(self):
        """Print configuration in readable format"""
        from rich.console import Console
        from rich.syntax import Syntax

        console = Console()
        config_str = json.dumps(self.config, indent=2)
        syntax = Syntax(config_str, "json", theme="monokai", line_numbers=False)
        console.print(syntax)


# Shared instance
config = ConfigManager()
