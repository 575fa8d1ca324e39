#!/usr/bin/env python3
"""
cmdmenu Logging System
Diagnostic logging with file rotation, kept apart from the activity log
"""

import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from pathlib import Path
from rich.console import Console
from rich.logging import RichHandler


class CmdMenuLogger:
    """Centralized logging system for cmdmenu"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if CmdMenuLogger._initialized:
            return

        self.console = Console(stderr=True)
        self.logs_dir = None
        self.file_handler = None

        self.logger = logging.getLogger("cmdmenu")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        # Remove existing handlers
        self.logger.handlers.clear()

        # Console handler: the menu owns the screen, so only warnings and up
        console_handler = RichHandler(console=self.console, show_level=True, show_time=False)
        console_handler.setLevel(logging.WARNING)
        self.logger.addHandler(console_handler)

        CmdMenuLogger._initialized = True

    def configure(self, directory, level="DEBUG", max_size_mb=10, backup_count=5):
        """Attach the rotating file handler under ``directory``"""
        self.logs_dir = Path(directory).expanduser()
        self.logs_dir.mkdir(parents=True, exist_ok=True)

        if self.file_handler is not None:
            self.logger.removeHandler(self.file_handler)
            self.file_handler.close()

        log_file = self.logs_dir / f"cmdmenu_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(max_size_mb * 1024 * 1024),
            backupCount=backup_count
        )
        file_handler.setLevel(getattr(logging, str(level).upper(), logging.DEBUG))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(file_handler)
        self.file_handler = file_handler
        return log_file

    def get_logger(self, name=None):
        """Get a logger instance"""
        if name:
            return logging.getLogger(f"cmdmenu.{name}")
        return self.logger

    def debug(self, message, **kwargs):
        self.logger.debug(message, **kwargs)

    def info(self, message, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message, **kwargs):
        self.logger.warning(message, **kwargs)

    def error(self, message, **kwargs):
        self.logger.error(message, **kwargs)

    def critical(self, message, **kwargs):
        self.logger.critical(message, **kwargs)


# Singleton instance
logger = CmdMenuLogger()
