#!/usr/bin/env python3
"""
cmdmenu Exception Hierarchy
Centralized exception handling for the menu shell
"""


class CmdMenuException(Exception):
    """Base exception for all cmdmenu errors"""
    def __init__(self, message, code=None, details=None):
        self.message = message
        self.code = code or "UNKNOWN_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        """Convert exception to dict for logging/output"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class DefinitionLoadError(CmdMenuException):
    """Raised when a menu definition source is missing or unusable"""
    def __init__(self, message, source=None, reason=None):
        details = {}
        if source:
            details["source"] = str(source)
        if reason:
            details["reason"] = reason
        super().__init__(message, "DEFINITION_LOAD_ERROR", details)


class PersistenceError(CmdMenuException):
    """Raised when the variable store or the activity log cannot be written"""
    def __init__(self, message, filepath=None, operation=None):
        details = {}
        if filepath:
            details["filepath"] = str(filepath)
        if operation:
            details["operation"] = operation
        super().__init__(message, "PERSISTENCE_ERROR", details)


class ConfigurationError(CmdMenuException):
    """Raised when configuration is invalid or missing"""
    def __init__(self, message, config_key=None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, "CONFIG_ERROR", details)

