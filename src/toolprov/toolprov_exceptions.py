"""
This module contains the exceptions raised by the toolprov framework.
"""


class ToolprovException(Exception):
    """
    Base class for all exceptions raised by toolprov.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InstallError(ToolprovException):
    """
    Raised when downloading or extracting an archive fails.

    The original error is available as ``__cause__``.
    """

    def __init__(self, dependency_key: str, message: str):
        super().__init__(f"Failed to install {dependency_key}: {message}")
        self.dependency_key = dependency_key


class ConfigurationError(ToolprovException):
    """
    Raised when a toolprov configuration is invalid.
    """
