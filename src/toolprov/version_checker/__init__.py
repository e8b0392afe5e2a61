"""
Version currency checks for the installed CLI tool.
"""

from .checker import LatestVersion, VersionChecker, VersionInfo

__all__ = ["LatestVersion", "VersionChecker", "VersionInfo"]
