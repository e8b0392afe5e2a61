"""
Runtime dependency downloader.

This package handles:
1. Downloading archives through the configured proxy
2. Removing stale installs
3. Extracting archives
4. Updating dependency states
"""

from .downloader import DependencyDownloader

__all__ = ["DependencyDownloader"]
