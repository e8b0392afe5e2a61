"""
Runtime dependency configuration management.

This package handles:
1. Applying ToolprovConfig overrides to the packaged runtime dependencies
2. Resolving download URLs for the host architecture
3. Planning where each archive is downloaded and extracted
4. Tracking the state of each install
"""

from .config_manager import (
    CLI_DEPENDENCY,
    RUNTIME_DEPENDENCY,
    DependencyConfigManager,
    DependencyState,
    DownloadPlan,
    DownloadStatus,
)

__all__ = [
    "CLI_DEPENDENCY",
    "RUNTIME_DEPENDENCY",
    "DependencyConfigManager",
    "DependencyState",
    "DownloadPlan",
    "DownloadStatus",
]
