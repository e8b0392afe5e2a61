"""
Runtime dependency models.

This package provides Pydantic data models for parsing the archives toolprov
installs: the CLI tool and the embedded runtime it runs on.
"""

from .runtime_dependencies import (
    Dependency,
    RuntimeDependenciesConfig,
    load_runtime_dependencies,
)

__all__ = [
    "Dependency",
    "RuntimeDependenciesConfig",
    "load_runtime_dependencies",
]
