"""
Runtime discovery.

This package handles:
1. Probing the embedded runtime, the registry association and fixed root paths
2. Validating each candidate by running it
3. Memoizing the first runtime that validates
"""

from .locator import (
    DiscoveryStrategy,
    ProbeResult,
    RuntimeCandidate,
    RuntimeLocator,
)
from .registry import RegistryReader, WindowsRegistryReader, parse_command_directory

__all__ = [
    "DiscoveryStrategy",
    "ProbeResult",
    "RuntimeCandidate",
    "RuntimeLocator",
    "RegistryReader",
    "WindowsRegistryReader",
    "parse_command_directory",
]
