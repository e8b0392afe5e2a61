"""
This file exposes the main interface of toolprov
"""

from toolprov.dependencies import Dependencies, ProvisioningStatus
from toolprov.toolprov_config import ToolprovConfig
from toolprov.toolprov_logger import ToolprovLogger

__all__ = ["Dependencies", "ProvisioningStatus", "ToolprovConfig", "ToolprovLogger"]
