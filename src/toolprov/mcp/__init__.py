"""
MCP server exposing toolprov operations.
"""

from .mcp_runner import MCPRunner, MCPToolError

__all__ = ["MCPRunner", "MCPToolError"]
