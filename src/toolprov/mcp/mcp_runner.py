"""
MCP (Model Context Protocol) runner for toolprov.

This module exposes runtime discovery, CLI version checks and installs as MCP
tools using the fastmcp framework. It reads an optional `toolprov.toml` from
the workspace root to configure where and what to install.

Key points:
1. Uses fastmcp for standardized MCP tool management
2. Builds the Dependencies facade once at startup and reuses it
3. Runs every blocking operation in a worker thread so the event loop stays free
4. Reports configuration errors at call time instead of failing at startup
"""

import asyncio
import json
import logging
import os
from typing import Any, Dict, Optional

from fastmcp import FastMCP

from toolprov.dependencies import Dependencies
from toolprov.toolprov_config import CONFIG_FILE_NAME, TOOLPROV_TOML_SCHEMA, ToolprovConfig
from toolprov.toolprov_exceptions import ToolprovException
from toolprov.toolprov_logger import ToolprovLogger


class MCPToolError(Exception):
    """Base exception for MCP tool errors."""

    pass


class MCPRunner:
    """
    MCP runner that exposes toolprov operations as MCP tools using fastmcp.

    This class handles:
    - Loading and validating toolprov.toml at initialization
    - Creating the Dependencies facade once
    - Registering tools that report results as JSON strings
    """

    def __init__(
        self,
        workspace_root: Optional[str] = None,
        dependencies: Optional[Dependencies] = None,
    ):
        """
        Initialize the MCP runner.

        Args:
            workspace_root: Directory searched for toolprov.toml (defaults to cwd)
            dependencies: Pre-built facade, mainly for tests
        """
        self.workspace_root = workspace_root or os.getcwd()
        self.logger = ToolprovLogger()
        self.config_error: Optional[str] = None
        self.dependencies = dependencies

        if self.dependencies is None:
            self._try_load_config()

    def _try_load_config(self) -> None:
        try:
            config = ToolprovConfig.load(self.workspace_root)
            self.dependencies = Dependencies(config, self.logger)
        except ToolprovException as e:
            self.config_error = e.message
            self.logger.log(f"Invalid {CONFIG_FILE_NAME}: {e.message}", logging.ERROR)

    def get_configuration_error_message(self) -> str:
        return (
            f"{CONFIG_FILE_NAME} in {self.workspace_root} is invalid: "
            f"{self.config_error}\n\nExpected format:\n{TOOLPROV_TOML_SCHEMA}"
        )

    def _error(self, message: str) -> str:
        return json.dumps({"status": "error", "message": message})

    def _success(self, **payload: Any) -> str:
        result: Dict[str, Any] = {"status": "success"}
        result.update(payload)
        return json.dumps(result)

    def locate_runtime(self) -> str:
        if self.dependencies is None:
            return self._error(self.get_configuration_error_message())

        path = self.dependencies.get_runtime()
        candidate = self.dependencies.locator.resolved_candidate
        return self._success(
            found=path is not None,
            path=path,
            strategy=candidate.strategy.value if candidate else None,
        )

    def check_cli_version(self, latest_version: str) -> str:
        if self.dependencies is None:
            return self._error(self.get_configuration_error_message())

        info = self.dependencies.version_checker.get_version_info(latest_version)
        return self._success(
            cli_exists=self.dependencies.does_cli_exist(),
            installed_version=info.installed if info else None,
            latest_version=latest_version,
            up_to_date=bool(info and info.is_current),
        )

    def install_cli(self) -> str:
        if self.dependencies is None:
            return self._error(self.get_configuration_error_message())

        try:
            self.dependencies.install_cli()
        except ToolprovException as e:
            raise MCPToolError(e.message) from e
        return self._success(cli_location=self.dependencies.cli_location)

    def install_runtime(self) -> str:
        if self.dependencies is None:
            return self._error(self.get_configuration_error_message())

        try:
            self.dependencies.install_runtime()
        except ToolprovException as e:
            raise MCPToolError(e.message) from e
        return self._success(runtime_path=self.dependencies.get_runtime())

    def ensure_installed(self, latest_version: str) -> str:
        if self.dependencies is None:
            return self._error(self.get_configuration_error_message())

        status = self.dependencies.ensure_installed(latest_version)
        return self._success(
            ready=status.ready,
            runtime_path=status.runtime_path,
            runtime_installed=status.runtime_installed,
            cli_installed=status.cli_installed,
            errors=status.errors,
        )

    def create_mcp_server(self) -> FastMCP:
        """
        Create and configure a fastmcp server with the toolprov tools.

        Returns:
            Configured FastMCP server ready to serve MCP tools
        """
        server = FastMCP("toolprov-mcp")
        self._register_tools(server)
        return server

    def _register_tools(self, server: FastMCP) -> None:
        """
        Register all toolprov tools with the fastmcp server.

        Args:
            server: The FastMCP server instance
        """

        @server.tool()
        async def runtime_locate() -> str:
            """Find a usable runtime: embedded install, registry association, then fixed paths."""
            return await asyncio.to_thread(self.locate_runtime)

        @server.tool()
        async def cli_version_check(latest_version: str) -> str:
            """Compare the installed CLI version with the latest released one.

            Args:
                latest_version: Latest released CLI version
            """
            return await asyncio.to_thread(self.check_cli_version, latest_version)

        @server.tool()
        async def cli_install() -> str:
            """Download the CLI archive and replace the current install."""
            return await asyncio.to_thread(self.install_cli)

        @server.tool()
        async def runtime_install() -> str:
            """Download the embedded runtime and replace the current one."""
            return await asyncio.to_thread(self.install_runtime)

        @server.tool()
        async def ensure_installed(latest_version: str) -> str:
            """Install whatever is missing or outdated.

            Args:
                latest_version: Latest released CLI version
            """
            return await asyncio.to_thread(self.ensure_installed, latest_version)


def main() -> None:
    MCPRunner().create_mcp_server().run()


__all__ = [
    "MCPRunner",
    "MCPToolError",
    "main",
]
