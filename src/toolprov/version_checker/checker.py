"""
Asks the installed CLI for its version and compares it with the latest one.
"""

import dataclasses
import logging
from typing import Callable, Optional, Union

from toolprov.process_runner import ProcessRunner
from toolprov.runtime_locator import RuntimeLocator
from toolprov.toolprov_logger import ToolprovLogger

LatestVersion = Union[str, Callable[[], str]]


@dataclasses.dataclass(frozen=True)
class VersionInfo:
    """
    Installed and latest version strings. Compared as opaque strings.
    """

    installed: str
    latest: str

    @property
    def is_current(self) -> bool:
        return self.installed == self.latest


class VersionChecker:
    VERSION_FLAG = "--version"

    def __init__(
        self,
        locator: RuntimeLocator,
        runner: ProcessRunner,
        cli_location: str,
        logger: ToolprovLogger,
    ):
        self.locator = locator
        self.runner = runner
        self.cli_location = cli_location
        self.logger = logger

    def get_installed_version(self) -> Optional[str]:
        """
        Version reported by the installed CLI, or None if asking it failed.

        The CLI prints its version on stderr.
        """
        runtime = self.locator.resolve()
        if runtime is None:
            self.logger.log(
                "No runtime available to run the CLI version check", logging.DEBUG
            )
            return None

        result = self.runner.run(runtime, [self.cli_location, self.VERSION_FLAG])
        if not result.success:
            self.logger.log(
                f"CLI version check failed: {result.error}", logging.DEBUG
            )
            return None

        return result.error.strip()

    def get_version_info(self, latest_version: LatestVersion) -> Optional[VersionInfo]:
        installed = self.get_installed_version()
        if installed is None:
            return None

        self.logger.log(f"Current CLI version is {installed}", logging.INFO)
        self.logger.log("Checking for updates to the CLI...", logging.INFO)
        latest = latest_version() if callable(latest_version) else latest_version
        return VersionInfo(installed=installed, latest=latest)

    def is_up_to_date(self, latest_version: LatestVersion) -> bool:
        """
        True only if the CLI ran and reported exactly {latest_version}.

        Args:
            latest_version: The latest version, or a callable returning it
        """
        info = self.get_version_info(latest_version)
        if info is None:
            return False

        if info.is_current:
            self.logger.log("CLI is up to date.", logging.INFO)
            return True

        self.logger.log(f"Found an updated CLI v{info.latest}", logging.INFO)
        return False
