"""
Provides the host-facing entry point: wires the process runner, runtime
locator, installer and version checker together for one configuration.
"""

import dataclasses
import logging
import os
from typing import List, Optional, Sequence

from toolprov.process_runner import ProcessResult, ProcessRunner
from toolprov.runtime_dependency_config import DependencyConfigManager
from toolprov.runtime_dependency_downloader import DependencyDownloader
from toolprov.runtime_dependency_models import load_runtime_dependencies
from toolprov.runtime_locator import RegistryReader, RuntimeLocator
from toolprov.toolprov_config import ToolprovConfig
from toolprov.toolprov_exceptions import InstallError, ToolprovException
from toolprov.toolprov_logger import ToolprovLogger
from toolprov.toolprov_settings import ToolprovSettings
from toolprov.version_checker import LatestVersion, VersionChecker


@dataclasses.dataclass
class ProvisioningStatus:
    """
    What ensure_installed() found and did
    """

    runtime_path: Optional[str] = None
    runtime_installed: bool = False
    cli_installed: bool = False
    errors: List[str] = dataclasses.field(default_factory=list)

    @property
    def ready(self) -> bool:
        return self.runtime_path is not None and not self.errors


class Dependencies:
    """
    Locates, installs and runs the CLI tool and its runtime.
    """

    def __init__(
        self,
        config: Optional[ToolprovConfig] = None,
        logger: Optional[ToolprovLogger] = None,
        registry: Optional[RegistryReader] = None,
    ):
        self.config = config or ToolprovConfig()
        self.logger = logger or ToolprovLogger()
        self.runner = ProcessRunner(self.logger)
        self.locator = RuntimeLocator(self.config, self.runner, self.logger, registry)
        self.config_manager = DependencyConfigManager(
            runtime_deps_config=load_runtime_dependencies(),
            toolprov_config=self.config,
            base_download_path=self.app_data_directory,
        )
        self.downloader = DependencyDownloader(
            self.config_manager, self.logger, proxy=self.config.proxy
        )
        self.version_checker = VersionChecker(
            self.locator, self.runner, self.cli_location, self.logger
        )

    @property
    def app_data_directory(self) -> str:
        return ToolprovSettings.get_app_data_directory(self.config)

    @property
    def cli_location(self) -> str:
        return ToolprovSettings.get_cli_location(self.config)

    def get_runtime(self) -> Optional[str]:
        return self.locator.resolve()

    def is_runtime_installed(self) -> bool:
        return self.locator.is_runtime_installed()

    def does_cli_exist(self) -> bool:
        return os.path.isfile(self.cli_location)

    def is_cli_up_to_date(self, latest_version: LatestVersion) -> bool:
        return self.version_checker.is_up_to_date(latest_version)

    def install_cli(self) -> None:
        """
        Raises:
            InstallError: If the download or the extraction fails
        """
        self.downloader.install_cli_tool()

    def install_runtime(self) -> None:
        """
        Install the embedded runtime and forget any previously resolved one.

        Raises:
            InstallError: If the download or the extraction fails
        """
        try:
            self.downloader.install_runtime()
        finally:
            # The previous install is gone even when extraction failed
            self.locator.invalidate()

    def ensure_installed(self, latest_version: LatestVersion) -> ProvisioningStatus:
        """
        Install the runtime if none is usable and the CLI if it is missing or
        outdated. Install failures are logged and reported in the returned
        status instead of being raised, so the next call can retry.
        """
        status = ProvisioningStatus()

        if not self.is_runtime_installed():
            try:
                self.install_runtime()
                status.runtime_installed = True
            except InstallError as e:
                status.errors.append(e.message)
        status.runtime_path = self.get_runtime()

        if not self.does_cli_exist() or not self.is_cli_up_to_date(latest_version):
            try:
                self.install_cli()
                status.cli_installed = True
            except InstallError as e:
                status.errors.append(e.message)

        if status.errors:
            self.logger.log(
                f"Provisioning incomplete: {'; '.join(status.errors)}", logging.ERROR
            )
        return status

    def run_cli(
        self,
        arguments: Sequence[str],
        stdin: Optional[str] = None,
        background: bool = False,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """
        Run the installed CLI with the resolved runtime.

        Raises:
            ToolprovException: If no runtime is available
        """
        runtime = self.get_runtime()
        if runtime is None:
            raise ToolprovException("No runtime available to run the CLI")

        args = [self.cli_location, *arguments]
        if background:
            return self.runner.run_in_background(runtime, args, stdin=stdin)
        return self.runner.run(runtime, args, stdin=stdin, timeout=timeout)
