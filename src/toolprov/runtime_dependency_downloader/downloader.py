"""
Dependency downloader implementation.

Handles downloading and extracting the CLI tool and the embedded runtime.
"""

import logging
import os
from typing import Optional

from toolprov.runtime_dependency_config import (
    CLI_DEPENDENCY,
    RUNTIME_DEPENDENCY,
    DependencyConfigManager,
    DownloadPlan,
    DownloadStatus,
)
from toolprov.toolprov_exceptions import InstallError
from toolprov.toolprov_logger import ToolprovLogger
from toolprov.toolprov_utils import FileUtils


class DependencyDownloader:
    """
    Downloads and extracts runtime dependencies.

    Holds no install state of its own: every install builds a fresh plan, so
    repeating an install over an existing destination gives the same result.
    """

    def __init__(
        self,
        config_manager: DependencyConfigManager,
        logger: ToolprovLogger,
        proxy: Optional[str] = None,
    ):
        """
        Initialize the dependency downloader.

        Args:
            config_manager: The DependencyConfigManager that builds install plans
            logger: Logger for progress and error messages
            proxy: Proxy URL for downloads, None for a direct connection
        """
        self.config_manager = config_manager
        self.logger = logger
        self.proxy = proxy

    def install_cli_tool(self) -> DownloadPlan:
        """
        Download the CLI archive and extract it into the application data directory.

        Raises:
            InstallError: If the download or the extraction fails
        """
        return self.install(CLI_DEPENDENCY)

    def install_runtime(self) -> DownloadPlan:
        """
        Download the embedded runtime and extract it into its own folder.

        Raises:
            InstallError: If the download or the extraction fails
        """
        return self.install(RUNTIME_DEPENDENCY)

    def install(self, dep_key: str) -> DownloadPlan:
        plan = self.config_manager.create_download_plan(dep_key)
        self.download_dependency(plan)
        return plan

    def download_dependency(self, plan: DownloadPlan) -> None:
        """
        Execute a single plan: download, remove stale files, extract.

        The temporary archive is removed whatever happens. Failures are
        recorded on the plan and re-raised as InstallError.
        """
        self.config_manager.mark_download_started(plan)
        try:
            self.logger.log(
                f"Downloading {plan.dependency_key} from {plan.url}",
                logging.DEBUG,
            )
            FileUtils.download_file(
                self.logger,
                plan.url,
                plan.archive_path,
                proxy=self.proxy,
                timeout=self.config_manager.toolprov_config.download_timeout,
            )
            self.logger.log(
                f"Finished downloading {plan.dependency_key}.", logging.DEBUG
            )

            for stale_path in self._stale_paths(plan):
                FileUtils.recursive_delete(self.logger, stale_path)

            self.logger.log(
                f"Extracting {plan.dependency_key} to: {plan.destination_path}",
                logging.DEBUG,
            )
            FileUtils.extract_zip(self.logger, plan.archive_path, plan.destination_path)
            self.logger.log(
                f"Finished extracting {plan.dependency_key}.", logging.DEBUG
            )
        except Exception as e:
            error_msg = f"Failed to install {plan.dependency_key}: {e}"
            self.logger.log(error_msg, logging.ERROR)
            plan.error_message = error_msg
            self.config_manager.mark_download_completed(plan, success=False)
            raise InstallError(plan.dependency_key, str(e)) from e
        finally:
            FileUtils.delete_file_quietly(self.logger, plan.archive_path)

        self.config_manager.mark_download_completed(plan, success=True)

    def _stale_paths(self, plan: DownloadPlan):
        """
        Configured stale paths, plus the archive's own top-level entries when
        it is extracted straight into the shared data directory. Only paths
        strictly inside the data directory are returned.
        """
        paths = list(plan.stale_paths)
        base_dir = os.path.normpath(self.config_manager.base_download_path)
        if os.path.normpath(plan.destination_path) == base_dir:
            archive_name = os.path.basename(plan.archive_path)
            for entry in sorted(FileUtils.zip_top_level_entries(plan.archive_path)):
                if entry != archive_name:
                    paths.append(os.path.join(plan.destination_path, entry))

        safe_paths = []
        for path in paths:
            if FileUtils.is_strictly_inside(base_dir, path):
                safe_paths.append(path)
            else:
                self.logger.log(
                    f"Not removing {path}: outside of {base_dir}", logging.WARNING
                )
        return safe_paths

    def get_install_summary(self) -> dict:
        """
        Get a summary of install results.

        Returns:
            Dictionary with counts of completed, failed and in-progress installs
        """
        states = self.config_manager.get_dependency_states()

        completed = sum(1 for state in states.values() if state.is_downloaded())
        failed = sum(
            1
            for state in states.values()
            if state.download_status == DownloadStatus.FAILED
        )
        in_progress = sum(
            1
            for state in states.values()
            if state.download_status == DownloadStatus.IN_PROGRESS
        )

        return {
            "completed": completed,
            "failed": failed,
            "in_progress": in_progress,
            "total": len(states),
        }
