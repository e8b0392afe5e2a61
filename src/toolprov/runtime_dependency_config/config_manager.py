"""
Dependency configuration manager.

Handles applying configuration overrides to runtime dependencies and
deciding where each archive is downloaded and extracted.
"""

import os
from typing import Dict, List, Optional

from toolprov.runtime_dependency_models import Dependency, RuntimeDependenciesConfig
from toolprov.toolprov_config import ToolprovConfig
from toolprov.toolprov_exceptions import ConfigurationError
from toolprov.toolprov_utils import PlatformUtils

CLI_DEPENDENCY = "cli"
RUNTIME_DEPENDENCY = "runtime"


class DownloadStatus:
    """Enumeration of download statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class DownloadPlan:
    """
    A plan to install a specific dependency.

    Created for a single install: the archive is downloaded to
    {archive_path}, {stale_paths} are removed and the archive is extracted
    into {destination_path}.
    """

    def __init__(
            self,
            dependency_key: str,
            dependency: Dependency,
            url: str,
            archive_path: str,
            destination_path: str,
            stale_paths: Optional[List[str]] = None,
            status: str = DownloadStatus.PENDING,
    ):
        """
        Initialize a download plan.

        Args:
            dependency_key: Unique key for the dependency
            dependency: The Dependency object
            url: URL to download from
            archive_path: Temporary file the archive is downloaded to
            destination_path: Where to extract the archive
            stale_paths: Leftovers of previous installs to remove first
            status: Current download status
        """
        self.dependency_key = dependency_key
        self.dependency = dependency
        self.url = url
        self.archive_path = archive_path
        self.destination_path = destination_path
        self.stale_paths = list(stale_paths or [])
        self.status = status
        self.error_message: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"DownloadPlan(key={self.dependency_key}, "
            f"status={self.status}, url={self.url})"
        )


class DependencyState:
    """
    Current state of a dependency.

    Tracks whether a dependency has been installed and where it's located.
    """

    def __init__(
            self,
            dependency_key: str,
            download_status: str,
            downloaded_path: Optional[str] = None,
            error_message: Optional[str] = None,
    ):
        self.dependency_key = dependency_key
        self.download_status = download_status
        self.downloaded_path = downloaded_path
        self.error_message = error_message

    def is_downloaded(self) -> bool:
        """Check if the dependency has been successfully installed."""
        return self.download_status == DownloadStatus.COMPLETED

    def __repr__(self) -> str:
        return (
            f"DependencyState(key={self.dependency_key}, "
            f"status={self.download_status}, path={self.downloaded_path})"
        )


class DependencyConfigManager:
    """
    Manages runtime dependency configuration and install decisions.

    Applies overrides from ToolprovConfig to the packaged runtime
    dependencies and builds a fresh DownloadPlan for every install.
    """

    def __init__(
        self,
        runtime_deps_config: RuntimeDependenciesConfig,
        toolprov_config: ToolprovConfig,
        base_download_path: str,
    ):
        """
        Initialize the dependency config manager.

        Args:
            runtime_deps_config: Loaded runtime dependencies configuration
            toolprov_config: Toolprov configuration with overrides
            base_download_path: Application data directory installs are rooted in
        """
        self.runtime_deps = runtime_deps_config
        self.toolprov_config = toolprov_config
        self.base_download_path = base_download_path
        self.dependency_states: Dict[str, DependencyState] = {}

    def create_download_plan(self, dep_key: str) -> DownloadPlan:
        """
        Create the plan for installing one dependency.

        Raises:
            ConfigurationError: If the dependency is not known
        """
        dep = self.runtime_deps.get_dependency(dep_key)
        if dep is None:
            known = ", ".join(self.runtime_deps.get_dependencies())
            raise ConfigurationError(
                f"Unknown dependency '{dep_key}'. Known dependencies: {known}"
            )

        return DownloadPlan(
            dependency_key=dep_key,
            dependency=dep,
            url=self._get_url(dep_key, dep),
            archive_path=os.path.join(
                self.base_download_path, self._get_archive_name(dep_key, dep)
            ),
            destination_path=self._get_destination_path(dep),
            stale_paths=self._get_stale_paths(dep_key, dep),
        )

    def _get_url(self, dep_key: str, dep: Dependency) -> str:
        config = self.toolprov_config
        if dep_key == CLI_DEPENDENCY and config.cli_url:
            return config.cli_url

        if dep_key == RUNTIME_DEPENDENCY:
            return dep.resolve_url(
                version=config.runtime_version,
                host=config.runtime_download_host,
                arch=PlatformUtils.get_runtime_arch(),
            )

        return dep.resolve_url()

    def _get_archive_name(self, dep_key: str, dep: Dependency) -> str:
        if dep_key == CLI_DEPENDENCY:
            return self.toolprov_config.cli_archive_name
        return dep.archive_name

    def _get_destination_path(self, dep: Dependency) -> str:
        if dep.install_path:
            return os.path.join(self.base_download_path, dep.install_path)
        return self.base_download_path

    def _get_stale_paths(self, dep_key: str, dep: Dependency) -> List[str]:
        """
        Paths removed before extracting.

        An archive extracted into its own folder replaces that folder. One
        extracted straight into the data directory replaces the legacy
        folders; the archive's own top-level entries are added at install time.
        """
        if dep.install_path:
            return [self._get_destination_path(dep)]

        names = list(dep.stale_paths)
        if dep_key == CLI_DEPENDENCY:
            names = list(self.toolprov_config.legacy_cli_folders)
        return [os.path.join(self.base_download_path, name) for name in names]

    def mark_download_started(self, plan: DownloadPlan) -> None:
        plan.status = DownloadStatus.IN_PROGRESS
        self.dependency_states[plan.dependency_key] = DependencyState(
            dependency_key=plan.dependency_key,
            download_status=plan.status,
        )

    def mark_download_completed(
        self, plan: DownloadPlan, success: bool = True
    ) -> None:
        """
        Mark a download plan as completed or failed.

        Args:
            plan: The download plan to mark
            success: Whether the install was successful
        """
        plan.status = DownloadStatus.COMPLETED if success else DownloadStatus.FAILED

        state = DependencyState(
            dependency_key=plan.dependency_key,
            download_status=plan.status,
            downloaded_path=plan.destination_path if success else None,
            error_message=None if success else plan.error_message or "Download failed",
        )
        self.dependency_states[plan.dependency_key] = state

    def get_dependency_states(self) -> Dict[str, DependencyState]:
        """
        Get the states of all dependencies installed in this session.

        Returns:
            Dictionary mapping dependency keys to DependencyState objects
        """
        return self.dependency_states

    def get_dependency_state(self, dep_key: str) -> Optional[DependencyState]:
        return self.dependency_states.get(dep_key)
