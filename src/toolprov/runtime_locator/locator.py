"""
Runtime locator implementation.

Finds a runtime binary that actually runs, trying candidate sources in a
fixed priority order, and remembers the first one found.
"""

import dataclasses
import logging
import ntpath
import os
import threading
from enum import Enum
from typing import Callable, Iterator, List, Optional

from toolprov.process_runner import ProcessRunner
from toolprov.runtime_locator.registry import (
    RegistryReader,
    WindowsRegistryReader,
    parse_command_directory,
)
from toolprov.toolprov_config import ToolprovConfig
from toolprov.toolprov_logger import ToolprovLogger
from toolprov.toolprov_settings import ToolprovSettings


class DiscoveryStrategy(str, Enum):
    """Where a runtime candidate came from, in priority order."""

    EMBEDDED = "embedded"
    SYSTEM_REGISTRY = "system_registry"
    FIXED_PATH_SCAN = "fixed_path_scan"


@dataclasses.dataclass(frozen=True)
class RuntimeCandidate:
    path: str
    strategy: DiscoveryStrategy


@dataclasses.dataclass
class ProbeResult:
    """
    Outcome of probing one strategy.

    Attributes:
        found: Whether a valid runtime was found
        candidate: The validated candidate when found
        cause: Why the last candidate probed was rejected, if known
    """

    found: bool
    candidate: Optional[RuntimeCandidate] = None
    cause: Optional[BaseException] = None

    @classmethod
    def not_found(cls, cause: Optional[BaseException] = None) -> "ProbeResult":
        return cls(found=False, cause=cause)


class RuntimeLocator:
    """
    Locates a usable runtime binary.

    Holds the only copy of the resolved path. Once a strategy succeeds the
    path is reused without re-validation until invalidate() is called; a
    failed search is never cached.
    """

    VERSION_FLAG = "--version"

    def __init__(
        self,
        config: ToolprovConfig,
        runner: ProcessRunner,
        logger: ToolprovLogger,
        registry: Optional[RegistryReader] = None,
    ):
        self.config = config
        self.runner = runner
        self.logger = logger
        self.registry = registry if registry is not None else WindowsRegistryReader()
        self._resolved: Optional[RuntimeCandidate] = None
        self._lock = threading.Lock()

    @property
    def resolved_candidate(self) -> Optional[RuntimeCandidate]:
        return self._resolved

    def resolve(self) -> Optional[str]:
        """
        Path of a validated runtime binary, or None if no strategy found one.
        """
        resolved = self._resolved
        if resolved is not None:
            return resolved.path

        with self._lock:
            # Another caller may have resolved while we waited
            if self._resolved is not None:
                return self._resolved.path

            for probe in self._strategies():
                result = probe()
                if result.found:
                    self._resolved = result.candidate
                    self.logger.log(
                        f"Runtime found from {result.candidate.strategy.value}: "
                        f"{result.candidate.path}",
                        logging.DEBUG,
                    )
                    return result.candidate.path

        self.logger.log("No usable runtime found", logging.INFO)
        return None

    locate = resolve

    def invalidate(self) -> None:
        """
        Forget the resolved runtime so the next resolve() searches again.
        """
        with self._lock:
            self._resolved = None

    def is_runtime_installed(self) -> bool:
        return self.resolve() is not None

    def _strategies(self) -> List[Callable[[], ProbeResult]]:
        return [
            self.probe_embedded,
            self.probe_registry,
            self.probe_fixed_paths,
        ]

    def embedded_path(self) -> str:
        return os.path.join(
            ToolprovSettings.get_runtime_directory(self.config),
            self.config.runtime_binary_name,
        )

    def probe_embedded(self) -> ProbeResult:
        return self._validate(self.embedded_path(), DiscoveryStrategy.EMBEDDED)

    def probe_registry(self) -> ProbeResult:
        try:
            command = self.registry.read_default_value(self.config.registry_key)
        except OSError as e:
            self.logger.log(f"Registry lookup failed: {e}", logging.DEBUG)
            return ProbeResult.not_found(e)

        if not command:
            return ProbeResult.not_found()

        directory = parse_command_directory(command)
        if directory is None:
            self.logger.log(
                f"No executable path in registry command: {command}", logging.DEBUG
            )
            return ProbeResult.not_found()

        path = ntpath.join(directory, self.config.runtime_binary_name)
        return self._validate(path, DiscoveryStrategy.SYSTEM_REGISTRY)

    def fixed_path_candidates(self) -> Iterator[str]:
        """
        Root-level install folders such as \\python27\\pythonw and \\Python27\\pythonw
        """
        low, high = self.config.fixed_path_versions
        for version in range(low, high + 1):
            for folder in ("python", "Python"):
                yield ntpath.join(
                    f"\\{folder}{version}", self.config.runtime_binary_name
                )

    def probe_fixed_paths(self) -> ProbeResult:
        last = ProbeResult.not_found()
        for location in self.fixed_path_candidates():
            last = self._validate(location, DiscoveryStrategy.FIXED_PATH_SCAN)
            if last.found:
                return last
        return last

    def _validate(self, path: str, strategy: DiscoveryStrategy) -> ProbeResult:
        """
        A candidate is valid when running it with the version flag works.
        The exit code is not checked.
        """
        try:
            result = self.runner.run(path, [self.VERSION_FLAG])
        except Exception as e:
            self.logger.log(f"Probing {path} failed: {e}", logging.DEBUG)
            return ProbeResult.not_found(e)
        if not result.success:
            return ProbeResult.not_found(result.exception)
        return ProbeResult(found=True, candidate=RuntimeCandidate(path, strategy))
