"""
Tests for runtime discovery order, memoization and registry parsing.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from tests.test_utils import runner_accepting
from toolprov.runtime_locator import (
    DiscoveryStrategy,
    RegistryReader,
    RuntimeLocator,
    parse_command_directory,
)
from toolprov.toolprov_config import ToolprovConfig

REGISTRY_COMMAND = '"C:\\Python27\\python.exe" "%1" %*'
REGISTRY_RUNTIME = "C:\\Python27\\pythonw"


@pytest.fixture
def registry():
    reader = MagicMock(spec=RegistryReader)
    reader.read_default_value.return_value = None
    return reader


@pytest.fixture
def runner():
    mock = MagicMock()
    mock.run.side_effect = runner_accepting([])
    return mock


@pytest.fixture
def locator(config, runner, logger, registry):
    return RuntimeLocator(config, runner, logger, registry)


def probed_paths(runner):
    return [c.args[0] for c in runner.run.call_args_list]


class TestPriority:
    """Tests for the order strategies are tried in."""

    def test_embedded_wins_without_touching_other_strategies(
        self, locator, runner, registry, data_dir
    ):
        embedded = os.path.join(str(data_dir), "python", "pythonw")
        runner.run.side_effect = runner_accepting([embedded, REGISTRY_RUNTIME])
        registry.read_default_value.return_value = REGISTRY_COMMAND

        assert locator.resolve() == embedded
        assert locator.resolved_candidate.strategy == DiscoveryStrategy.EMBEDDED
        assert probed_paths(runner) == [embedded]
        runner.run.assert_called_once_with(embedded, ["--version"])
        registry.read_default_value.assert_not_called()

    def test_registry_used_when_embedded_missing(self, locator, runner, registry):
        runner.run.side_effect = runner_accepting([REGISTRY_RUNTIME, "\\python26\\pythonw"])
        registry.read_default_value.return_value = REGISTRY_COMMAND

        assert locator.resolve() == REGISTRY_RUNTIME
        assert locator.resolved_candidate.strategy == DiscoveryStrategy.SYSTEM_REGISTRY
        registry.read_default_value.assert_called_once_with(
            r"Python.File\shell\open\command"
        )
        assert "\\python26\\pythonw" not in probed_paths(runner)

    def test_fixed_path_scan_is_last_resort(self, locator, runner):
        runner.run.side_effect = runner_accepting(["\\Python30\\pythonw"])

        assert locator.resolve() == "\\Python30\\pythonw"
        assert locator.resolved_candidate.strategy == DiscoveryStrategy.FIXED_PATH_SCAN
        scanned = probed_paths(runner)[1:]
        assert scanned[:4] == [
            "\\python26\\pythonw",
            "\\Python26\\pythonw",
            "\\python27\\pythonw",
            "\\Python27\\pythonw",
        ]
        assert scanned[-1] == "\\Python30\\pythonw"
        assert len(scanned) == 10

    def test_registry_without_quoted_path_is_skipped(self, locator, runner, registry):
        registry.read_default_value.return_value = "python.exe %1"
        runner.run.side_effect = runner_accepting(["\\python26\\pythonw"])

        assert locator.resolve() == "\\python26\\pythonw"

    def test_registry_error_falls_through_to_scan(self, locator, runner, registry):
        registry.read_default_value.side_effect = PermissionError("denied")
        runner.run.side_effect = runner_accepting(["\\python26\\pythonw"])

        assert locator.resolve() == "\\python26\\pythonw"

    def test_errors_raised_while_probing_are_skipped(self, locator, runner):
        accept = runner_accepting(["\\Python26\\pythonw"])

        def flaky(program, arguments=(), **kwargs):
            if program == "\\python26\\pythonw":
                raise RuntimeError("boom")
            return accept(program, arguments, **kwargs)

        runner.run.side_effect = flaky

        assert locator.resolve() == "\\Python26\\pythonw"

    def test_scan_range_comes_from_config(self, data_dir, runner, logger, registry):
        config = ToolprovConfig(data_dir=str(data_dir), fixed_path_versions=(35, 36))
        locator = RuntimeLocator(config, runner, logger, registry)

        assert list(locator.fixed_path_candidates()) == [
            "\\python35\\pythonw",
            "\\Python35\\pythonw",
            "\\python36\\pythonw",
            "\\Python36\\pythonw",
        ]

    def test_default_scan_covers_26_through_50(self, locator):
        candidates = list(locator.fixed_path_candidates())

        assert len(candidates) == 50
        assert candidates[0] == "\\python26\\pythonw"
        assert candidates[-1] == "\\Python50\\pythonw"


class TestMemoization:
    """Tests for caching of the resolved runtime."""

    def test_second_resolve_does_not_validate_again(self, locator, runner, data_dir):
        embedded = os.path.join(str(data_dir), "python", "pythonw")
        runner.run.side_effect = runner_accepting([embedded])

        first = locator.resolve()
        calls = runner.run.call_count
        second = locator.locate()

        assert first == second == embedded
        assert runner.run.call_count == calls

    def test_not_found_is_not_cached(self, locator, runner, data_dir):
        assert locator.resolve() is None
        assert not locator.is_runtime_installed()

        embedded = os.path.join(str(data_dir), "python", "pythonw")
        runner.run.side_effect = runner_accepting([embedded])

        assert locator.resolve() == embedded

    def test_invalidate_forces_new_search(self, locator, runner, registry, data_dir):
        runner.run.side_effect = runner_accepting([REGISTRY_RUNTIME])
        registry.read_default_value.return_value = REGISTRY_COMMAND
        assert locator.resolve() == REGISTRY_RUNTIME

        embedded = os.path.join(str(data_dir), "python", "pythonw")
        runner.run.side_effect = runner_accepting([embedded, REGISTRY_RUNTIME])
        assert locator.resolve() == REGISTRY_RUNTIME

        locator.invalidate()

        assert locator.resolve() == embedded

    def test_concurrent_callers_validate_once(self, locator, runner, data_dir):
        embedded = os.path.join(str(data_dir), "python", "pythonw")
        runner.run.side_effect = runner_accepting([embedded])

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: locator.resolve(), range(32)))

        assert set(results) == {embedded}
        assert runner.run.call_count == 1


class TestRegistryParsing:
    """Tests for extracting the runtime directory from an open command."""

    def test_quoted_executable(self):
        assert parse_command_directory(REGISTRY_COMMAND) == "C:\\Python27"

    def test_path_with_spaces(self):
        command = '"C:\\Program Files\\Python 3\\python.exe" "%1"'
        assert parse_command_directory(command) == "C:\\Program Files\\Python 3"

    def test_unquoted_command(self):
        assert parse_command_directory("C:\\Python27\\python.exe %1") is None

    def test_base_reader_finds_nothing(self):
        assert RegistryReader().read_default_value("Python.File") is None
