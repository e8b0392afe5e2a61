"""
Tests for comparing the installed CLI version with the latest one.
"""

from unittest.mock import MagicMock

import pytest

from tests.test_utils import result_for
from toolprov.version_checker import VersionChecker, VersionInfo

RUNTIME = "C:\\Python27\\pythonw"
CLI = "C:\\Users\\dev\\AppData\\Roaming\\WakaTime\\wakatime-master\\wakatime\\cli.py"


@pytest.fixture
def locator():
    mock = MagicMock()
    mock.resolve.return_value = RUNTIME
    return mock


@pytest.fixture
def runner():
    return MagicMock()


@pytest.fixture
def checker(locator, runner, logger):
    return VersionChecker(locator, runner, CLI, logger)


def reports(runner, version, ok=True):
    runner.run.return_value = result_for(RUNTIME, [CLI, "--version"], ok=ok, error=version)


class TestIsUpToDate:
    """Tests for VersionChecker.is_up_to_date."""

    def test_same_version_is_current(self, checker, runner):
        reports(runner, "4.2.3")

        assert checker.is_up_to_date("4.2.3")
        runner.run.assert_called_once_with(RUNTIME, [CLI, "--version"])

    def test_different_version_is_outdated(self, checker, runner):
        reports(runner, "4.2.3")

        assert not checker.is_up_to_date("4.2.4")

    def test_older_latest_still_counts_as_outdated(self, checker, runner):
        reports(runner, "4.2.3")

        assert not checker.is_up_to_date("4.2.2")

    def test_reported_version_is_trimmed(self, checker, runner):
        reports(runner, "  13.0.7 \t")

        assert checker.is_up_to_date("13.0.7")

    def test_version_read_from_error_stream_only(self, checker, runner):
        runner.run.return_value = result_for(RUNTIME, output="4.2.3", error="")

        assert not checker.is_up_to_date("4.2.3")

    @pytest.mark.parametrize("latest", ["4.2.3", "", "anything"])
    def test_failed_invocation_is_never_current(self, checker, runner, latest):
        reports(runner, "", ok=False)

        assert not checker.is_up_to_date(latest)

    def test_no_runtime_is_never_current(self, checker, locator, runner):
        locator.resolve.return_value = None

        assert not checker.is_up_to_date("4.2.3")
        runner.run.assert_not_called()

    def test_latest_version_may_be_a_callable(self, checker, runner):
        reports(runner, "4.2.3")
        latest = MagicMock(return_value="4.2.3")

        assert checker.is_up_to_date(latest)
        latest.assert_called_once_with()

    def test_latest_not_fetched_when_cli_fails(self, checker, runner):
        reports(runner, "", ok=False)
        latest = MagicMock(return_value="4.2.3")

        checker.is_up_to_date(latest)

        latest.assert_not_called()


def test_version_info():
    info = VersionInfo(installed="4.2.3", latest="4.2.3")

    assert info.is_current
    assert not VersionInfo(installed="4.2.3", latest="v4.2.3").is_current


def test_get_version_info(checker, runner):
    reports(runner, "4.2.3")

    assert checker.get_version_info("4.2.4") == VersionInfo("4.2.3", "4.2.4")
