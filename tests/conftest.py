"""Pytest configuration and shared fixtures."""

import logging
import pathlib

import pytest

from toolprov.toolprov_config import ToolprovConfig
from toolprov.toolprov_logger import ToolprovLogger


@pytest.fixture
def data_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Application data directory isolated per test."""
    path = tmp_path / "appdata"
    path.mkdir()
    return path


@pytest.fixture
def config(data_dir: pathlib.Path) -> ToolprovConfig:
    return ToolprovConfig(data_dir=str(data_dir))


@pytest.fixture
def logger() -> ToolprovLogger:
    return ToolprovLogger(level=logging.DEBUG)
