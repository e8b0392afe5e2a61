"""
Configuration parameters for toolprov.
"""

import pathlib
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from toolprov.toolprov_exceptions import ConfigurationError

CONFIG_FILE_NAME = "toolprov.toml"

TOOLPROV_TOML_SCHEMA = """
# toolprov configuration

[toolprov]
# Folder created under the roaming application data directory
app_folder_name = "WakaTime"

# Use this directory instead of the application data directory (optional)
# data_dir = "/path/to/data"

# Archive of the CLI and the entry point inside it, relative to the data dir
# cli_url = "https://github.com/wakatime/wakatime/archive/master.zip"
# cli_relative_path = "wakatime-master/wakatime/cli.py"

# Embedded runtime version and the host serving it
# runtime_version = "3.5.2"
# runtime_download_host = "www.python.org"

# Inclusive range of runtime versions probed at fixed root paths
# fixed_path_versions = [26, 50]

# Proxy URL for downloads (omit for a direct connection)
# proxy = "http://proxy.example.com:8080"
"""


@dataclass
class ToolprovConfig:
    """
    Configuration parameters
    """

    app_folder_name: str = "WakaTime"
    data_dir: Optional[str] = None
    cli_url: Optional[str] = None
    cli_relative_path: str = "wakatime-master/wakatime/cli.py"
    cli_archive_name: str = "wakatime-cli.zip"
    legacy_cli_folders: List[str] = field(
        default_factory=lambda: ["legacy-python-cli-master"]
    )
    runtime_version: Optional[str] = None
    runtime_download_host: Optional[str] = None
    runtime_folder: str = "python"
    runtime_binary_name: str = "pythonw"
    registry_key: str = r"Python.File\shell\open\command"
    fixed_path_versions: Tuple[int, int] = (26, 50)
    proxy: Optional[str] = None
    download_timeout: int = 120

    def __post_init__(self) -> None:
        versions = tuple(self.fixed_path_versions)
        if len(versions) != 2:
            raise ConfigurationError(
                "fixed_path_versions must hold exactly two numbers"
            )
        low, high = versions
        if low > high:
            raise ConfigurationError(
                f"fixed_path_versions must be ascending, got [{low}, {high}]"
            )
        self.fixed_path_versions = (int(low), int(high))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ToolprovConfig":
        """
        Create a ToolprovConfig instance from a dictionary, rejecting unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}"
            )

        return cls(**d)

    @classmethod
    def from_toml_file(cls, path: pathlib.Path) -> "ToolprovConfig":
        """
        Load the [toolprov] table of a TOML file.

        Raises:
            ConfigurationError: If the file cannot be parsed
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

        section = data.get("toolprov", {})
        if not isinstance(section, dict):
            raise ConfigurationError(f"[toolprov] in {path} must be a table")

        return cls.from_dict(section)

    @classmethod
    def load(cls, directory: Optional[str] = None) -> "ToolprovConfig":
        """
        Load ``toolprov.toml`` from the directory if present, else the defaults
        """
        if directory:
            config_file = pathlib.Path(directory) / CONFIG_FILE_NAME
            if config_file.is_file():
                return cls.from_toml_file(config_file)
        return cls()
