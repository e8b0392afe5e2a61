"""
Defines settings for toolprov
"""

import os
import pathlib
from typing import Optional

from toolprov.toolprov_config import ToolprovConfig


class ToolprovSettings:
    """
    Provides the various settings for toolprov
    """

    @staticmethod
    def get_roaming_directory() -> str:
        """
        Roaming application data root (%APPDATA% on Windows, else the home directory)
        """
        return os.environ.get("APPDATA") or os.path.expanduser("~")

    @staticmethod
    def get_app_data_directory(config: Optional[ToolprovConfig] = None) -> str:
        """
        Directory every install is rooted in. Created if it does not exist.
        """
        config = config or ToolprovConfig()
        if config.data_dir:
            app_folder = pathlib.Path(config.data_dir)
        else:
            app_folder = pathlib.Path(
                ToolprovSettings.get_roaming_directory(), config.app_folder_name
            )
        app_folder.mkdir(parents=True, exist_ok=True)
        return str(app_folder)

    @staticmethod
    def get_runtime_directory(config: Optional[ToolprovConfig] = None) -> str:
        config = config or ToolprovConfig()
        return os.path.join(
            ToolprovSettings.get_app_data_directory(config), config.runtime_folder
        )

    @staticmethod
    def get_cli_location(config: Optional[ToolprovConfig] = None) -> str:
        config = config or ToolprovConfig()
        return os.path.join(
            ToolprovSettings.get_app_data_directory(config),
            *config.cli_relative_path.split("/"),
        )
