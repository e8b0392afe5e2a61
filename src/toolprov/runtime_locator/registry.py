"""
Registry access used to find the runtime associated with its script file type.
"""

import re
import sys
from typing import Optional

if sys.platform == "win32":
    import winreg

# "<dir>\<file.ext>" as found in a shell open command
COMMAND_PATH_PATTERN = re.compile(r'"([^"]*)\\([^"\\]+(?:\.[^".\\]+))"')


class RegistryReader:
    """
    Reads one string value from the registry. The base reader finds nothing.
    """

    def read_default_value(self, key_path: str) -> Optional[str]:
        return None


class WindowsRegistryReader(RegistryReader):
    """
    Reads the default value of a key under HKEY_CLASSES_ROOT.
    """

    def read_default_value(self, key_path: str) -> Optional[str]:
        if sys.platform != "win32":
            return None
        try:
            with winreg.OpenKey(winreg.HKEY_CLASSES_ROOT, key_path) as key:
                value, _ = winreg.QueryValueEx(key, None)
        except FileNotFoundError:
            return None
        return str(value) if value is not None else None


def parse_command_directory(command: str) -> Optional[str]:
    """
    Directory of the quoted executable in a shell open command, e.g.
    C:\\Python27 for "C:\\Python27\\python.exe" "%1" %*
    """
    match = COMMAND_PATH_PATTERN.search(command)
    if not match:
        return None
    return match.group(1)
