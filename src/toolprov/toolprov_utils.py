"""
This file contains various utility functions like I/O operations, handling paths, etc.
"""

import logging
import ntpath
import os
import platform
import shutil
import ssl
import zipfile
from typing import Optional, Set

import requests
from requests.adapters import HTTPAdapter

from toolprov.toolprov_logger import ToolprovLogger


class TLSAdapter(HTTPAdapter):
    """
    HTTPAdapter that refuses anything older than TLS 1.2, also through proxies
    """

    def _tls_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        return context

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self._tls_context()
        return super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args, **kwargs):
        kwargs["ssl_context"] = self._tls_context()
        return super().proxy_manager_for(*args, **kwargs)


class FileUtils:
    """
    Utility functions for file operations
    """

    @staticmethod
    def create_session(proxy: Optional[str] = None) -> requests.Session:
        """
        Session routed through the proxy descriptor. None means a direct
        connection, so proxies from the environment are ignored too.
        """
        session = requests.Session()
        adapter = TLSAdapter()
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        if proxy:
            session.proxies = {"http": proxy, "https": proxy}
        else:
            session.trust_env = False
        return session

    @staticmethod
    def download_file(
        logger: ToolprovLogger,
        url: str,
        target_path: str,
        proxy: Optional[str] = None,
        timeout: int = 120,
    ) -> None:
        """
        Downloads the file from the given URL to the given {target_path}
        """
        os.makedirs(os.path.dirname(target_path), exist_ok=True)
        with FileUtils.create_session(proxy) as session:
            response = session.get(url, stream=True, timeout=timeout)
            try:
                response.raise_for_status()
                with open(target_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=64 * 1024):
                        f.write(chunk)
            finally:
                response.close()
        logger.log(f"Downloaded {url} to {target_path}", logging.DEBUG)

    @staticmethod
    def extract_zip(logger: ToolprovLogger, archive_path: str, target_path: str) -> None:
        """
        Extracts the zip archive into {target_path}, entries land at their zip-relative paths
        """
        os.makedirs(target_path, exist_ok=True)
        with zipfile.ZipFile(archive_path) as archive:
            archive.extractall(target_path)
        logger.log(f"Extracted {archive_path} to {target_path}", logging.DEBUG)

    @staticmethod
    def zip_top_level_entries(archive_path: str) -> Set[str]:
        """
        Names of the top-level files and directories inside a zip archive.
        Absolute names, drive-qualified names and `.`/`..` components are
        left out, so every name returned is a plain child entry.
        """
        entries = set()
        with zipfile.ZipFile(archive_path) as archive:
            for name in archive.namelist():
                top = name.replace("\\", "/").split("/", 1)[0]
                if top in ("", os.curdir, os.pardir) or ntpath.splitdrive(top)[0]:
                    continue
                entries.add(top)
        return entries

    @staticmethod
    def is_strictly_inside(base_dir: str, path: str) -> bool:
        """
        Whether {path} resolves to somewhere below {base_dir}, and is not {base_dir} itself.
        A symlink as the last component counts as its own location.
        """
        base = os.path.realpath(base_dir)
        path = os.path.normpath(path)
        target = os.path.join(
            os.path.realpath(os.path.dirname(path)), os.path.basename(path)
        )
        if target == base:
            return False
        try:
            return os.path.commonpath([base, target]) == base
        except ValueError:
            return False

    @staticmethod
    def recursive_delete(logger: ToolprovLogger, path: str) -> None:
        """
        Removes {path} whether it is a directory tree or a single file.
        Missing paths and locked files are tolerated.
        """
        if os.path.isdir(path) and not os.path.islink(path):
            try:
                shutil.rmtree(path)
            except OSError as e:
                logger.log(f"Could not remove directory {path}: {e}", logging.DEBUG)
        elif os.path.lexists(path):
            try:
                os.remove(path)
            except OSError as e:
                logger.log(f"Could not remove file {path}: {e}", logging.DEBUG)

    @staticmethod
    def delete_file_quietly(logger: ToolprovLogger, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            logger.log(f"Could not remove {path}: {e}", logging.DEBUG)


class PlatformUtils:
    """
    This class provides utilities for platform detection and identification.
    """

    @staticmethod
    def is_64bit_os() -> bool:
        return platform.machine().lower().endswith("64")

    @staticmethod
    def get_runtime_arch() -> str:
        """
        Architecture tag used in embedded runtime archive names
        """
        return "amd64" if PlatformUtils.is_64bit_os() else "win32"
