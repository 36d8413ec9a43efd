# LICENSE: AGPLv3. See LICENSE at root of repo

"""Fault-tolerant reads of the registry and the filesystem.

Every public method of :class:`EvidenceReader` returns a value: a missing key,
a missing value, a permission error and a corrupted entry all look the same to
the caller (``None``, ``False`` or an empty list). Launchers routinely leave
some of their expected trees absent, and one unreadable entry must never abort
a whole scan.
"""

import enum
import fnmatch
import os
from typing import Optional

try:
    import winreg  # type: ignore
except ImportError:
    winreg = None  # type: ignore

from .logging_config import get_logger

logger = get_logger("evidence")


class RegistryView(enum.Enum):
    MACHINE_64 = "HKLM (64-bit)"
    MACHINE_32 = "HKLM (32-bit)"
    CURRENT_USER = "HKCU"


class WindowsRegistry:
    """Raw registry access through winreg.

    Methods may raise OSError; EvidenceReader is responsible for turning that
    into absence. On hosts without winreg there is nothing to read, so every
    lookup reports absence directly.
    """

    def _open(self, view: RegistryView, key_path: str):
        if view is RegistryView.CURRENT_USER:
            return winreg.OpenKey(winreg.HKEY_CURRENT_USER, key_path, 0, winreg.KEY_READ)
        flag = winreg.KEY_WOW64_32KEY if view is RegistryView.MACHINE_32 else winreg.KEY_WOW64_64KEY
        return winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key_path, 0, winreg.KEY_READ | flag)

    def query_value(self, view: RegistryView, key_path: str, value_name: str) -> Optional[str]:
        if winreg is None:
            return None
        with self._open(view, key_path) as key:
            value, _ = winreg.QueryValueEx(key, value_name)
        return None if value is None else str(value)

    def subkey_names(self, view: RegistryView, key_path: str) -> list[str]:
        if winreg is None:
            return []
        with self._open(view, key_path) as key:
            count = winreg.QueryInfoKey(key)[0]
            return [winreg.EnumKey(key, i) for i in range(count)]

    def key_exists(self, view: RegistryView, key_path: str) -> bool:
        if winreg is None:
            return False
        with self._open(view, key_path):
            return True


class EvidenceReader:
    """Registry and filesystem reads that never raise.

    The registry backend can be anything with the WindowsRegistry methods,
    which is how an in-memory registry is plugged in on non-Windows hosts.
    """

    def __init__(self, registry=None):
        self.registry = registry if registry is not None else WindowsRegistry()

    def read_registry_value(
        self,
        key_path: str,
        value_name: str,
        view: RegistryView = RegistryView.MACHINE_64,
    ) -> Optional[str]:
        """Read a value as a string. Empty values count as absent.

        read_registry_value(str, str, RegistryView) -> str or None
        """
        try:
            value = self.registry.query_value(view, key_path, value_name)
        except Exception as e:
            logger.debug("No value %s\\%s in %s: %s", key_path, value_name, view.value, e)
            return None
        if value is None:
            return None
        value = value.strip()
        return value or None

    def registry_key_exists(self, key_path: str, view: RegistryView = RegistryView.MACHINE_64) -> bool:
        try:
            return bool(self.registry.key_exists(view, key_path))
        except Exception as e:
            logger.debug("No key %s in %s: %s", key_path, view.value, e)
            return False

    def registry_subkey_names(self, key_path: str, view: RegistryView = RegistryView.MACHINE_64) -> list[str]:
        try:
            return list(self.registry.subkey_names(view, key_path))
        except Exception as e:
            logger.debug("Cannot enumerate %s in %s: %s", key_path, view.value, e)
            return []

    def read_text(self, path: str) -> Optional[str]:
        if not path:
            return None
        try:
            # Only used to pull out settings lines, so bad bytes are replaced
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                return f.read()
        except OSError as e:
            logger.debug("Cannot read %s: %s", path, e)
            return None

    def find_files(self, directory: str, pattern: str, recursive: bool = False) -> list[str]:
        """Files under directory whose name matches a glob pattern, case-insensitively.

        find_files(str, str, bool) -> list(str)
        """
        if not directory or not os.path.isdir(directory):
            return []
        pattern = pattern.lower()
        found = []
        try:
            if recursive:
                for root, _, files in os.walk(directory):
                    found.extend(
                        os.path.join(root, f) for f in files if fnmatch.fnmatchcase(f.lower(), pattern)
                    )
            else:
                with os.scandir(directory) as entries:
                    for entry in entries:
                        if entry.is_file() and fnmatch.fnmatchcase(entry.name.lower(), pattern):
                            found.append(entry.path)
        except OSError as e:
            logger.debug("Cannot list files in %s: %s", directory, e)
            return []
        return sorted(found)

    def list_directories(self, directory: str) -> list[str]:
        if not directory or not os.path.isdir(directory):
            return []
        try:
            with os.scandir(directory) as entries:
                return sorted(entry.path for entry in entries if entry.is_dir())
        except OSError as e:
            logger.debug("Cannot list directories in %s: %s", directory, e)
            return []
