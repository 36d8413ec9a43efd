#! /usr/bin/env python
# LICENSE: AGPLv3. See LICENSE at root of repo

import os
from typing import Iterable, Optional

from .logging_config import get_logger

logger = get_logger("util")

EXECUTABLE_EXTENSIONS = (".exe",)

# be sure to lowercase!
UTILITY_EXECUTABLES = (
    "unins",
    "crash",
    "report",
    "update",
    "patch",
    "redist",
    "vcredist",
    "dxsetup",
    "dotnet",
    "installer",
    "setup",
)

# Where games tuck their binary when the install root only holds tools
EXECUTABLE_SUBFOLDERS = ("bin", "Bin", "x64", "Win64")

SKIP_PATTERNS = (
    "dlc",
    "season pass",
    "expansion",
    "soundtrack",
    "art book",
    "artbook",
    "bonus",
    "pack",
)

GENERIC_FOLDER_NAMES = ("game", "games")


def is_executable_file(path):
    """Is the input path a real executable file that we have access to?

    is_executable_file(str) -> bool
    """
    try:
        return (
            path.lower().endswith(EXECUTABLE_EXTENSIONS)
            and os.path.isfile(path)
            and os.access(path, os.R_OK)
        )
    except OSError:
        return False


def is_valid_install(path: Optional[str]) -> bool:
    """Does path look like a real game install rather than a leftover entry?

    Uninstalled games, interrupted installs and runtime registrations often
    leave a directory (or just a registry entry) behind. A directory only counts
    if at least one executable exists somewhere below it.
    """
    if not path or not os.path.isdir(path):
        return False
    try:
        for _, _, files in os.walk(path):
            if any(f.lower().endswith(EXECUTABLE_EXTENSIONS) for f in files):
                return True
    except OSError as e:
        logger.debug("Cannot walk %s: %s", path, e)
    return False


def _is_utility(filename: str, denylist: Iterable[str]) -> bool:
    lower = filename.lower()
    return any(pattern in lower for pattern in denylist)


def _root_executables(directory: str) -> list[str]:
    with os.scandir(directory) as entries:
        exes = [
            entry.path
            for entry in entries
            if entry.is_file() and entry.name.lower().endswith(EXECUTABLE_EXTENSIONS)
        ]
    return sorted(exes, key=lambda p: os.path.basename(p).lower())


def find_main_executable(install_dir: str, extra_denylist: Iterable[str] = ()) -> Optional[str]:
    """Guess the game's main executable in install_dir.

    Prefers the largest non-utility executable at the root, then the first
    non-utility executable in a common binaries subfolder. Falls back to any
    root executable at all, since a guessed executable beats none.

    find_main_executable(str, iterable(str)) -> str or None
    """
    denylist = UTILITY_EXECUTABLES + tuple(p.lower() for p in extra_denylist)
    try:
        root_exes = _root_executables(install_dir)

        candidates = [exe for exe in root_exes if not _is_utility(os.path.basename(exe), denylist)]
        if candidates:
            return max(candidates, key=os.path.getsize)

        for sub_dir in EXECUTABLE_SUBFOLDERS:
            sub_path = os.path.join(install_dir, sub_dir)
            if not os.path.isdir(sub_path):
                continue
            for exe in _root_executables(sub_path):
                if not _is_utility(os.path.basename(exe), denylist):
                    return exe

        return root_exes[0] if root_exes else None
    except OSError as e:
        logger.debug("Cannot search %s for executables: %s", install_dir, e)
        return None


def normalize_install_path(raw_path: str) -> str:
    """Collapse separators and drop trailing ones. Launchers love forward slashes.

    normalize_install_path(str) -> str
    """
    normalized = os.path.normpath(raw_path.strip())
    stripped = normalized.rstrip("\\/")
    # "D:" alone is drive-relative, keep the root separator
    if not stripped or not os.path.splitdrive(stripped)[1]:
        return normalized
    return stripped


def path_key(path: Optional[str]) -> str:
    """Case-insensitive comparison key for a filesystem path."""
    if not path:
        return ""
    return normalize_install_path(path).casefold()


def clean_title(title: str) -> str:
    return title.replace("™", "").replace("®", "").replace("  ", " ").strip()


def is_skippable(name: str, patterns: Iterable[str] = SKIP_PATTERNS) -> bool:
    """True for DLC, soundtracks and other entries that aren't games."""
    lower = name.lower()
    return any(p in lower for p in patterns)


def is_generic_folder_name(name: str) -> bool:
    """Folder names that say nothing about the game ("635", "Game")."""
    lower = name.lower()
    return lower in GENERIC_FOLDER_NAMES or lower.isdigit()
