# LICENSE: AGPLv3. See LICENSE at root of repo

"""Well-known Windows folders that launchers install into.

Values are read from the environment when called, not at import, so that a
process (or a test) that changes the environment sees the new locations.
"""

import os

import appdirs


def program_files() -> str:
    return os.environ.get("ProgramFiles", "C:\\Program Files")


def program_files_x86() -> str:
    return os.environ.get("ProgramFiles(x86)", "C:\\Program Files (x86)")


def program_data() -> str:
    return os.environ.get("ProgramData", "C:\\ProgramData")


def local_app_data(app_name: str) -> str:
    """%LOCALAPPDATA%\\<app_name> on Windows, the XDG data dir elsewhere.

    local_app_data(str) -> str
    """
    return appdirs.user_data_dir(app_name, appauthor=False, roaming=False)
