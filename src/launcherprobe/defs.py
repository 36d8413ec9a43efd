# LICENSE: AGPLv3. See LICENSE at root of repo

import enum
from typing import Optional


class LauncherType(str, enum.Enum):
    STEAM = "steam"
    EPIC_GAMES = "epicgames"
    UBISOFT_CONNECT = "ubisoftconnect"
    GOG_GALAXY = "goggalaxy"
    BATTLE_NET = "battlenet"
    ROCKSTAR_GAMES = "rockstargames"
    RIOT_GAMES = "riotgames"
    ROBLOX = "roblox"
    MINECRAFT = "minecraft"
    MANUAL = "manual"


URI_UBISOFT = "uplay://launch/{game_id}/0"
URI_EPIC = "com.epicgames.launcher://apps/{game_id}?action=launch&silent=true"
URI_STEAM = "steam://rungameid/{game_id}"
URI_GOG = "goggalaxy://openGameView/{game_id}"


class DetectedGame:
    """
    Data class to hold one game found by a detector. Should be everything a front end needs to
    list the game and hand its launch command off to the shell
    """

    def __init__(
        self,
        name,
        external_id,
        install_path,
        executable_path=None,
        launch_command=None,
    ):
        self.name = name
        self.external_id = external_id
        self.install_path = install_path
        self.executable_path = executable_path
        self.launch_command = launch_command

    def __lt__(self, other):
        # Sort by name
        return self.name < other.name

    def __repr__(self):
        return f"DetectedGame({self.name!r}, id={self.external_id!r}, path={self.install_path!r})"


class DetectionResult:
    """
    Outcome of one detect_games() call for a single launcher. Built fresh every call; the caller
    owns it.
    """

    def __init__(
        self,
        is_installed: bool = False,
        install_path: Optional[str] = None,
        error_message: Optional[str] = None,
        games: Optional[list[DetectedGame]] = None,
    ):
        self.is_installed = is_installed
        self.install_path = install_path
        self.error_message = error_message
        self.games = games if games is not None else []

    @classmethod
    def not_installed(cls, error_message: str) -> "DetectionResult":
        return cls(is_installed=False, error_message=error_message)

    def __repr__(self):
        return (
            f"DetectionResult(installed={self.is_installed}, path={self.install_path!r}, "
            f"games={len(self.games)}, error={self.error_message!r})"
        )
