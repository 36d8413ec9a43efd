from launcherprobe.launchers.egs import EpicGamesStoreLauncher
from launcherprobe.launchers.gog import GogGalaxyLauncher
from launcherprobe.launchers.launcher import Launcher
from launcherprobe.launchers.steam import SteamLauncher
from launcherprobe.launchers.ubisoft import UbisoftConnectLauncher

__all__ = [
    "EpicGamesStoreLauncher",
    "GogGalaxyLauncher",
    "Launcher",
    "SteamLauncher",
    "UbisoftConnectLauncher",
]
