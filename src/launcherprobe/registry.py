# LICENSE: AGPLv3. See LICENSE at root of repo

"""Which detector handles which launcher.

Callers ask for detectors through get_detector() rather than building them, so
adding a launcher only means adding it to LAUNCHERS.
"""

from types import MappingProxyType
from typing import Optional

from launcherprobe.defs import LauncherType
from launcherprobe.evidence import EvidenceReader
from launcherprobe.launchers import (
    EpicGamesStoreLauncher,
    GogGalaxyLauncher,
    Launcher,
    SteamLauncher,
    UbisoftConnectLauncher,
)

# Insertion order is the order launchers are reported in
LAUNCHERS = MappingProxyType(
    {
        LauncherType.STEAM: SteamLauncher,
        LauncherType.EPIC_GAMES: EpicGamesStoreLauncher,
        LauncherType.UBISOFT_CONNECT: UbisoftConnectLauncher,
        LauncherType.GOG_GALAXY: GogGalaxyLauncher,
    }
)


def supported_launchers() -> list[LauncherType]:
    return list(LAUNCHERS)


def get_detector(launcher_type: LauncherType, reader: Optional[EvidenceReader] = None) -> Optional[Launcher]:
    """Return a detector for launcher_type, or None if we can't detect that launcher.

    get_detector(LauncherType, EvidenceReader) -> Launcher or None
    """
    detector_class = LAUNCHERS.get(launcher_type)
    if detector_class is None:
        return None
    return detector_class(reader)
