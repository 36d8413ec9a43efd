from pathlib import Path
import json
import os
from typing import Optional

import launcherprobe.defs as defs
import launcherprobe.launchers.launcher as launcher
import launcherprobe.paths as paths
import launcherprobe.util as util
from launcherprobe.evidence import RegistryView
from launcherprobe.logging_config import get_logger

logger = get_logger("launchers.egs")

LAUNCHER_KEY = "SOFTWARE\\Epic Games\\EpicGamesLauncher"

APP_DATA_PROBES = (
    (LAUNCHER_KEY, "AppDataPath", RegistryView.MACHINE_32),
    (LAUNCHER_KEY, "AppDataPath", RegistryView.MACHINE_64),
)

# Manifests are already filtered to the "games" category, so only engine
# and runtime installs slip through
SKIP_PATTERNS = ("unreal engine", "directxredist")


class EpicGamesStoreLauncher(launcher.Launcher):
    """Support for the Epic Games Launcher.

    Every install has a json .item manifest in the launcher's Manifests folder.
    """

    launcher_type = defs.LauncherType.EPIC_GAMES

    def __init__(
        self,
        reader=None,
        default_paths: Optional[list[str]] = None,
        egs_manifest_path: Optional[str] = None,
    ):
        super().__init__(reader)
        self.default_paths = default_paths
        self.egs_manifest_path = egs_manifest_path

    def get_display_name(self) -> str:
        return "Epic Games Store"

    def get_install_path(self) -> Optional[str]:
        default_paths = self.default_paths
        if default_paths is None:
            default_paths = [
                os.path.join(paths.program_files_x86(), "Epic Games", "Launcher"),
                os.path.join(paths.program_files(), "Epic Games", "Launcher"),
            ]
        return self._first_existing_path((), default_paths)

    def get_manifest_path(self) -> Optional[str]:
        if self.egs_manifest_path is not None:
            return self.egs_manifest_path if os.path.isdir(self.egs_manifest_path) else None

        for key_path, value_name, view in APP_DATA_PROBES:
            app_data = self.reader.read_registry_value(key_path, value_name, view)
            if app_data:
                manifests = os.path.join(util.normalize_install_path(app_data), "Manifests")
                if os.path.isdir(manifests):
                    return manifests

        manifests = os.path.join(paths.program_data(), "Epic", "EpicGamesLauncher", "Data", "Manifests")
        return manifests if os.path.isdir(manifests) else None

    def detect_games(self) -> defs.DetectionResult:
        install_path = self.get_install_path()
        if not install_path:
            logger.info("Epic Games Store does not appear to be installed")
            return self._not_installed()

        result = defs.DetectionResult(is_installed=True, install_path=install_path)
        manifest_path = self.get_manifest_path()
        if not manifest_path:
            logger.info("No EGS manifest store found")
            return result

        logger.info("Scanning EGS manifest store (%s)...", manifest_path)
        # loop over every .item file
        for path in self.reader.find_files(manifest_path, "*.item"):
            try:
                game = self._parse_manifest(Path(path))
            except Exception as e:
                logger.debug("Skipping manifest %s: %s", path, e)
                continue
            launcher.add_unique(result.games, game)

        logger.info("Collected %d games from the EGS manifest store", len(result.games))
        return result

    def _parse_manifest(self, path: Path) -> Optional[defs.DetectedGame]:
        # EGS seems to write their json files out as utf-8
        with open(path, "r", encoding="utf-8") as f:
            item = json.load(f)

        app_name = item.get("AppName") or path.stem
        display_name = item.get("DisplayName") or app_name

        if item.get("bIsIncompleteInstall"):
            logger.debug("- Skipping '%s' since installation is incomplete", display_name)
            return None
        elif not item.get("bIsApplication", True):
            logger.debug("- Skipping '%s' since it isn't an application", display_name)
            return None
        elif "games" not in item.get("AppCategories", ()):
            logger.debug("- Skipping '%s' since it doesn't have the category 'games'", display_name)
            return None

        if not item.get("InstallLocation"):
            logger.debug("- Skipping '%s' since it apparently doesn't have an 'InstallLocation'", display_name)
            return None

        install_location = util.normalize_install_path(item["InstallLocation"])
        if not util.is_valid_install(install_location):
            logger.debug("- Skipping '%s' since %s is not a valid install", display_name, install_location)
            return None

        if util.is_skippable(display_name, SKIP_PATTERNS):
            logger.debug("- Skipping '%s' since it isn't a game", display_name)
            return None

        return self.make_game(
            display_name,
            app_name,
            install_location,
            self._executable_path(install_location, item.get("LaunchExecutable")),
            defs.URI_EPIC.format(game_id=app_name),
        )

    def _executable_path(self, install_location: str, launch_executable: Optional[str]) -> Optional[str]:
        if launch_executable:
            # Sanitize bad paths. RiME uses
            # "/RiME/SirenGame/Binaries/Win64/RiME.exe", which looks
            # absolute but it isn't.
            launch_executable = os.path.normpath(launch_executable).lstrip("\\/")
            executable_path = os.path.join(install_location, launch_executable)
            if os.path.isfile(executable_path):
                return executable_path
            logger.debug("Path `%s` does not exist, guessing the executable instead", executable_path)
        return util.find_main_executable(install_location)
