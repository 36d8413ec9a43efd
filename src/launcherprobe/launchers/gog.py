# LICENSE: AGPLv3. See LICENSE at root of repo

import os
from typing import Optional

import launcherprobe.defs as defs
import launcherprobe.launchers.launcher as launcher
import launcherprobe.paths as paths
import launcherprobe.util as util
from launcherprobe.evidence import RegistryView
from launcherprobe.logging_config import get_logger

logger = get_logger("launchers.gog")

CLIENT_KEY = "SOFTWARE\\GOG.com\\GalaxyClient\\paths"
GAMES_KEY = "SOFTWARE\\GOG.com\\Games"

INSTALL_PATH_PROBES = (
    (CLIENT_KEY, "client", RegistryView.MACHINE_32),
    (CLIENT_KEY, "client", RegistryView.MACHINE_64),
)

GAMES_VIEWS = (RegistryView.MACHINE_32, RegistryView.MACHINE_64)

HELPER_EXECUTABLES = ("galaxyclient", "goggalaxy")

# Galaxy registers DLC under its parent game, only goodies get their own key
SKIP_PATTERNS = ("soundtrack", "art book", "artbook")


class GogGalaxyLauncher(launcher.Launcher):
    """Support for GOG Galaxy.

    Installed games are registered under HKLM\\SOFTWARE\\GOG.com\\Games\\<id>.
    """

    launcher_type = defs.LauncherType.GOG_GALAXY

    def __init__(self, reader=None, default_paths: Optional[list[str]] = None):
        super().__init__(reader)
        self.default_paths = default_paths

    def get_display_name(self) -> str:
        return "GOG Galaxy"

    def get_install_path(self) -> Optional[str]:
        default_paths = self.default_paths
        if default_paths is None:
            default_paths = [os.path.join(paths.program_files_x86(), "GOG Galaxy")]
        return self._first_existing_path(INSTALL_PATH_PROBES, default_paths)

    def detect_games(self) -> defs.DetectionResult:
        install_path = self.get_install_path()
        if not install_path:
            logger.info("GOG Galaxy does not appear to be installed")
            return self._not_installed()

        result = defs.DetectionResult(is_installed=True, install_path=install_path)
        for view in GAMES_VIEWS:
            for key_name in self.reader.registry_subkey_names(GAMES_KEY, view):
                try:
                    game = self._parse_registry_game(key_name, view)
                except Exception as e:
                    logger.debug("Skipping GOG entry %s: %s", key_name, e)
                    continue
                launcher.add_unique(result.games, game)

        logger.info("Collected %d games from GOG Galaxy", len(result.games))
        return result

    def _parse_registry_game(self, key_name: str, view: RegistryView) -> Optional[defs.DetectedGame]:
        key_path = f"{GAMES_KEY}\\{key_name}"
        install_dir = self.reader.read_registry_value(key_path, "path", view)
        if not install_dir:
            return None

        install_dir = util.normalize_install_path(install_dir)
        if not util.is_valid_install(install_dir):
            logger.debug("- Skipping %s since %s is not a valid install", key_name, install_dir)
            return None

        game_id = self.reader.read_registry_value(key_path, "gameID", view) or key_name
        name = self.reader.read_registry_value(key_path, "gameName", view) or os.path.basename(install_dir)
        if util.is_skippable(name, SKIP_PATTERNS):
            logger.debug("- Skipping %s ('%s') since it isn't a game", game_id, name)
            return None

        exe = self.reader.read_registry_value(key_path, "exe", view)
        if not exe or not util.is_executable_file(exe):
            exe = util.find_main_executable(install_dir, HELPER_EXECUTABLES)

        return self.make_game(name, game_id, install_dir, exe, defs.URI_GOG.format(game_id=game_id))
