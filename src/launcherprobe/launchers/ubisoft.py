# LICENSE: AGPLv3. See LICENSE at root of repo

import os
import re
from types import MappingProxyType
from typing import Optional

import launcherprobe.defs as defs
import launcherprobe.launchers.launcher as launcher
import launcherprobe.paths as paths
import launcherprobe.util as util
from launcherprobe.evidence import RegistryView
from launcherprobe.logging_config import get_logger

logger = get_logger("launchers.ubisoft")

LAUNCHER_KEY = "SOFTWARE\\Ubisoft\\Launcher"
LAUNCHER_KEY_WOW64 = "SOFTWARE\\WOW6432Node\\Ubisoft\\Launcher"
INSTALLS_KEY = "SOFTWARE\\ubisoft\\Launcher\\Installs"

INSTALL_PATH_PROBES = (
    (LAUNCHER_KEY, "InstallDir", RegistryView.MACHINE_64),
    (LAUNCHER_KEY, "InstallDir", RegistryView.MACHINE_32),
    (LAUNCHER_KEY, "InstallDir", RegistryView.CURRENT_USER),
    (LAUNCHER_KEY_WOW64, "InstallDir", RegistryView.CURRENT_USER),
)

# Ubisoft mostly writes its installs through the 32-bit view, but not always.
# Earlier views win when an id shows up more than once.
INSTALLS_VIEWS = (
    RegistryView.MACHINE_32,
    RegistryView.MACHINE_64,
    RegistryView.CURRENT_USER,
)

# The launcher's own helpers that sit next to game binaries
HELPER_EXECUTABLES = ("upc", "uplay")

re_games_folder = re.compile(r"game_installation_path:[ \t]*(.+?)[ \t]*(?:\r?\n|$)")

KNOWN_GAME_NAMES = MappingProxyType(
    {
        "635": "Tom Clancy's Rainbow Six Siege",
        "720": "Far Cry 5",
        "1842": "Assassin's Creed Valhalla",
        "5855": "Assassin's Creed Mirage",
        "4923": "Far Cry 6",
        "3539": "Assassin's Creed Odyssey",
        "5266": "Watch Dogs: Legion",
        "410": "Far Cry 4",
        "568": "Far Cry Primal",
        "2738": "The Division 2",
        "2739": "The Crew 2",
        "4312": "Ghost Recon Breakpoint",
        "1843": "Immortals Fenyx Rising",
        "5436": "Riders Republic",
        "5265": "Hyper Scape",
        "3787": "Anno 1800",
    }
)

# Keys are lowercase folder names
KNOWN_FOLDER_IDS = MappingProxyType(
    {
        "roller champions": "11899",
        "xdefiant": "925",
        "tom clancy's rainbow six siege": "635",
        "rainbow six siege": "635",
        "far cry 5": "720",
        "far cry 6": "4923",
        "far cry 4": "410",
        "far cry primal": "568",
        "assassin's creed valhalla": "1842",
        "assassin's creed mirage": "5855",
        "assassin's creed odyssey": "3539",
        "watch dogs legion": "5266",
        "the division 2": "2738",
        "the crew 2": "2739",
        "ghost recon breakpoint": "4312",
        "immortals fenyx rising": "1843",
        "riders republic": "5436",
        "anno 1800": "3787",
        "hyper scape": "5265",
    }
)


class UbisoftConnectLauncher(launcher.Launcher):
    """Support for Ubisoft Connect (formerly Uplay).

    Games come from two places. The registry's Installs key is authoritative
    and carries real game ids. The launcher's games folder (declared in its
    settings.yaml) is scanned as well, to catch installs the registry forgot;
    those only fill gaps and never replace a registry entry.
    """

    launcher_type = defs.LauncherType.UBISOFT_CONNECT

    def __init__(
        self,
        reader=None,
        default_paths: Optional[list[str]] = None,
        settings_path: Optional[str] = None,
        default_games_folder: Optional[str] = None,
    ):
        super().__init__(reader)
        self.default_paths = default_paths
        self.settings_path = settings_path
        self.default_games_folder = default_games_folder

    def get_display_name(self) -> str:
        return "Ubisoft Connect"

    def get_install_path(self) -> Optional[str]:
        default_paths = self.default_paths
        if default_paths is None:
            default_paths = [
                os.path.join(paths.program_files_x86(), "Ubisoft", "Ubisoft Game Launcher"),
                os.path.join(paths.program_files(), "Ubisoft", "Ubisoft Game Launcher"),
                os.path.join(paths.program_files_x86(), "Ubisoft Game Launcher"),
            ]
        return self._first_existing_path(INSTALL_PATH_PROBES, default_paths)

    def detect_games(self) -> defs.DetectionResult:
        install_path = self.get_install_path()
        if not install_path:
            logger.info("Ubisoft Connect does not appear to be installed")
            return self._not_installed()

        result = defs.DetectionResult(is_installed=True, install_path=install_path)

        for game in self._collect_registry_games():
            launcher.add_unique(result.games, game)

        # Registry entries must all be in before folder guesses are merged
        folder_games = self._collect_folder_games()
        added = launcher.merge_candidates(result.games, folder_games)
        logger.debug("Games folder added %d of %d candidates", added, len(folder_games))

        logger.info("Collected %d games from Ubisoft Connect", len(result.games))
        return result

    def _collect_registry_games(self) -> list[defs.DetectedGame]:
        games = []
        for view in INSTALLS_VIEWS:
            try:
                game_ids = self.reader.registry_subkey_names(INSTALLS_KEY, view)
                for game_id in game_ids:
                    try:
                        game = self._parse_registry_game(game_id, view)
                    except Exception as e:
                        logger.debug("Skipping registry install %s: %s", game_id, e)
                        continue
                    launcher.add_unique(games, game)
            except Exception as e:
                logger.debug("Skipping registry view %s: %s", view.value, e)
        return games

    def _parse_registry_game(self, game_id: str, view: RegistryView) -> Optional[defs.DetectedGame]:
        install_dir = self.reader.read_registry_value(f"{INSTALLS_KEY}\\{game_id}", "InstallDir", view)
        if not install_dir:
            return None

        install_dir = util.normalize_install_path(install_dir)
        if not util.is_valid_install(install_dir):
            logger.debug("- Skipping %s since %s is not a valid install", game_id, install_dir)
            return None

        name = self._game_name(install_dir, game_id)
        if not name or util.is_skippable(name):
            logger.debug("- Skipping %s ('%s') since it isn't a game", game_id, name)
            return None

        return self.make_game(
            name,
            game_id,
            install_dir,
            util.find_main_executable(install_dir, HELPER_EXECUTABLES),
            defs.URI_UBISOFT.format(game_id=game_id),
        )

    def _game_name(self, install_dir: str, game_id: str) -> str:
        folder_name = os.path.basename(install_dir)
        if folder_name and not util.is_generic_folder_name(folder_name):
            return folder_name
        # Fall back to the folder name even if it is generic
        return KNOWN_GAME_NAMES.get(game_id, folder_name)

    def _collect_folder_games(self) -> list[defs.DetectedGame]:
        games_folder = self._games_folder()
        if not games_folder:
            return []

        games = []
        for game_dir in self.reader.list_directories(games_folder):
            try:
                game = self._parse_folder_game(game_dir)
            except Exception as e:
                logger.debug("Skipping folder %s: %s", game_dir, e)
                continue
            if game is not None:
                games.append(game)
        return games

    def _parse_folder_game(self, game_dir: str) -> Optional[defs.DetectedGame]:
        folder_name = os.path.basename(game_dir)
        if not folder_name or not util.is_valid_install(game_dir):
            return None

        exe = util.find_main_executable(game_dir, HELPER_EXECUTABLES)
        if not exe:
            return None

        if util.is_skippable(folder_name):
            logger.debug("- Skipping folder '%s' since it isn't a game", folder_name)
            return None

        game_id = KNOWN_FOLDER_IDS.get(folder_name.lower())
        launch_command = defs.URI_UBISOFT.format(game_id=game_id) if game_id else exe
        return self.make_game(folder_name, game_id or folder_name, game_dir, exe, launch_command)

    def _games_folder(self) -> Optional[str]:
        """Games folder from settings.yaml, else the default one, else None"""
        settings_path = self.settings_path
        if settings_path is None:
            settings_path = os.path.join(paths.local_app_data("Ubisoft Game Launcher"), "settings.yaml")

        content = self.reader.read_text(settings_path)
        if content:
            match = re_games_folder.search(content)
            if match:
                folder = util.normalize_install_path(match.group(1).strip().strip("'\""))
                if os.path.isdir(folder):
                    return folder
                logger.debug("Games folder %s from settings does not exist", folder)

        default_folder = self.default_games_folder
        if default_folder is None:
            default_folder = os.path.join(
                paths.program_files_x86(), "Ubisoft", "Ubisoft Game Launcher", "games"
            )
        if os.path.isdir(default_folder):
            return default_folder
        return None
