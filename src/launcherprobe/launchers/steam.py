# LICENSE: AGPLv3. See LICENSE at root of repo

import os
from typing import Optional

import vdf

import launcherprobe.defs as defs
import launcherprobe.launchers.launcher as launcher
import launcherprobe.paths as paths
import launcherprobe.util as util
from launcherprobe.evidence import RegistryView
from launcherprobe.logging_config import get_logger

logger = get_logger("launchers.steam")

INSTALL_PATH_PROBES = (
    ("Software\\Valve\\Steam", "SteamPath", RegistryView.CURRENT_USER),
    ("SOFTWARE\\Valve\\Steam", "InstallPath", RegistryView.MACHINE_32),
    ("SOFTWARE\\Valve\\Steam", "InstallPath", RegistryView.MACHINE_64),
)

# DLC has no appmanifest of its own, only tools and runtimes need filtering
SKIP_PATTERNS = (
    "redistributable",
    "steamworks",
    "proton",
    "runtime",
    "dedicated server",
)


def _get_ci(mapping: dict, key: str):
    """Look up a vdf key ignoring case; Valve isn't consistent about it."""
    lower = key.lower()
    for k, v in mapping.items():
        if k.lower() == lower:
            return v
    return None


def _load_vdf(path: str) -> Optional[dict]:
    # Replace malformed characters, we only want names and paths out of these
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return vdf.load(f)


class SteamLauncher(launcher.Launcher):
    """Support for Steam.

    Games live in library folders listed by steamapps/libraryfolders.vdf, each
    described by a steamapps/appmanifest_<appid>.acf file.
    """

    launcher_type = defs.LauncherType.STEAM

    def __init__(self, reader=None, default_paths: Optional[list[str]] = None):
        super().__init__(reader)
        self.default_paths = default_paths

    def get_display_name(self) -> str:
        return "Steam"

    def get_install_path(self) -> Optional[str]:
        default_paths = self.default_paths
        if default_paths is None:
            default_paths = [os.path.join(paths.program_files_x86(), "Steam")]
        return self._first_existing_path(INSTALL_PATH_PROBES, default_paths)

    def detect_games(self) -> defs.DetectionResult:
        steam_path = self.get_install_path()
        if not steam_path:
            logger.info("Steam does not appear to be installed")
            return self._not_installed()

        result = defs.DetectionResult(is_installed=True, install_path=steam_path)
        for library in self.get_library_folders(steam_path):
            steamapps = os.path.join(library, "steamapps")
            logger.debug("Scanning Steam library %s", library)
            for manifest in self.reader.find_files(steamapps, "appmanifest_*.acf"):
                try:
                    game = self._parse_app_manifest(steamapps, manifest)
                except Exception as e:
                    logger.debug("Skipping app manifest %s: %s", manifest, e)
                    continue
                launcher.add_unique(result.games, game)

        logger.info("Collected %d games from Steam", len(result.games))
        return result

    def get_library_folders(self, steam_path: str) -> list[str]:
        """Steam's own folder first, then every extra library it knows about.

        get_library_folders(str) -> list(str)
        """
        libraries = [steam_path]
        seen = {util.path_key(steam_path)}

        config = os.path.join(steam_path, "steamapps", "libraryfolders.vdf")
        if not os.path.isfile(config):
            return libraries

        try:
            folders = _get_ci(_load_vdf(config), "libraryfolders") or {}
        except Exception as e:
            logger.debug("Cannot parse %s: %s", config, e)
            return libraries
        if not isinstance(folders, dict):
            logger.debug("Ignoring malformed library list in %s", config)
            return libraries

        for key, entry in folders.items():
            if not key.isdigit():
                # TimeNextStatsReport and friends in the old format
                continue
            # New format nests a dict with "path", old format is just the path
            path = _get_ci(entry, "path") if isinstance(entry, dict) else entry
            if not path:
                continue
            path = util.normalize_install_path(path)
            if util.path_key(path) in seen or not os.path.isdir(path):
                continue
            seen.add(util.path_key(path))
            libraries.append(path)
        return libraries

    def _parse_app_manifest(self, steamapps: str, manifest: str) -> Optional[defs.DetectedGame]:
        app_state = _get_ci(_load_vdf(manifest), "AppState")
        if not app_state:
            return None

        app_id = _get_ci(app_state, "appid")
        install_dir = _get_ci(app_state, "installdir")
        if not app_id or not install_dir:
            return None
        name = _get_ci(app_state, "name") or install_dir

        install_path = os.path.join(steamapps, "common", install_dir)
        if not util.is_valid_install(install_path):
            logger.debug("- Skipping %s since %s is not a valid install", app_id, install_path)
            return None

        if util.is_skippable(name, SKIP_PATTERNS):
            logger.debug("- Skipping %s ('%s') since it isn't a game", app_id, name)
            return None

        return self.make_game(
            name,
            str(app_id),
            install_path,
            util.find_main_executable(install_path),
            defs.URI_STEAM.format(game_id=app_id),
        )
