import abc
import os
from typing import Iterable, Optional

from launcherprobe.defs import DetectedGame, DetectionResult, LauncherType
from launcherprobe.evidence import EvidenceReader, RegistryView
import launcherprobe.util as util


# (key path, value name, view)
RegistryProbe = tuple[str, str, RegistryView]


class Launcher(abc.ABC):
    """Base class for all of the launchers we detect

    To add a launcher, create a subclass and register it in launcherprobe.registry.

    Every public method is total: it reads the machine, never changes it, and
    never raises. Note that your __init__ methods should specify defaults for
    all arguments
    """

    launcher_type: LauncherType

    def __init__(self, reader: Optional[EvidenceReader] = None):
        self.reader = reader if reader is not None else EvidenceReader()

    @abc.abstractmethod
    def get_display_name(self) -> str:
        """Return the pretty display name for this launcher"""
        return ""

    @abc.abstractmethod
    def get_install_path(self) -> Optional[str]:
        """Return where the launcher itself is installed, if anywhere"""
        return None

    @abc.abstractmethod
    def detect_games(self) -> DetectionResult:
        """Collect and return all of the games for this launcher"""
        return DetectionResult()

    def is_installed(self) -> bool:
        """Return if this launcher appears to be installed or not"""
        path = self.get_install_path()
        return bool(path) and os.path.isdir(path)

    def _not_installed(self) -> DetectionResult:
        return DetectionResult.not_installed(f"{self.get_display_name()} installation not found")

    def _first_existing_path(
        self, probes: Iterable[RegistryProbe], default_paths: Iterable[str] = ()
    ) -> Optional[str]:
        """Walk registry probes, then default paths, in order. First directory that exists wins.

        _first_existing_path(list((str, str, RegistryView)), list(str)) -> str or None
        """
        for key_path, value_name, view in probes:
            path = self.reader.read_registry_value(key_path, value_name, view)
            if path:
                path = util.normalize_install_path(path)
                if os.path.isdir(path):
                    return path

        for path in default_paths:
            if path and os.path.isdir(path):
                return path

        return None

    @staticmethod
    def make_game(
        name: str,
        external_id: str,
        install_path: str,
        executable_path: Optional[str] = None,
        launch_command: Optional[str] = None,
    ) -> Optional[DetectedGame]:
        """Build a DetectedGame, or None if nothing is left of the name after cleaning"""
        name = util.clean_title(name or "")
        if not name:
            return None
        return DetectedGame(name, external_id, install_path, executable_path, launch_command)


def add_unique(games: list[DetectedGame], game: Optional[DetectedGame]) -> bool:
    """Append game unless one with the same external id is already there. First one wins.

    add_unique(list(DetectedGame), DetectedGame) -> bool
    """
    if game is None or any(g.external_id == game.external_id for g in games):
        return False
    games.append(game)
    return True


def merge_candidates(games: list[DetectedGame], candidates: Iterable[DetectedGame]) -> int:
    """Append guessed candidates that don't duplicate a confirmed entry.

    A candidate is a duplicate when any existing game has the same name or the
    same install path, both compared case-insensitively. Either match is enough.
    A candidate reusing an existing external id is dropped as well.
    games must already hold every confirmed entry. Returns how many were added.
    """
    ids = {g.external_id for g in games}
    names = {g.name.casefold() for g in games}
    paths = {util.path_key(g.install_path) for g in games}
    added = 0
    for candidate in candidates:
        name = candidate.name.casefold()
        path = util.path_key(candidate.install_path)
        if name in names or path in paths or candidate.external_id in ids:
            continue
        games.append(candidate)
        ids.add(candidate.external_id)
        names.add(name)
        paths.add(path)
        added += 1
    return added
