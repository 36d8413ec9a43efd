"""launcherprobe - find installed game launchers and the games they manage.

Package Structure:
    defs: LauncherType, DetectedGame and DetectionResult
    evidence: Registry and filesystem reads that never raise
    util: Install validation, main executable guessing, title helpers
    launchers: One detector per supported launcher
    registry: Maps a LauncherType to its detector
    scan: Runs every detector concurrently

Quick Start::

    from launcherprobe import LauncherType, get_detector

    result = get_detector(LauncherType.UBISOFT_CONNECT).detect_games()
    for game in result.games:
        print(game.name, game.launch_command)
"""

import logging

from launcherprobe.defs import DetectedGame, DetectionResult, LauncherType
from launcherprobe.evidence import EvidenceReader, RegistryView
from launcherprobe.registry import get_detector, supported_launchers
from launcherprobe.scan import detect_all_games, detect_installed_launchers

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DetectedGame",
    "DetectionResult",
    "EvidenceReader",
    "LauncherType",
    "RegistryView",
    "detect_all_games",
    "detect_installed_launchers",
    "get_detector",
    "supported_launchers",
]
