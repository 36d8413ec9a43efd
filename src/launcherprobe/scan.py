# LICENSE: AGPLv3. See LICENSE at root of repo

"""Run every registered detector at once.

Detectors share nothing, so they are fanned out over a thread pool and joined.
Persisting or diffing the results is up to the caller.
"""

import concurrent.futures
from typing import Callable, Optional, TypeVar

from launcherprobe.defs import DetectionResult, LauncherType
from launcherprobe.evidence import EvidenceReader
from launcherprobe.launchers import Launcher
from launcherprobe.logging_config import get_logger
from launcherprobe.registry import get_detector, supported_launchers

logger = get_logger("scan")

T = TypeVar("T")


def _run_all(
    task: Callable[[Launcher], T],
    fallback: Callable[[Exception], T],
    reader: Optional[EvidenceReader],
    max_workers: Optional[int],
) -> dict[LauncherType, T]:
    launcher_types = supported_launchers()
    results = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_type = {
            executor.submit(task, get_detector(launcher_type, reader)): launcher_type
            for launcher_type in launcher_types
        }
        for future in concurrent.futures.as_completed(future_to_type):
            launcher_type = future_to_type[future]
            try:
                results[launcher_type] = future.result()
            except Exception as e:
                logger.error("Detection for %s failed: %s", launcher_type.value, e)
                results[launcher_type] = fallback(e)

    # Report in registry order, not completion order
    return {launcher_type: results[launcher_type] for launcher_type in launcher_types}


def detect_installed_launchers(
    reader: Optional[EvidenceReader] = None, max_workers: Optional[int] = None
) -> dict[LauncherType, Optional[str]]:
    """Install path of every supported launcher, None for the ones not installed.

    detect_installed_launchers(EvidenceReader, int) -> dict(LauncherType, str or None)
    """
    def install_path(detector: Launcher) -> Optional[str]:
        return detector.get_install_path() if detector.is_installed() else None

    installed = _run_all(install_path, lambda e: None, reader, max_workers)
    logger.info(
        "%d launchers detected out of %d",
        sum(1 for path in installed.values() if path),
        len(installed),
    )
    return installed


def detect_all_games(
    reader: Optional[EvidenceReader] = None, max_workers: Optional[int] = None
) -> dict[LauncherType, DetectionResult]:
    """detect_games() for every supported launcher.

    detect_all_games(EvidenceReader, int) -> dict(LauncherType, DetectionResult)
    """
    results = _run_all(
        lambda detector: detector.detect_games(),
        lambda e: DetectionResult.not_installed(str(e)),
        reader,
        max_workers,
    )
    logger.info("Collected %d games in total", sum(len(r.games) for r in results.values()))
    return results
