from __future__ import annotations

from pathlib import Path
import ntpath
import os
import sys
import tempfile
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import make_exe
from launcherprobe import util


class InstallValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.root = Path(temp_dir.name)

    def test_nested_executable_counts(self) -> None:
        make_exe(self.root / "Game" / "Binaries" / "Win64" / "Game.EXE")
        self.assertTrue(util.is_valid_install(str(self.root / "Game")))

    def test_empty_directory_is_not_an_install(self) -> None:
        (self.root / "Empty").mkdir()
        self.assertFalse(util.is_valid_install(str(self.root / "Empty")))

    def test_directory_without_executables_is_not_an_install(self) -> None:
        (self.root / "Leftovers" / "saves").mkdir(parents=True)
        (self.root / "Leftovers" / "saves" / "slot1.sav").write_bytes(b"save")
        (self.root / "Leftovers" / "readme.txt").write_text("bye", encoding="utf-8")
        self.assertFalse(util.is_valid_install(str(self.root / "Leftovers")))

    def test_missing_or_empty_path(self) -> None:
        self.assertFalse(util.is_valid_install(str(self.root / "nope")))
        self.assertFalse(util.is_valid_install(""))
        self.assertFalse(util.is_valid_install(None))

    def test_file_is_not_an_install(self) -> None:
        exe = make_exe(self.root / "Game.exe")
        self.assertFalse(util.is_valid_install(str(exe)))


class FindMainExecutableTests(unittest.TestCase):
    def setUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.root = Path(temp_dir.name)

    def test_picks_largest_non_utility_root_executable(self) -> None:
        make_exe(self.root / "Launcher.exe", 100)
        game = make_exe(self.root / "FarCry5.exe", 5000)
        make_exe(self.root / "CrashReporter.exe", 90000)
        make_exe(self.root / "unins000.exe", 80000)

        self.assertEqual(util.find_main_executable(str(self.root)), str(game))

    def test_denylist_is_case_insensitive(self) -> None:
        make_exe(self.root / "UPDATER.EXE", 9000)
        game = make_exe(self.root / "game.exe", 10)
        self.assertEqual(util.find_main_executable(str(self.root)), str(game))

    def test_only_uninstaller_is_returned_as_last_resort(self) -> None:
        unins = make_exe(self.root / "unins000.exe")
        self.assertEqual(util.find_main_executable(str(self.root)), str(unins))

    def test_uninstaller_loses_to_any_real_binary(self) -> None:
        make_exe(self.root / "unins000.exe", 10_000)
        game = make_exe(self.root / "Brawlhalla.exe", 1)
        self.assertEqual(util.find_main_executable(str(self.root)), str(game))

    def test_falls_through_to_binaries_subfolder(self) -> None:
        make_exe(self.root / "setup.exe")
        make_exe(self.root / "bin" / "UbisoftCrash.exe")
        game = make_exe(self.root / "x64" / "ACValhalla.exe")

        self.assertEqual(util.find_main_executable(str(self.root)), str(game))

    def test_falls_back_to_denylisted_root_executable(self) -> None:
        patcher = make_exe(self.root / "patcher.exe")
        make_exe(self.root / "Win64" / "uninstall.exe")
        self.assertEqual(util.find_main_executable(str(self.root)), str(patcher))

    def test_extra_denylist(self) -> None:
        make_exe(self.root / "upc.exe", 9000)
        game = make_exe(self.root / "RainbowSix.exe", 10)
        self.assertEqual(util.find_main_executable(str(self.root), ("upc",)), str(game))

    def test_no_executables(self) -> None:
        (self.root / "data.pak").write_bytes(b"pak")
        self.assertIsNone(util.find_main_executable(str(self.root)))
        self.assertIsNone(util.find_main_executable(str(self.root / "missing")))

    def test_never_returns_denylisted_when_alternative_exists(self) -> None:
        for name in ("unins000.exe", "vcredist_x64.exe", "DXSETUP.exe", "UplayInstaller.exe", "ReportTool.exe"):
            make_exe(self.root / name, 50_000)
        game = make_exe(self.root / "Anno1800.exe", 1)

        found = util.find_main_executable(str(self.root))
        self.assertEqual(found, str(game))


class TitleHelperTests(unittest.TestCase):
    def test_clean_title(self) -> None:
        self.assertEqual(util.clean_title("  Tom Clancy's Rainbow Six® Siege™ "), "Tom Clancy's Rainbow Six Siege")
        self.assertEqual(util.clean_title("™"), "")

    def test_skip_patterns(self) -> None:
        self.assertTrue(util.is_skippable("Far Cry 5 Soundtrack"))
        self.assertTrue(util.is_skippable("Anno 1800 - dlc 3"))
        self.assertTrue(util.is_skippable("The Division 2 SEASON PASS"))
        self.assertFalse(util.is_skippable("Far Cry 5"))

    def test_generic_folder_names(self) -> None:
        self.assertTrue(util.is_generic_folder_name("635"))
        self.assertTrue(util.is_generic_folder_name("Game"))
        self.assertTrue(util.is_generic_folder_name("GAMES"))
        self.assertFalse(util.is_generic_folder_name("Far Cry 5"))
        self.assertFalse(util.is_generic_folder_name("Anno 1800"))

    def test_normalize_install_path_drops_trailing_separators(self) -> None:
        path = os.path.join("games", "FarCry5") + os.sep
        self.assertEqual(util.normalize_install_path(path), os.path.join("games", "FarCry5"))
        self.assertEqual(util.path_key("Games/FarCry5/"), util.path_key("games/farcry5"))

    def test_normalize_install_path_keeps_drive_root(self) -> None:
        with mock.patch.object(util.os, "path", ntpath):
            self.assertEqual(util.normalize_install_path("D:/"), "D:\\")
            self.assertEqual(util.normalize_install_path("D:\\SteamLibrary\\"), "D:\\SteamLibrary")
        self.assertEqual(util.normalize_install_path(os.sep), os.sep)


if __name__ == "__main__":
    unittest.main()
