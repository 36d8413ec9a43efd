from __future__ import annotations

from pathlib import Path
import sys
import tempfile
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import FakeRegistry, make_exe, same_path
from launcherprobe.evidence import EvidenceReader, RegistryView
from launcherprobe.launchers.steam import SteamLauncher


def write_app_manifest(steamapps: Path, app_id: str, name: str, install_dir: str) -> None:
    steamapps.mkdir(parents=True, exist_ok=True)
    (steamapps / f"appmanifest_{app_id}.acf").write_text(
        "\n".join(
            [
                '"AppState"',
                "{",
                f'\t"appid"\t\t"{app_id}"',
                f'\t"name"\t\t"{name}"',
                f'\t"installdir"\t\t"{install_dir}"',
                "}",
                "",
            ]
        ),
        encoding="utf-8",
    )


class SteamTests(unittest.TestCase):
    def setUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.root = Path(temp_dir.name)
        self.steam = self.root / "Steam"
        self.steamapps = self.steam / "steamapps"
        self.steamapps.mkdir(parents=True)
        self.registry = FakeRegistry()
        self.registry.add_key(RegistryView.CURRENT_USER, "Software\\Valve\\Steam", SteamPath=str(self.steam))

    def detector(self, **kwargs) -> SteamLauncher:
        kwargs.setdefault("default_paths", [])
        return SteamLauncher(EvidenceReader(self.registry), **kwargs)

    def write_library_folders(self, *libraries: Path) -> None:
        lines = ['"libraryfolders"', "{"]
        for index, library in enumerate((self.steam,) + libraries):
            lines += [f'\t"{index}"', "\t{", f'\t\t"path"\t\t"{library.as_posix()}"', "\t}"]
        lines.append("}")
        (self.steamapps / "libraryfolders.vdf").write_text("\n".join(lines) + "\n", encoding="utf-8")

    def test_collects_games_across_libraries(self) -> None:
        library = self.root / "SteamLibrary"
        write_app_manifest(self.steamapps, "620", "Portal 2", "Portal 2")
        make_exe(self.steamapps / "common" / "Portal 2" / "portal2.exe")
        write_app_manifest(library / "steamapps", "413150", "Stardew Valley", "Stardew Valley")
        make_exe(library / "steamapps" / "common" / "Stardew Valley" / "Stardew Valley.exe")
        self.write_library_folders(library)

        result = self.detector().detect_games()

        self.assertTrue(result.is_installed)
        self.assertTrue(same_path(result.install_path, self.steam))
        self.assertEqual([g.external_id for g in result.games], ["620", "413150"])
        self.assertEqual(result.games[0].launch_command, "steam://rungameid/620")
        self.assertEqual(result.games[1].name, "Stardew Valley")
        self.assertTrue(result.games[1].executable_path.endswith("Stardew Valley.exe"))

    def test_old_library_folders_format(self) -> None:
        library = self.root / "OldLibrary"
        (library / "steamapps").mkdir(parents=True)
        (self.steamapps / "libraryfolders.vdf").write_text(
            '"LibraryFolders"\n{\n\t"TimeNextStatsReport"\t\t"1600000000"\n'
            f'\t"1"\t\t"{library.as_posix()}"\n}}\n',
            encoding="utf-8",
        )

        libraries = self.detector().get_library_folders(str(self.steam))

        self.assertEqual(len(libraries), 2)
        self.assertTrue(same_path(libraries[1], library))

    def test_skips_tools_uninstalled_and_broken_manifests(self) -> None:
        write_app_manifest(self.steamapps, "228980", "Steamworks Common Redistributables", "Steamworks Shared")
        make_exe(self.steamapps / "common" / "Steamworks Shared" / "vcredist.exe")
        write_app_manifest(self.steamapps, "70", "Half-Life", "Half-Life")
        (self.steamapps / "appmanifest_440.acf").write_text('"AppState"\n{\n\t"appid" "440"\n', encoding="utf-8")
        write_app_manifest(self.steamapps, "105600", "Terraria", "Terraria")
        make_exe(self.steamapps / "common" / "Terraria" / "Terraria.exe")

        result = self.detector().detect_games()

        self.assertEqual([g.name for g in result.games], ["Terraria"])

    def test_broken_library_folders_still_scans_steam_folder(self) -> None:
        (self.steamapps / "libraryfolders.vdf").write_text('"libraryfolders"\n{\n', encoding="utf-8")
        write_app_manifest(self.steamapps, "105600", "Terraria", "Terraria")
        make_exe(self.steamapps / "common" / "Terraria" / "Terraria.exe")

        result = self.detector().detect_games()

        self.assertEqual([g.external_id for g in result.games], ["105600"])

    def test_library_list_that_is_not_a_block_is_ignored(self) -> None:
        (self.steamapps / "libraryfolders.vdf").write_text('"libraryfolders"\t"oops"\n', encoding="utf-8")
        write_app_manifest(self.steamapps, "105600", "Terraria", "Terraria")
        make_exe(self.steamapps / "common" / "Terraria" / "Terraria.exe")

        self.assertEqual(len(self.detector().get_library_folders(str(self.steam))), 1)
        result = self.detector().detect_games()

        self.assertTrue(result.is_installed)
        self.assertEqual([g.external_id for g in result.games], ["105600"])

    def test_games_named_like_dlc_are_kept(self) -> None:
        titles = {
            "397460": "The Jackbox Party Pack 3",
            "242680": "Jetpack Joyride",
            "1967430": "Backpack Hero",
        }
        for app_id, name in titles.items():
            write_app_manifest(self.steamapps, app_id, name, name)
            make_exe(self.steamapps / "common" / name / "game.exe")

        result = self.detector().detect_games()

        self.assertEqual(sorted(g.name for g in result.games), sorted(titles.values()))

    def test_not_installed(self) -> None:
        self.registry = FakeRegistry()
        result = self.detector().detect_games()

        self.assertFalse(result.is_installed)
        self.assertEqual(result.error_message, "Steam installation not found")

    def test_default_path(self) -> None:
        self.registry = FakeRegistry()
        self.assertEqual(self.detector(default_paths=[str(self.steam)]).get_install_path(), str(self.steam))


if __name__ == "__main__":
    unittest.main()
