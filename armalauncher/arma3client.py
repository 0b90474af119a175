"""The Arma 3 game client: its files, mods, configuration and launch command."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .cppfilter import remove_class
from .errors import LauncherError, MissingFileError
from .mod import Mod
from .steam_utils import SteamUtils

logger = logging.getLogger(__name__)

APP_ID = "107410"

EXCLUSIONS = frozenset(
    {
        "Addons", "AoW", "Argo", "BattlEye", "Contact", "Curator", "Dll", "Dta", "Enoch",
        "Expansion", "fontconfig", "GM", "CSLA", "Heli", "Jets", "Kart", "Keys", "Launcher",
        "MPMissions", "Mark", "Missions", "Orange", "Tacops", "Tank", "vn", "WS", "legal",
        "steam_shader_cache",
    }
)

FLATPAK_PREFIX = ".var/app/com.valvesoftware.Steam"
GAME_CONFIG_PATH = "GameDocuments/Arma 3/Arma3.cfg"
PROTON_CONFIG_RELATIVE_PATH = (
    "../../compatdata/107410/pfx/drive_c/users/steamuser/My Documents/Arma 3/Arma3.cfg"
)
PROTON_EXECUTABLE = "arma3_x64.exe"

_MOD_LIST_CLASS = "class ModLauncherList"

_MOD_TEMPLATE = """\
    class Mod{index}
    {{
        dir="{dir}";
        name="{name}";
        origin="GAME DIR";
        fullPath="{full_path}";
    }};
"""

_LIBRARY_DIRS = (
    "/lib",
    "/lib32",
    "/lib64",
    "/usr/lib",
    "/usr/lib32",
    "/usr/lib64",
    "/lib/x86_64-linux-gnu",
    "/usr/lib/x86_64-linux-gnu",
    "/lib/i386-linux-gnu",
    "/usr/lib/i386-linux-gnu",
    "/usr/local/lib",
)


@dataclass(frozen=True)
class _Layout:
    executable_names: tuple[str, ...]
    local_share_prefix: str
    bohemia_interactive_prefix: str


_LINUX = _Layout(("arma3.x86_64", PROTON_EXECUTABLE), ".local/share", "bohemiainteractive/arma3")
_MACOS = _Layout(("ArmA3.app",), "Library/Application Support", "com.vpltd.Arma3")


def _listing(directory: Path) -> list[str]:
    try:
        return sorted(os.listdir(directory))
    except OSError:
        return []


def _to_windows_path(path: str, drive_letter: str) -> str:
    windows = path.replace("/", "\\")
    if path.startswith("/"):
        return f"{drive_letter}:{windows}"
    return windows


def _library_available(name: str) -> bool:
    search_dirs = [d for d in os.environ.get("LD_LIBRARY_PATH", "").split(":") if d]
    search_dirs.extend(_LIBRARY_DIRS)
    return any(
        entry.startswith(name) for directory in search_dirs for entry in _listing(Path(directory))
    )


def _esync_prefix(disable_esync: bool) -> str:
    return "PROTON_NO_ESYNC=1" if disable_esync else ""


def _optional_steam_runtime(steam_path: Path) -> str:
    if _library_available("libpng12.so"):
        return ""
    runtime = steam_path / "ubuntu12_32/steam-runtime/run.sh"
    if runtime.exists():
        return str(runtime)
    logger.critical(
        "Did not find %s and libpng12.so is missing. Thermal optics will be broken!", runtime
    )
    return ""


class Client:
    """An Arma 3 installation together with the workshop directory it uses."""

    def __init__(
        self, arma_path: str | os.PathLike[str], target_workshop_path: str | os.PathLike[str]
    ) -> None:
        self._macos = sys.platform == "darwin"
        self._layout = _MACOS if self._macos else _LINUX
        self.path = Path(arma_path)
        self.workshop_path = Path(target_workshop_path)
        for executable in self._layout.executable_names:
            candidate = self.path / executable
            if candidate.exists():
                self.executable_path = candidate
                break
        else:
            raise MissingFileError("arma3.exe")

    def is_proton(self) -> bool:
        """Tell whether the game is the Windows build run through Proton."""
        return self.executable_path.name == PROTON_EXECUTABLE

    def is_flatpak(self) -> bool:
        """Tell whether Steam is the Flatpak installation."""
        if self._macos:
            return False
        try:
            return SteamUtils().is_flatpak()
        except (OSError, LauncherError) as error:
            logger.warning("Exception trying to determine if Flatpak, exception text: %s", error)
            return False

    def cfg_path(self) -> Path:
        """Return the path of the game's Arma3.cfg."""
        if self.is_proton():
            return self.path / PROTON_CONFIG_RELATIVE_PATH
        home = Path(os.environ.get("HOME", ""))
        if self.is_flatpak():
            home = home / FLATPAK_PREFIX
        return (
            home
            / self._layout.local_share_prefix
            / self._layout.bohemia_interactive_prefix
            / GAME_CONFIG_PATH
        )

    def home_mods(self) -> list[Mod]:
        """Return the mods found in the game directory."""
        return self._mods_from_directory(self.path)

    def workshop_mods(self) -> list[Mod]:
        """Return the mods found in the workshop directory."""
        return self._mods_from_directory(self.workshop_path)

    def create_arma_cfg(
        self,
        mod_paths: Iterable[str | os.PathLike[str]],
        cfg_path: str | os.PathLike[str] | None = None,
    ) -> None:
        """Write the mod list into the game config, keeping its other entries."""
        path = Path(cfg_path) if cfg_path else self.cfg_path()
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        existing = path.read_text(encoding="utf-8", errors="replace")

        parts = [remove_class(existing, _MOD_LIST_CLASS), f"{_MOD_LIST_CLASS}\n{{\n"]
        parts.extend(
            self._mod_entry(mod_path, index) for index, mod_path in enumerate(mod_paths, 1)
        )
        parts.append("};\n")
        config = "".join(parts)

        logger.debug("Writing config to '%s':\n%s", path, config)
        path.write_text(config, encoding="utf-8")

    def launch_command(
        self,
        arguments: str,
        user_environment_variables: str = "",
        launch_directly: bool = False,
        disable_esync: bool = False,
    ) -> tuple[str, Path | None]:
        """Return the shell command that starts the game and the directory to run it in."""
        if self._macos:
            if launch_directly:
                return self._macos_direct(arguments, user_environment_variables)
            url_arguments = arguments.replace(" ", "%20")
            return (
                f"env {user_environment_variables} open steam://run/{APP_ID}//{url_arguments}",
                None,
            )
        if launch_directly:
            return self._direct(arguments, user_environment_variables, disable_esync)
        if self.is_flatpak():
            return self._flatpak(arguments, user_environment_variables, disable_esync), None
        if self.is_proton():
            esync = _esync_prefix(disable_esync)
            command = (
                f"env {esync} {user_environment_variables} "
                f"steam -applaunch {APP_ID} -nolauncher {arguments}"
            )
        else:
            command = f"env {user_environment_variables} steam -applaunch {APP_ID} {arguments}"
        return command, None

    def _direct(
        self, arguments: str, user_environment_variables: str, disable_esync: bool
    ) -> tuple[str, Path]:
        if not self.is_proton():
            command = f'env {user_environment_variables} "{self.executable_path}" {arguments}'
            return command, self.path
        try:
            steam = SteamUtils()
            tool_path, tool_args = steam.compatibility_tool_for_app_id(int(APP_ID))
            ld_preload = f"{steam.steam_path}/ubuntu12_64/gameoverlayrenderer.so"
            old_ld_preload = os.environ.get("LD_PRELOAD")
            if old_ld_preload:
                ld_preload = f"{ld_preload}:{old_ld_preload}"
            compat_data = (
                steam.install_path_from_game_path(self.path) / "steamapps/compatdata" / APP_ID
            )
            environment = (
                f"{_esync_prefix(disable_esync)} SteamGameId={APP_ID} "
                f'LD_PRELOAD={ld_preload} STEAM_COMPAT_DATA_PATH="{compat_data}"'
            )
            verb = tool_args.replace("%verb%", "run")
            runtime = _optional_steam_runtime(steam.steam_path)
        except (OSError, LauncherError) as error:
            logger.critical("Direct launch failed, exception: %s", error)
            raise LauncherError(f"Direct launch failed: {error}") from error
        command = (
            f"env {environment} {user_environment_variables} {runtime} "
            f'"{tool_path}" {verb} "{self.executable_path}" {arguments}'
        )
        logger.info("Running Arma:\n%s\n", command)
        return command, self.path

    @staticmethod
    def _flatpak(arguments: str, user_environment_variables: str, disable_esync: bool) -> str:
        environment = f"{_esync_prefix(disable_esync)} {user_environment_variables}".strip(
            " \t\n\v\f\r"
        )
        parameter = f'--env"{environment}"' if environment else ""
        return (
            f"flatpak run {parameter} com.valvesoftware.Steam "
            f"-applaunch {APP_ID} -nolauncher {arguments}"
        )

    def _macos_direct(self, arguments: str, user_environment_variables: str) -> tuple[str, Path]:
        try:
            steam = SteamUtils()
        except (OSError, LauncherError) as error:
            logger.critical("Direct launch failed, exception: %s", error)
            raise LauncherError(f"Direct launch failed: {error}") from error
        preload = (
            f"{steam.steam_path}/Steam.AppBundle/Steam/Contents/MacOS/gameoverlayrenderer.dylib"
        )
        old_preload = os.environ.get("DYLD_INSERT_LIBRARIES")
        if old_preload:
            preload = f"{preload}:{old_preload}"
        command = (
            f'env DYLD_INSERT_LIBRARIES="{preload}" {user_environment_variables} '
            f'"{self.executable_path}/Contents/MacOS/ArmA3" {arguments}'
        )
        logger.info("Running Arma:\n%s", command)
        return command, self.path

    def _fake_drive_letter(self) -> str:
        return "Z" if self.is_proton() else "C"

    def _mod_entry(self, mod_path: str | os.PathLike[str], index: int) -> str:
        mod = Mod(mod_path)
        absolute = str(mod.path).strip('"')
        full_path = _to_windows_path(absolute, self._fake_drive_letter())
        directory = Path(absolute).name.strip('"')
        name = mod.get_value(directory, "name", "dir", "tooltip", default="name_read_failed")
        return _MOD_TEMPLATE.format(
            index=index, dir=directory, name=name.replace('"', "_"), full_path=full_path
        )

    @staticmethod
    def _mods_from_directory(directory: Path) -> list[Mod]:
        mods = []
        for entry in _listing(directory):
            if entry in EXCLUSIONS:
                continue
            mod_dir = directory / entry
            if not mod_dir.is_dir():
                continue
            if "addons" not in (name.lower() for name in _listing(mod_dir)):
                continue
            mods.append(Mod(mod_dir))
        mods.sort(key=lambda mod: mod.get_value("name", "dir", default=str(mod.path).lower()))
        return mods