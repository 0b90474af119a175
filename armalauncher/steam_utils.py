"""Locating a Steam installation, its libraries, workshop and compatibility tools."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .errors import (
    DirectoryNotFoundError,
    LauncherError,
    SteamInstallNotFoundError,
    SteamWorkshopDirectoryNotFoundError,
)
from .vdf import VDF

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PATHS = (
    "$HOME/.steam/steam",
    "$HOME/.local/share/Steam",
    "$HOME/.var/app/com.valvesoftware.Steam/.steam/steam",
    "$HOME/.var/app/com.valvesoftware.Steam/.local/share/Steam",
    "$HOME/Library/Application Support/Steam",
)

_CONFIG_PATH = Path("config/config.vdf")
_LIBRARY_FOLDERS_PATH = Path("config/libraryfolders.vdf")
_SYSTEM_TOOLS_DIR = Path("/usr/share/steam/compatibilitytools.d")
_COMMAND_LINE_KEY = "manifest/commandline"
_TRIM_CHARS = " \t\n\v\f\r"


def _read_vdf(path: Path) -> VDF:
    vdf = VDF()
    vdf.load_from_text(path.read_text(encoding="utf-8", errors="replace"))
    return vdf


def _install_dir_from_manifest(install_path: Path, manifest: VDF) -> Path:
    try:
        install_dir = manifest.key_values["AppState/installdir"]
    except KeyError:
        raise LauncherError("app manifest has no AppState/installdir entry") from None
    return install_path / "steamapps/common" / install_dir


def _directory_listing(directory: Path) -> list[str]:
    try:
        return sorted(os.listdir(directory))
    except OSError:
        return []


class SteamUtils:
    """A Steam installation, found as the first search path holding config/config.vdf."""

    def __init__(self, search_paths: Iterable[str | os.PathLike[str]] = DEFAULT_SEARCH_PATHS) -> None:
        home = os.environ.get("HOME", "")
        for search_path in search_paths:
            candidate = Path(os.fspath(search_path).replace("$HOME", home))
            if (candidate / _CONFIG_PATH).exists():
                self._steam_path = Path(os.path.realpath(candidate))
                break
        else:
            raise SteamInstallNotFoundError()
        logger.info("Steam path: %s", self._steam_path)

    @property
    def steam_path(self) -> Path:
        """The resolved Steam installation directory."""
        return self._steam_path

    def install_paths(self) -> list[Path]:
        """Return the Steam library directories, always including the Steam directory."""
        library_folders = _read_vdf(self._steam_path / _LIBRARY_FOLDERS_PATH)
        paths = [Path(value) for value in library_folders.values_with_filter("path")]
        for path in paths:
            logger.info("Install path: %s", path)
        if not paths or paths[0] != self._steam_path:
            paths.append(self._steam_path)
        return paths

    def game_path_from_install_path(self, install_path: str | os.PathLike[str], appid: str) -> Path:
        """Read the app manifest in a library and return the game's directory."""
        install_path = Path(install_path)
        manifest_file = install_path / "steamapps" / f"appmanifest_{appid}.acf"
        try:
            return _install_dir_from_manifest(install_path, _read_vdf(manifest_file))
        except (OSError, LauncherError) as error:
            logger.warning("cannot read game path from '%s': %s", manifest_file, error)
            raise

    def workshop_path(self, install_path: str | os.PathLike[str], appid: str) -> Path:
        """Return the workshop content directory of an app in a library."""
        proposed = Path(install_path) / "steamapps/workshop/content" / str(appid)
        if proposed.exists():
            return proposed
        raise SteamWorkshopDirectoryNotFoundError(appid)

    def compatibility_tool_for_app_id(self, app_id: int) -> tuple[Path, str]:
        """Return the compatibility tool executable and its arguments configured for an app."""
        config = _read_vdf(self._steam_path / _CONFIG_PATH)
        key_filter = f"CompatToolMapping/{app_id}/name"
        logger.debug("filtering by '%s'", key_filter)
        values = config.values_with_filter(key_filter)
        for value in values:
            logger.debug("found: %s", value)
        if not values:
            raise LauncherError("compatibility tool entry not found")

        tool_dir = self._compatibility_tool_path(values[0])
        manifest_path = tool_dir / "toolmanifest.vdf"
        manifest = _read_vdf(manifest_path)
        command_line = manifest.key_values.get(_COMMAND_LINE_KEY)
        if command_line is None:
            raise LauncherError(f"cannot read '{_COMMAND_LINE_KEY}' from '{manifest_path}'")

        separator = command_line.find(" ")
        if separator == -1:
            raise LauncherError(f"malformed '{_COMMAND_LINE_KEY}' in '{manifest_path}'")
        tool_args = command_line[separator:].strip(_TRIM_CHARS)
        tool_path = command_line[:separator].strip(_TRIM_CHARS)
        return Path(str(tool_dir) + tool_path), tool_args

    def install_path_from_game_path(self, game_path: str | os.PathLike[str]) -> Path:
        """Return the Steam library holding a game directory (steamapps/common/<game>)."""
        return Path(os.path.realpath(Path(game_path) / "../../.."))

    def is_flatpak(self) -> bool:
        """Tell whether this Steam installation is the Flatpak one."""
        return "com.valvesoftware.Steam" in self._steam_path.parts

    def _compatibility_tool_path(self, shortname: str) -> Path:
        try:
            return self._user_compatibility_tool(shortname)
        except DirectoryNotFoundError:
            logger.debug("failed to find user compatibility tool '%s'", shortname)
        return self._builtin_compatibility_tool(shortname)

    def _user_compatibility_tool(self, shortname: str) -> Path:
        steam_tool = self._steam_path / "compatibilitytools.d" / shortname
        if steam_tool.exists():
            return steam_tool
        system_tool = _SYSTEM_TOOLS_DIR / shortname
        if system_tool.exists():
            return system_tool
        raise DirectoryNotFoundError(steam_tool)

    def _builtin_compatibility_tool(self, shortname: str) -> Path:
        for install_path in self.install_paths():
            steamapps = install_path / "steamapps"
            for entry in _directory_listing(steamapps):
                if not entry.startswith("appmanifest_"):
                    continue
                try:
                    manifest = _read_vdf(steamapps / entry)
                    name = manifest.key_values.get("AppState/name")
                    if name is None:
                        raise LauncherError(f"'{entry}' has no AppState/name entry")
                    manifest_shortname = name.replace(".", "").replace(" ", "_").lower()
                    if manifest_shortname.startswith(shortname):
                        return _install_dir_from_manifest(install_path, manifest)
                except (OSError, LauncherError) as error:
                    logger.debug("skipping '%s': %s", steamapps / entry, error)
        raise LauncherError(f"cannot find tool named '{shortname}'. Is it installed in Steam?")