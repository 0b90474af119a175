"""Exceptions raised by the launcher library."""

from __future__ import annotations

import os


class LauncherError(Exception):
    """Base class for every error raised by the launcher."""


class _PathError(LauncherError):
    """An error about a single filesystem path."""

    _prefix = ""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        super().__init__(f"{self._prefix}{self.path}")


class DirectoryNoAccessError(_PathError):
    """A directory exists but cannot be accessed."""

    _prefix = "Cannot access directory"


class DirectoryNotFoundError(_PathError):
    """A required directory does not exist."""

    _prefix = "Directory not found: "


class FileNoAccessError(_PathError):
    """A file exists but cannot be accessed."""

    _prefix = "Cannot access file: "


class MissingFileError(_PathError):
    """A required file does not exist."""

    _prefix = "File not found: "


class NotADirectoryPathError(_PathError):
    """A path was expected to be a directory but is not."""

    _prefix = "Not a directory: "


class NotASymlinkError(_PathError):
    """A path was expected to be a symbolic link but is not."""

    _prefix = "Not a symlink: "


class SteamInstallNotFoundError(LauncherError):
    """No Steam installation could be located."""

    def __init__(self) -> None:
        super().__init__("Steam installation not found")


class SteamWorkshopDirectoryNotFoundError(LauncherError):
    """The Steam Workshop content directory for an app is missing."""

    def __init__(self, appid: str) -> None:
        self.appid = str(appid)
        super().__init__(f"Steam Workshop directory not found for appid: {self.appid}")


class ConfigSyntaxError(LauncherError):
    """A configuration text could not be parsed."""

    def __init__(self, error: str) -> None:
        self.detail = error
        super().__init__(f"Syntax error: {error}")