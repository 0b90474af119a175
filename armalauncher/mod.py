"""Arma 3 mod directories and their mod.cpp metadata."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from .errors import DirectoryNotFoundError

logger = logging.getLogger(__name__)

_WHITESPACE_OUTSIDE_QUOTES = re.compile(r'\s+(?=(?:[^"]*"[^"]*")*[^"]*\Z)', re.ASCII)
_TRIM_CHARS = " \t\n\v\f\r"


def _lowercase_listing(directory: Path) -> list[str]:
    try:
        return [name.lower() for name in os.listdir(directory)]
    except OSError:
        return []


def _remove_whitespace(text: str) -> str:
    """Drop whitespace that is not inside a quoted string."""
    return _WHITESPACE_OUTSIDE_QUOTES.sub("", _WHITESPACE_OUTSIDE_QUOTES.sub("", text))


class Mod:
    """A mod directory: it must hold an 'addons' directory, and its *.cpp files give metadata."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self.key_values: dict[str, str] = {}
        if "addons" not in _lowercase_listing(self.path):
            raise DirectoryNotFoundError(self.path / "addons")

        self.load_all_cpp()
        if self.key_values.get("publishedid", "0") == "0":
            self.key_values["publishedid"] = self.path.name

    @property
    def name(self) -> str:
        """The display name of the mod, falling back to its directory name."""
        return self.get_value("name", "dir", "tooltip", "publishedid", default=self.path.name)

    def load_all_cpp(self) -> None:
        """Merge the key-value pairs of every *.cpp file in the mod directory."""
        for entry in sorted(os.listdir(self.path)):
            if entry.endswith(".cpp"):
                text = (self.path / entry).read_text(encoding="utf-8", errors="replace")
                self.load_from_text(text, append=True)

    def load_from_text(self, text: str, append: bool = False) -> None:
        """Parse mod.cpp-style text, replacing existing entries unless append is set."""
        if not append:
            self.key_values.clear()
        self._parse(_remove_whitespace(text))

    def is_workshop_mod(self, workshop_path: str | os.PathLike[str]) -> bool:
        """Tell whether the mod lives under the given workshop directory."""
        return os.fspath(workshop_path) in str(self.path)

    def get_value(self, *keys: str, default: str) -> str:
        """Return the value of the first key present, or default when none is."""
        for key in keys:
            if key in self.key_values:
                return self.key_values[key]
        return default

    def _parse(self, text: str) -> None:
        for line in filter(None, text.split(";")):
            split_place = line.find("=")
            if split_place == -1:
                continue

            value_start = split_place + 1
            value_end = len(line)
            if value_start >= value_end:
                logger.warning("missing value while parsing mod '%s', line: '%s'", self.path, line)
                continue
            if line[value_start] == '"':
                value_start += 1
            if line[value_end - 1] == '"':
                value_end -= 1

            key = line[:split_place].strip(_TRIM_CHARS)
            self.key_values[key] = line[value_start:value_end].strip(_TRIM_CHARS)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mod):
            return NotImplemented
        return self.path == other.path and self.key_values == other.key_values

    def __str__(self) -> str:
        lines = [f"Path: {self.path}\n"]
        lines.extend(f"Key: {key} Value: {value}\n" for key, value in sorted(self.key_values.items()))
        return "".join(lines)

    def __repr__(self) -> str:
        return f"Mod({str(self.path)!r})"