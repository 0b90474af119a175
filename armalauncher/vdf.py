"""Parser for Valve's KeyValues (VDF) text format."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum, auto

from .errors import ConfigSyntaxError

_WHITESPACE = frozenset(" \t\n\v\f\r")


class _State(Enum):
    LOOKING_FOR_KEY = auto()
    LOOKING_FOR_VALUE = auto()
    READING_KEY = auto()
    READING_VALUE = auto()


def _remove_whitespace(text: str) -> str:
    """Drop whitespace that is not between quotes."""
    kept = []
    in_quotes = False
    for c in text:
        if c == '"':
            in_quotes = not in_quotes
        if in_quotes or c not in _WHITESPACE:
            kept.append(c)
    return "".join(kept)


def _parse(text: str) -> Iterator[tuple[str, str]]:
    """Yield (slash-joined key path, value) pairs from whitespace-free VDF text."""
    state = _State.LOOKING_FOR_KEY
    key = ""
    value = ""
    hierarchy: list[str] = []
    previous = ""

    for c in text:
        if state is _State.LOOKING_FOR_KEY:
            if c == '"':
                state = _State.READING_KEY
            elif c == "}" and hierarchy:
                hierarchy.pop()
            else:
                raise ConfigSyntaxError("VDF: Quote or bracket expected")
        elif state is _State.LOOKING_FOR_VALUE:
            if c == '"':
                state = _State.READING_VALUE
            elif c == "{":
                hierarchy.append(key)
                key = ""
                state = _State.LOOKING_FOR_KEY
            elif c == "}" and hierarchy:
                hierarchy.pop()
                key = ""
                state = _State.LOOKING_FOR_KEY
            else:
                raise ConfigSyntaxError("VDF: Quote or bracket expected")
        else:
            if c == "\\" and previous != "\\":
                pass
            elif c != '"' or previous == "\\":
                if state is _State.READING_KEY:
                    key += c
                else:
                    value += c
            elif state is _State.READING_KEY:
                state = _State.LOOKING_FOR_VALUE
            else:
                state = _State.LOOKING_FOR_KEY
                yield "/".join([*hierarchy, key]), value
                key = ""
                value = ""
        previous = c

    if hierarchy:
        raise ConfigSyntaxError("Unclosed brackets in VDF")


class VDF:
    """A flattened VDF document: nested keys are joined with '/'."""

    def __init__(self) -> None:
        self.key_values: dict[str, str] = {}

    def load_from_text(self, text: str, append: bool = False) -> None:
        """Parse text into key_values, replacing existing entries unless append is set."""
        if not append:
            self.key_values.clear()
        for key_path, value in _parse(_remove_whitespace(text)):
            self.key_values[key_path] = value

    def values_with_filter(self, filter_text: str) -> list[str]:
        """Return values whose key contains filter_text, ordered by key."""
        return [
            value
            for key, value in sorted(self.key_values.items())
            if filter_text in key
        ]