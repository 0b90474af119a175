"""Removal of class blocks from Arma's C++-like configuration text."""

from __future__ import annotations

from collections.abc import Iterator

from .errors import ConfigSyntaxError


def _occurrences(text: str, class_name: str) -> Iterator[int]:
    pos = text.find(class_name)
    while pos != -1:
        yield pos
        pos = text.find(class_name, pos + len(class_name))


def _block_end(text: str, start: int) -> int:
    """Return the index just past the closing bracket of the block opened after start."""
    bracket_pos = text.find("{", start)
    if bracket_pos == -1:
        raise ConfigSyntaxError("Cannot find opening bracket")

    depth = 1
    escape = False
    in_string = False
    for pos, c in enumerate(text[bracket_pos + 1 :], bracket_pos + 1):
        if escape:
            escape = False
        elif in_string and c == "\\":
            escape = True
        elif c == '"':
            in_string = not in_string
        elif not in_string:
            if c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    return pos + 1
    raise ConfigSyntaxError("Unclosed bracket")


def _statement_end(text: str, pos: int) -> int:
    """Find where the statement closing a class block ends, starting at pos."""
    semicolon_found = False
    newline_found = False
    char_found = False
    for index, c in enumerate(text[pos:], pos):
        if c == ";":
            semicolon_found = True
        elif c == "\n":
            newline_found = True
        elif c.isascii() and c.isalnum():
            char_found = True

        if semicolon_found and newline_found:
            return index + 1
        if semicolon_found and char_found:
            return index
    raise ConfigSyntaxError("Missing semicolon after class")


def remove_class(text: str, class_name: str) -> str:
    """Return text with every block introduced by class_name removed."""
    if not class_name:
        raise ValueError("class name must not be empty")

    result = text
    for start in reversed(list(_occurrences(text, class_name))):
        end = _statement_end(text, _block_end(text, start))
        if end > len(result):
            raise ConfigSyntaxError("Class ends past the end of text")
        result = result[:start] + result[end:]
    return result