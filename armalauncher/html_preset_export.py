"""Export of mod lists as Arma 3 launcher HTML presets."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence

from .mod import Mod

_Line = tuple[int, str]

_WORKSHOP_ITEM_URL = "http://steamcommunity.com/sharedfiles/filedetails/?id="

# selector, property indentation, properties
_STYLE_RULES: tuple[tuple[str, int, tuple[str, ...]], ...] = (
    ("body", 8, ("background: rgb(25, 81, 147)", "color: white", "margin: 0px")),
    ("td", 4, ("padding: 3px 30px 3px 0",)),
    ("h1", 4, ("padding: 20px 20px 0 20px", "font-weight: 200", "font-size: 3em", "margin: 0")),
    ("em", 4, ("font-variant: italic", "color:silver")),
    (".before-list", 4, ("padding: 5px 20px 10px 20px",)),
    (".mod-list", 4, ("background: rgb(45, 48, 59)", "padding: 20px", "height: 100%")),
    (".dlc-list", 4, ("background: #222222", "padding: 20px")),
    (".footer", 4, ("padding-top: 20px", "color:gray")),
    (".whups", 4, ("color:gray",)),
    ("a", 4, ("color: #D18F21", "text-decoration: underline")),
    ("a:hover", 4, ("color:#F1AF41", "text-decoration: none")),
    (".from-steam", 4, ("color: #449EBD",)),
    (".from-local", 4, ("color: gray",)),
)


def _render(lines: Iterable[_Line]) -> str:
    return "".join(f"{'  ' * depth}{text}\n" for depth, text in lines)


def _stylesheet() -> list[_Line]:
    lines: list[_Line] = []
    for selector, indent, properties in _STYLE_RULES:
        lines.append((0, f"{selector} {{"))
        lines.extend((0, f"{' ' * indent}{prop};") for prop in properties)
        lines.append((0, "}"))
    lines.append((0, "</style>"))
    return lines


def _meta(name: str, content: str) -> str:
    return f'<meta name="{name}" content="{content}" />'


def _row(name: str, origin_class: str, origin_label: str, link_lines: Sequence[_Line]) -> str:
    return _render(
        [
            (4, '<tr data-type="ModContainer">'),
            (5, f'<td data-type="DisplayName">{name}</td>'),
            (5, "<td>"),
            (6, f'<span class="{origin_class}">{origin_label}</span>'),
            (5, "</td>"),
            (5, "<td>"),
            *link_lines,
            (5, "</td>"),
            (4, "</tr>"),
        ]
    )


def _mod_entry(mod: Mod, workshop_path: str | os.PathLike[str]) -> str:
    if mod.is_workshop_mod(workshop_path):
        url = _WORKSHOP_ITEM_URL + mod.path.name
        return _row(mod.name, "from-steam", "Steam", [(6, f'<a href="{url}" data-type="Link">{url}</a>')])
    link = mod.get_value("url", "action", default=mod.path.absolute().as_uri())
    meta = f"local:{mod.name}|{mod.path.name}|{link}"
    return _row(
        mod.name,
        "from-local",
        "Local",
        [
            (6, f'<span class="whups" data-type="Link" data-meta="{meta}">'),
            (7, f'<a href="{link}">{link}</a>'),
            (6, "</span>"),
        ],
    )


def export_mods(preset_name: str, mods: Iterable[Mod], workshop_path: str | os.PathLike[str]) -> str:
    """Render mods as an HTML preset that the Arma 3 launcher can import."""
    mod_list = "".join(_mod_entry(mod, workshop_path) for mod in mods).rstrip(" \t\n\v\f\r")
    lines: list[_Line] = [
        (0, '<?xml version="1.0" encoding="utf-8"?>'),
        (0, "<html>"),
        (1, "<!--Exported with Arma 3 Unix Launcher-->"),
        (1, "<head>"),
        (2, _meta("arma:Type", "preset")),
        (2, _meta("arma:PresetName", preset_name)),
        (2, _meta("generator", "Arma 3 Launcher")),
        (2, f"<title>A3UL preset - {preset_name}</title>"),
        (2, "<style>"),
        *_stylesheet(),
        (1, "</head>"),
        (1, "<body>"),
        (2, f"<h1>Arma 3 - Preset <strong>{preset_name}</strong></h1>"),
        (2, '<p class="before-list">'),
        (3, "<em>Drag this file or link to it to Arma 3 Launcher or open it Mods / Preset / Import.</em>"),
        (2, "</p>"),
        (2, '<div class="mod-list">'),
        (3, "<table>"),
        (0, mod_list),
        (3, "</table>"),
        (2, "</div>"),
        (2, '<div class="dlc-list">'),
        (3, "<table/>"),
        (2, "</div>"),
        (2, '<div class="footer">'),
        (3, "<span>Exported with Arma 3 Unix Launcher.</span>"),
        (2, "</div>"),
        (1, "</body>"),
        (0, "</html>"),
    ]
    return _render(lines)