import xml.etree.ElementTree as ET
from pathlib import Path

from armalauncher.html_preset_export import export_mods
from armalauncher.mod import Mod


def make_mod(base: Path, name: str, cpp: str) -> Mod:
    mod_dir = base / name
    (mod_dir / "addons").mkdir(parents=True)
    (mod_dir / "mod.cpp").write_text(cpp)
    return Mod(mod_dir)


def parse(preset: str) -> ET.Element:
    return ET.fromstring(preset.encode("utf-8"))


def mod_rows(root: ET.Element) -> list[ET.Element]:
    return root.findall("./body/div[@class='mod-list']/table/tr")


def test_single_steam_mod(tmp_path):
    workshop = tmp_path / "workshop_path"
    mod = make_mod(workshop, "1234", 'name = "1234 mod";')
    preset = export_mods("test preset", [mod], workshop)

    assert preset.startswith('<?xml version="1.0" encoding="utf-8"?>\n<html>\n')
    assert preset.endswith("  </body>\n</html>\n")

    root = parse(preset)
    metas = {meta.get("name"): meta.get("content") for meta in root.findall("./head/meta")}
    assert metas == {
        "arma:Type": "preset",
        "arma:PresetName": "test preset",
        "generator": "Arma 3 Launcher",
    }
    assert root.find("./head/title").text == "A3UL preset - test preset"
    assert root.find("./body/h1/strong").text == "test preset"

    rows = mod_rows(root)
    assert len(rows) == 1
    assert rows[0].get("data-type") == "ModContainer"
    cells = rows[0].findall("td")
    assert cells[0].text == "1234 mod"
    assert cells[1].find("span").get("class") == "from-steam"
    assert cells[1].find("span").text == "Steam"
    link = cells[2].find("a")
    url = "http://steamcommunity.com/sharedfiles/filedetails/?id=1234"
    assert link.get("href") == url
    assert link.get("data-type") == "Link"
    assert link.text == url

    assert (
        '      <table>\n        <tr data-type="ModContainer">\n'
        '          <td data-type="DisplayName">1234 mod</td>\n'
    ) in preset
    assert "        </tr>\n      </table>\n    </div>\n" in preset


def test_style_block(tmp_path):
    preset = export_mods("p", [], tmp_path)
    style = parse(preset).find("./head/style").text
    assert style.startswith("\nbody {\n        background: rgb(25, 81, 147);\n")
    assert "a:hover {\n    color:#F1AF41;\n    text-decoration: none;\n}\n" in style
    assert style.endswith(".from-local {\n    color: gray;\n}\n")
    assert "}\n</style>\n  </head>\n" in preset


def test_local_mod_uses_url_key(tmp_path):
    workshop = tmp_path / "workshop_path"
    mod = make_mod(tmp_path / "home", "@local", 'name="Local Mod"; url="https://example.com/mod";')
    preset = export_mods("p", [mod], workshop)
    assert '<span class="from-local">Local</span>' in preset
    assert 'data-meta="local:Local Mod|@local|https://example.com/mod"' in preset
    assert '<a href="https://example.com/mod">https://example.com/mod</a>' in preset
    assert "from-steam\">Steam" not in preset

    cells = mod_rows(parse(preset))[0].findall("td")
    assert cells[0].text == "Local Mod"
    wrapper = cells[2].find("span")
    assert wrapper.get("class") == "whups"
    assert wrapper.find("a").get("href") == "https://example.com/mod"


def test_local_mod_without_link_points_to_its_directory(tmp_path):
    mod = make_mod(tmp_path / "home", "@plain", 'name="Plain";')
    preset = export_mods("p", [mod], tmp_path / "workshop_path")
    assert f'<a href="{mod.path.as_uri()}">' in preset


def test_mods_keep_their_order(tmp_path):
    workshop = tmp_path / "workshop_path"
    first = make_mod(workshop, "1", 'name="First";')
    second = make_mod(tmp_path / "home", "@second", 'name="Second";')
    preset = export_mods("p", [first, second], workshop)
    assert preset.index(">First</td>") < preset.index(">Second</td>")
    assert "        </tr>\n      </table>" in preset
    names = [row.find("td").text for row in mod_rows(parse(preset))]
    assert names == ["First", "Second"]


def test_empty_mod_list(tmp_path):
    preset = export_mods("empty", [], tmp_path)
    assert "      <table>\n\n      </table>" in preset
    assert "<title>A3UL preset - empty</title>" in preset
    assert mod_rows(parse(preset)) == []