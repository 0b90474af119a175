import random

import pytest

from armalauncher.errors import ConfigSyntaxError
from armalauncher.vdf import VDF

VDF_VALID = """
"VDFTests"
{
    "Branch1"
    {
        "SubBranch1"
        {
            "Application1"
            {
                "SomeKey"        "5"
                "SomeKeyWithValues"
                {
                    "KeyValue"        "text"
                    "KeyValueInt"        "155"
                }
            }
        }
        "SubBranch2"
        {
            "KeyValue" "8"
        }
    }
    "Branch2"
    {
        "SubBranch2"
        {
            "Directories"
            {
                "BaseInstallFolder_1"        "/mnt/games/SteamLibrary"
                "BaseInstallFolder_2"        "/home/user/SteamLibrary"
                "BaseInstallFolder_3"        "/run/media/user/SteamLibrary"
                "BaseInstallFolder_4"        "/somerandompath/steamlibrary"
            }
        }
    }
}
"""

VDF_VALID_MIXED_SPACES_WITH_TABS = (
    "\n"
    '"VDFTests"\n'
    "{\n"
    '  "Branch1"\n'
    "\t{\n"
    '\t\t"SubBranch1"\n'
    "\t\t{\n"
    '\t\t "Application1"\n'
    "  \t\t  \t{\n"
    '\t\t\t\t"SomeKey" "5"\n'
    '\t\t\t\t"SomeKeyWithValues"\n'
    "\t\t\t\t{\n"
    '\t\t\t\t\t"KeyValue"\t"text"\n'
    '\t\t\t\t\t"KeyValueInt"        "155"\n'
    "\t\t\t\t}\n"
    "\t\t\t}\n"
    "\t\t}\n"
    '\t\t"SubBranch2"\n'
    "{\n"
    '  "KeyValue" "8"\n'
    "}\n"
    "\t}\n"
    '"Branch2"\n'
    "{\n"
    ' "SubBranch2"\n'
    "    {\n"
    '\t   "Directories"\n'
    "\t    \t{\n"
    '\t\t"BaseInstallFolder_1"\t\t"/mnt/games/SteamLibrary"\n'
    '\t\t\t"BaseInstallFolder_2"\t\t"/home/user/SteamLibrary"\n'
    '\t\t\t\t  \t"BaseInstallFolder_3"\t\t"/run/media/user/SteamLibrary"\n'
    '\t           \t\t\t"BaseInstallFolder_4"\t\t"/somerandompath/steamlibrary"\n'
    "\t\t\t}\n"
    "\t\t}\n"
    "\t}\n"
    "}\n"
)

VDF_INVALID_MISSING_BRACKETS = """
"VDFTests"
{
    "Branch1"
    {
        "SubBranch1"
            "Application1"
                "SomeKey"        "5"
                "SomeKeyWithValues"
                {
                    "KeyValue"        "text"
                    "KeyValueInt"        "155"
                }
            }
        }
        "SubBranch2"
            "KeyValue" "8"
    "Branch2"
    {
        "SubBranch2"
        {
            "Directories"
            {
                "BaseInstallFolder_1"        "/mnt/games/SteamLibrary"
                "BaseInstallFolder_2"        "/home/user/SteamLibrary"
                "BaseInstallFolder_3"        "/run/media/user/SteamLibrary"
                "BaseInstallFolder_4"        "/somerandompath/steamlibrary"
        }
"""

VDF_WITH_ESCAPED_QUOTES = r'''
"VDFTests"
{
    "Key\"123\"" "\"Value\""
}
'''


@pytest.fixture
def filled_vdf():
    vdf = VDF()
    for i in range(10):
        number = str(i + 1)
        vdf.key_values["Key" + number] = "Value" + number
    return vdf


def test_filter_with_non_existing_filter_is_empty(filled_vdf):
    assert filled_vdf.values_with_filter("This should be empty") == []


def test_filter_matching_all_keys(filled_vdf):
    assert len(filled_vdf.values_with_filter("Key")) == len(filled_vdf.key_values)


def test_filter_matching_two_keys(filled_vdf):
    assert sorted(filled_vdf.values_with_filter("Key1")) == ["Value1", "Value10"]


def test_simple_key_value():
    vdf = VDF()
    vdf.load_from_text('"Key""Value"')
    assert vdf.key_values == {"Key": "Value"}


def test_branch_key_value():
    vdf = VDF()
    vdf.load_from_text('"Branch"{"Key""Value"}')
    assert vdf.key_values == {"Branch/Key": "Value"}


def test_load_valid_and_mixed_whitespace_are_equal():
    vdf = VDF()
    vdf_with_tabs = VDF()
    vdf.load_from_text(VDF_VALID)
    vdf_with_tabs.load_from_text(VDF_VALID_MIXED_SPACES_WITH_TABS)
    assert vdf.key_values == vdf_with_tabs.key_values
    assert len(vdf.key_values) == 8
    assert vdf.key_values["VDFTests/Branch1/SubBranch2/KeyValue"] == "8"


def test_parser_then_filter():
    vdf = VDF()
    vdf.load_from_text(VDF_VALID)
    paths = [
        "/mnt/games/SteamLibrary",
        "/home/user/SteamLibrary",
        "/run/media/user/SteamLibrary",
        "/somerandompath/steamlibrary",
    ]
    assert sorted(vdf.values_with_filter("BaseInstallFolder")) == sorted(paths)


def test_missing_bracket_raises():
    with pytest.raises(ConfigSyntaxError):
        VDF().load_from_text(VDF_INVALID_MISSING_BRACKETS)


def test_unclosed_bracket_message():
    with pytest.raises(ConfigSyntaxError, match="Unclosed brackets in VDF"):
        VDF().load_from_text('"Branch"{"Key""Value"')


def test_unexpected_closing_bracket_raises():
    with pytest.raises(ConfigSyntaxError, match="Quote or bracket expected"):
        VDF().load_from_text('"Key""Value"}')


def test_escaped_quotes_in_key_and_value():
    vdf = VDF()
    vdf.load_from_text(VDF_WITH_ESCAPED_QUOTES)
    assert vdf.key_values == {'VDFTests/Key"123"': '"Value"'}


def test_load_replaces_unless_append():
    vdf = VDF()
    vdf.load_from_text('"A""1"')
    vdf.load_from_text('"B""2"')
    assert vdf.key_values == {"B": "2"}
    vdf.load_from_text('"C""3"', append=True)
    assert vdf.key_values == {"B": "2", "C": "3"}


def test_whitespace_inside_quotes_is_kept():
    vdf = VDF()
    vdf.load_from_text('"Some Key"   "some  value"')
    assert vdf.key_values == {"Some Key": "some  value"}


def test_random_input_only_raises_syntax_errors():
    rng = random.Random(1234)
    alphabet = '"{}\\ \tab\n'
    for _ in range(500):
        text = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 40)))
        vdf = VDF()
        try:
            vdf.load_from_text(text)
        except ConfigSyntaxError:
            pass
        assert len(vdf.key_values) * 4 <= text.count('"')