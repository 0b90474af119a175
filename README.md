# armalauncher

A Python library for managing Arma 3 on Linux and macOS. It can:

- find the Steam installation, its library folders, workshop directories
  and the compatibility tool (such as Proton) assigned to a game
  (`armalauncher.steam_utils.SteamUtils`);
- read Valve's key/value files such as `libraryfolders.vdf` and
  `appmanifest_*.acf` (`armalauncher.vdf.VDF`);
- discover mods in the game directory and in the workshop, and read the
  metadata in their `*.cpp` files (`armalauncher.mod.Mod`,
  `Client.home_mods`, `Client.workshop_mods`);
- write the `ModLauncherList` class into `Arma3.cfg` without touching the
  rest of the file (`Client.create_arma_cfg`,
  `armalauncher.cppfilter.remove_class`);
- export a list of mods as an HTML preset that the game's launcher can
  import (`armalauncher.html_preset_export.export_mods`);
- build the shell command that starts the game, either directly or through
  Steam, natively or under Proton (`Client.launch_command`).

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Usage

### Reading VDF files

```python
from armalauncher.vdf import VDF

vdf = VDF()
vdf.load_from_text('"Branch" { "Key" "Value" }')
print(vdf.key_values["Branch/Key"])        # Value
print(vdf.values_with_filter("Key"))       # ['Value']
```

Nested keys are joined with `/`. `values_with_filter` returns the values of
every key that contains the given text, in key order. Passing
`append=True` to `load_from_text` keeps the entries already loaded.
Malformed text, such as unbalanced braces, raises
`armalauncher.errors.ConfigSyntaxError`.

### Removing a class from a config file

```python
from armalauncher.cppfilter import remove_class

cleaned = remove_class(config_text, "class ModLauncherList")
```

Every block introduced by the given text is removed, along with the `;`
that closes it. Strings and escaped quotes inside the block are respected.

### Locating Steam and the game

```python
from armalauncher.steam_utils import SteamUtils

steam = SteamUtils()                       # searches the usual locations under $HOME
for library in steam.install_paths():
    print(library)

game = steam.game_path_from_install_path(steam.steam_path, "107410")
workshop = steam.workshop_path(steam.steam_path, "107410")
tool, tool_args = steam.compatibility_tool_for_app_id(107410)
```

`SteamUtils` takes the first search path that holds `config/config.vdf`;
other search paths may be passed in, with `$HOME` replaced by the home
directory. If none matches, `SteamInstallNotFoundError` is raised. If the
workshop directory is missing, `SteamWorkshopDirectoryNotFoundError` is
raised. `is_flatpak()` tells whether Steam is the Flatpak installation.

### Working with mods and the game config

```python
from armalauncher.arma3client import Client

client = Client(game, workshop)
mods = client.workshop_mods() + client.home_mods()
for mod in mods:
    print(mod.name, mod.path, mod.key_values)

client.create_arma_cfg([mod.path for mod in mods])
```

`Client` raises `MissingFileError` when the game directory holds no game
executable. `Mod` raises `DirectoryNotFoundError` when the directory has no
`addons` subdirectory. `create_arma_cfg` writes to `client.cfg_path()`
unless another path is given, creating the file and its directory when
needed; that path depends on whether the game runs natively, under Proton
or from a Flatpak Steam.

### Exporting a preset

```python
from armalauncher.html_preset_export import export_mods

html = export_mods("my preset", mods, workshop)
```

Workshop mods are linked to their workshop page; local mods to the `url`
or `action` value of their metadata, or else to their directory.

### Building the launch command

```python
command, working_directory = client.launch_command(
    "-world=empty", "", launch_directly=False, disable_esync=False
)
```

`launch_command` returns the shell command and the directory to run it in
(`None` when it may run anywhere). A failed direct launch under Proton
raises `LauncherError`.

## What it does not do

The library does not start any processes: running the command from
`launch_command` is left to the caller. It has no command-line program or
graphical interface, and it does not store any settings of its own.

## Errors

Every error the library raises derives from
`armalauncher.errors.LauncherError`.