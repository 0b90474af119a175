[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "armalauncher"
version = "0.1.0"
description = "Library for finding Arma 3 installations and mods, writing the game's mod list and building launch commands on Unix systems"
requires-python = ">=3.10"
dependencies = []
keywords = ["arma3", "steam", "vdf", "mods", "launcher", "proton"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["armalauncher"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
