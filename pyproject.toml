[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pactools"
version = "0.1.0"
description = "Pack, patch and unpack DW_PACK (.pac) archives with per-block Huffman compression"
requires-python = ">=3.10"
dependencies = []
keywords = ["pac", "archive", "huffman", "compression", "game-modding"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pac-pack = "pactools.cli:pack_main"
pac-patch = "pactools.cli:patch_main"
pac-unpack = "pactools.cli:unpack_main"

[tool.hatch.build.targets.wheel]
packages = ["pactools"]

[tool.pytest.ini_options]
addopts = "-ra"
