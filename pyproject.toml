[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "discimage"
version = "0.9.2"
description = "Read CD/DVD disc images (ISO, ZSO, Nero, CDRWIN, Global Image, IML) and inspect PlayStation 2 discs"
requires-python = ">=3.10"
dependencies = []
keywords = ["iso", "disc image", "cue", "bin", "nero", "iml", "playstation 2", "iso9660"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["discimage"]

[tool.pytest.ini_options]
addopts = "-ra"
