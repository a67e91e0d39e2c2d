[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scratchrig"
version = "0.1.0"
description = "Core engine pieces for a scratch sampler: settings and MIDI/IO mappings, track import, playlists, pitch filtering and input queues"
requires-python = ">=3.10"
dependencies = []
keywords = ["dj", "scratch", "sampler", "midi", "turntable", "audio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["scratchrig"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
