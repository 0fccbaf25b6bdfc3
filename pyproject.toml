[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vtstate"
version = "0.1.0"
description = "VT220/xterm-style terminal state: escape-sequence parser, control functions and framebuffer"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "terminal",
    "vt100",
    "vt220",
    "xterm",
    "ansi",
    "escape-sequences",
    "framebuffer",
    "parser",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Terminal Emulators/X Terminals",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vtstate"]

[tool.hatch.build.targets.sdist]
include = [
    "vtstate",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
