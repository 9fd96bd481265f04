[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nvgrid"
version = "0.6.0"
description = "Core of a graphical Neovim front end: redraw event parsing, grid window state and batched draw commands"
requires-python = ">=3.10"
dependencies = []
keywords = ["neovim", "nvim", "gui", "redraw", "grid", "editor", "ui"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["nvgrid"]

[tool.hatch.build.targets.sdist]
include = ["nvgrid", "tests", "README.md"]

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
