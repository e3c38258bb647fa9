[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "unitdeck"
version = "0.1.0"
description = "A terminal user interface for managing systemd services"
requires-python = ">=3.10"
dependencies = []
keywords = ["systemd", "services", "tui", "curses", "journalctl", "busctl", "sysadmin"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
unitdeck = "unitdeck.app:main"

[tool.hatch.build.targets.wheel]
packages = ["unitdeck"]

[tool.hatch.build.targets.sdist]
include = ["unitdeck", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
