[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "physim"
version = "0.1.0"
description = "A small 2D game engine with rigid-body physics, pygame sprite rendering and a fixed-step game loop"
requires-python = ">=3.10"
keywords = ["physics", "simulation", "rigid-body", "game-engine", "sprites", "pygame"]
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
    "Topic :: Games/Entertainment :: Simulation",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "pillow",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
physim = "physim.app:main"

[tool.hatch.build.targets.wheel]
packages = ["physim"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
