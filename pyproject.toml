[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bomberman"
version = "0.1.0"
description = "A small grid-based Bomberman arcade game with bombs, destructible bricks, wandering enemies and a hidden exit door."
requires-python = ">=3.10"
keywords = ["game", "arcade", "bomberman", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
bomberman = "bomberman.app:main"

[tool.hatch.build.targets.wheel]
packages = ["bomberman"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
