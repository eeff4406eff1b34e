[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tcpfight"
version = "0.1.0"
description = "Networked 2D fighting game client with sprite rendering and a framed TCP protocol"
requires-python = ">=3.10"
keywords = ["game", "fighting", "tcp", "client", "sprites", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tcpfight = "tcpfight.client:main"

[tool.hatch.build.targets.wheel]
packages = ["tcpfight"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
