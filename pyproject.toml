[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "icache"
version = "0.1.0"
description = "A small in-memory key-value server with lists, JSON documents, pub/sub and transactions, plus a line-based client."
requires-python = ">=3.10"
dependencies = []
keywords = ["cache", "key-value", "in-memory", "server", "pubsub", "database"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = [
    "pytest",
    "freezegun",
]

[project.scripts]
icache-server = "icache.server:main"
icache-cli = "icache.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["icache"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
