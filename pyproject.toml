[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linekit"
version = "0.1.0"
description = "Building blocks for interactive line editors: configuration, history, completion, highlighting and hints"
requires-python = ">=3.10"
dependencies = []
keywords = ["readline", "line-editor", "history", "completion", "terminal", "repl"]
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
    "Topic :: Terminals",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["linekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
