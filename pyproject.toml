[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gridcalc"
version = "0.1.0"
description = "A small integer spreadsheet engine with formulas, ranges and dependency tracking"
requires-python = ">=3.10"
dependencies = []
keywords = ["spreadsheet", "formula", "dependency-graph", "cells"]
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
    "Topic :: Office/Business :: Financial :: Spreadsheet",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gridcalc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
