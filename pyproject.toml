[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "barbellutil"
version = "0.1.0"
description = "Utility toolkit: lazy iterator pipelines, circular queues, variants, CSV record conversion and structured log files."
requires-python = ">=3.10"
dependencies = []
keywords = ["iterators", "csv", "logging", "queue", "utilities", "threads"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["barbellutil"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
