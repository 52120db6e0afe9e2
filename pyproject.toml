[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jardinplan"
version = "0.1.0"
description = "Gantt-style planning of garden tasks and crops, backed by SQLite"
requires-python = ">=3.10"
dependencies = []
keywords = ["garden", "planning", "gantt", "scheduling", "crops", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Natural Language :: French",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jardinplan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
