[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "garminsync"
version = "1.0.6"
description = "Building blocks for syncing Garmin Connect data into a local SQLite database"
requires-python = ">=3.10"
dependencies = [
    "platformdirs",
    "rich",
]
keywords = [
    "garmin",
    "garmin-connect",
    "fitness",
    "activities",
    "health",
    "sync",
    "sqlite",
    "task-queue",
    "rate-limiting",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Database",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["garminsync"]

[tool.hatch.build.targets.sdist]
include = [
    "garminsync",
    "tests",
]

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
