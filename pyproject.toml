[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "awaken"
version = "0.1.0"
description = "Meeting alarm that rings for upcoming calendar events unless you have checked in recently"
requires-python = ">=3.11"
keywords = ["alarm", "calendar", "ical", "meetings", "reminder", "check-in"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
]
dependencies = [
    "requests",
    "pygame",
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
awaken = "awaken.app:main"

[tool.hatch.build.targets.wheel]
packages = ["awaken"]

[tool.pytest.ini_options]
addopts = "-ra"
