[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "orphy"
version = "0.1.0"
description = "Command-line client for viewing your mail, packages and tracking events from a mail service API"
requires-python = ">=3.11"
keywords = ["mail", "letters", "packages", "tracking", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Email",
]
dependencies = [
    "requests>=2.31",
    "platformdirs>=3.0",
    "tomli-w>=1.0",
    "tabulate>=0.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
orphy = "orphy.main:main"

[tool.hatch.build.targets.wheel]
packages = ["orphy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
