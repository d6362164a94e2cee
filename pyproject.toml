[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "growbot"
version = "1.0.0"
description = "Grow box controller logic: sensors with rolling averages, rule sets, action chains, remote sockets and a JSON log"
requires-python = ">=3.10"
dependencies = []
keywords = ["growbox", "home automation", "sensors", "rules engine", "433mhz", "garden"]
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
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["growbot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
