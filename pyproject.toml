[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lagsim"
version = "0.1.0"
description = "Interactive simulation of client-side prediction, server reconciliation and entity interpolation over a laggy network"
requires-python = ">=3.10"
dependencies = ["pygame"]
keywords = ["netcode", "prediction", "reconciliation", "interpolation", "latency", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lagsim = "lagsim.app:main"

[tool.hatch.build.targets.wheel]
packages = ["lagsim"]

[tool.pytest.ini_options]
addopts = "-ra"
