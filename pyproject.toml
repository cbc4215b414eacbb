[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ballast"
version = "0.1.2"
description = "Snapshot load testing for local HTTP APIs"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["load-testing", "performance", "snapshot", "http", "api", "benchmark"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing :: Traffic Generation",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[project.scripts]
ballast = "ballast.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ballast"]

[tool.pytest.ini_options]
addopts = "-ra"
