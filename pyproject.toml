[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "keptnkit"
version = "0.1.0"
description = "Helpers for building Keptn services: CloudEvents, task event payloads, an HTTP event sender, shipyard and remediation specs, and datastore access"
requires-python = ">=3.10"
keywords = ["keptn", "cloudevents", "shipyard", "remediation", "devops"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]
dependencies = [
    "requests>=2.25",
    "pyyaml>=5.4",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[tool.hatch.build.targets.wheel]
packages = ["keptnkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
