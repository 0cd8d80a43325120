[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snowcore"
version = "0.1.0"
description = "Core building blocks for services: dependency container, providers, cache and queue drivers, JSON logging, process control and HTTP helpers"
requires-python = ">=3.10"
keywords = ["framework", "container", "dependency-injection", "cache", "queue", "redis", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]
dependencies = [
    "redis",
    "requests",
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["snowcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
