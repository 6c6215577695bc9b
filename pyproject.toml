[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "edgebus"
version = "3.0.0"
description = "Message bus building blocks: message envelopes, bus configuration, option builders and a Redis Pub/Sub transport"
requires-python = ">=3.10"
dependencies = [
    "redis",
]
keywords = ["messaging", "pubsub", "redis", "message-bus", "envelope", "iot"]
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
    "Topic :: System :: Distributed Computing",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["edgebus"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
