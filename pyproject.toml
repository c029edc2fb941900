[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slackmcp"
version = "1.0.0"
description = "Slack channel listing and conversation history as CSV, for use as assistant tools"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["slack", "mcp", "chat", "csv", "llm"]
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
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = [
    "pytest",
    "respx",
]

[tool.hatch.build.targets.wheel]
packages = ["slackmcp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
