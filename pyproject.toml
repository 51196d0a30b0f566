[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tokenrelay"
version = "0.1.0"
description = "Rule-checked token and native-coin transfers with allowlists, fee limits and running statistics"
requires-python = ">=3.10"
dependencies = []
keywords = ["tokens", "transfers", "allowlist", "fees", "ledger"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tokenrelay"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
