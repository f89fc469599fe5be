[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trophysim"
version = "0.1.0"
description = "Simulator for an LED trophy that listens for WLED realtime UDP packets and tracks the colour of every LED"
requires-python = ">=3.10"
keywords = ["wled", "led", "udp", "realtime", "simulator", "trophy", "warls", "drgb", "dnrgb"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
dependencies = [
    "websocket-client",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
trophysim = "trophysim.simulator:main"
trophysim-mock-sender = "trophysim.mock_sender:main"

[tool.hatch.build.targets.wheel]
packages = ["trophysim"]

[tool.pytest.ini_options]
addopts = "-ra"
