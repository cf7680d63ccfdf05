[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rttbench"
version = "0.1.0"
description = "Round-trip-time benchmarks for matrix multiplication over TCP, UDP, JSON RPC and MQTT, plus a one-lane bridge concurrency simulation"
requires-python = ">=3.10"
keywords = ["benchmark", "rtt", "latency", "tcp", "udp", "rpc", "mqtt", "concurrency"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
    "Topic :: System :: Networking",
]
dependencies = [
    "paho-mqtt",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
rttbench = "rttbench.cli:main"
rttbench-bridge = "rttbench.bridge:main"

[tool.hatch.build.targets.wheel]
packages = ["rttbench"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
