[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "procfs"
version = "0.1.0"
description = "Read system and kernel metrics from the Linux proc and sys pseudo-filesystems."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "procfs",
    "sysfs",
    "linux",
    "metrics",
    "monitoring",
    "cpuinfo",
    "arp",
    "ipvs",
    "bcache",
    "btrfs",
    "diskstats",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["procfs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
