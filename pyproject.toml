[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scrubd"
version = "0.1.0"
description = "Read-only inventory of container runtimes and Linux host resources, for spotting leftover container artifacts"
requires-python = ">=3.10"
keywords = [
    "containers",
    "docker",
    "podman",
    "containerd",
    "cri",
    "cgroups",
    "network-namespaces",
    "overlay",
    "inventory",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "grpcio",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["scrubd"]

[tool.hatch.build.targets.sdist]
include = [
    "scrubd",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
