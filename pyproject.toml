[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oslab"
version = "0.1.0"
description = "Operating-systems teaching toolkit: card-driven batch machines, deadlock avoidance and detection, CPU scheduling and classic synchronisation problems"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating systems",
    "education",
    "virtual machine",
    "paging",
    "bankers algorithm",
    "deadlock",
    "cpu scheduling",
    "producer consumer",
    "readers writers",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
oslab-phase1 = "oslab.phase1:main"
oslab-phase2 = "oslab.phase2:main"
oslab-deadlock = "oslab.deadlock:main"
oslab-schedule = "oslab.scheduling:main"
oslab-sync = "oslab.sync:main"

[tool.hatch.build.targets.wheel]
packages = ["oslab"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
