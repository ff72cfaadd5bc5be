[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gsstats"
version = "0.1.0"
description = "Power-state residency readers for sysfs statistics nodes, plus ramdump and touch calibration helpers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "power",
    "residency",
    "dvfs",
    "sysfs",
    "monitoring",
    "ramdump",
    "touch",
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

[project.scripts]
gsstats-ramdump = "gsstats.ramdump:main"
gsstats-gti-ical = "gsstats.gti_ical:main"

[tool.hatch.build.targets.wheel]
packages = ["gsstats"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
