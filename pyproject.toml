[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rpimocap"
version = "0.1.0"
description = "Marker-based motion capture client: marker detection, camera simulation, MQTT messaging and service parsing"
requires-python = ">=3.10"
keywords = [
    "motion capture",
    "mocap",
    "computer vision",
    "marker detection",
    "mqtt",
    "msgpack",
    "raspberry pi",
    "camera simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = [
    "numpy",
    "msgpack",
    "paho-mqtt",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["rpimocap"]

[tool.hatch.build.targets.sdist]
include = [
    "rpimocap",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
