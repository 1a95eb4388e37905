[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hogehoge"
version = "0.1.0"
description = "Music library core with a plugin system, track tagging, background tasks and a small widget layout engine"
requires-python = ">=3.10"
keywords = ["music", "library", "plugins", "audio", "tags", "msgpack"]
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
    "Topic :: Multimedia :: Sound/Audio",
]
dependencies = [
    "msgpack",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
hogehoge-build-plugins = "hogehoge.builder:main"

[tool.hatch.build.targets.wheel]
packages = ["hogehoge"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
