[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsfiles"
version = "0.1.0"
description = "File listing building blocks: metadata, filtering, natural sorting, file kinds, Git status and extended attributes"
requires-python = ">=3.10"
dependencies = []
keywords = ["ls", "files", "directory", "listing", "git", "xattr", "natural-sort", "glob"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lsfiles"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
