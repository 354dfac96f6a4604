[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sentinelfs"
version = "1.0.0"
description = "Building blocks for peer-to-peer folder sync: metadata store, LRU caches, work queue, delta engine, compression, file locking, conflict resolution, directory watching and option parsing"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sync",
    "file-sharing",
    "peer-to-peer",
    "delta",
    "rsync",
    "conflict-resolution",
    "sqlite",
    "lru-cache",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: File Sharing",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sentinelfs-ml-demo = "sentinelfs.ml_demo:main"

[tool.hatch.build.targets.wheel]
packages = ["sentinelfs"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
