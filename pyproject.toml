[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hbasekit"
version = "0.1.0"
description = "HBase client building blocks: region caches, a snappy cell-block codec and protobuf filter encoding"
requires-python = ">=3.10"
dependencies = [
    "sortedcontainers",
]
keywords = ["hbase", "filters", "snappy", "protobuf", "region-cache"]
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
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hbasekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
