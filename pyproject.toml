[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "graphmine"
version = "0.1.0"
description = "CSR graph storage, sorted-set intersection, pattern descriptions and graph transforms in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "graph",
    "csr",
    "set-intersection",
    "graph-mining",
    "k-core",
    "edge-partitioning",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["graphmine"]

[tool.hatch.build.targets.sdist]
include = ["graphmine", "tests", "pyproject.toml"]

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
