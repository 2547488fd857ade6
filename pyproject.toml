[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "studyset"
version = "0.1.0"
description = "A sudoku solution counter, an in-memory student record store with hash table and AVL tree back ends, and a multilayer perceptron for letter recognition"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "sudoku",
    "backtracking",
    "hash-table",
    "avl-tree",
    "key-value-store",
    "perceptron",
    "neural-network",
    "cross-validation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: Games/Entertainment :: Puzzle Games",
    "Topic :: Database",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
studyset-sudoku = "studyset.sudoku:main"
studyset-storage = "studyset.storage.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["studyset"]

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
