[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fleuryindex"
version = "0.1.0"
description = "Token-based code index, a Metadesk lexer, a C/C++ token indexer, text snippet slots and 2D plot layout for editor tooling"
requires-python = ">=3.10"
dependencies = []
keywords = ["code index", "lexer", "tokens", "editor", "metadesk", "plot"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors :: Integrated Development Environments (IDE)",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fleuryindex"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
