[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lintropy"
version = "0.1.0"
description = "Editor-side helpers for a structural linter: position mapping, rule-file completion, semantic tokens, quickfixes and text reports."
requires-python = ">=3.10"
dependencies = []
keywords = ["linter", "lsp", "tree-sitter", "static-analysis", "yaml"]
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
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lintropy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
