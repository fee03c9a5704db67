[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tokenglow"
version = "0.1.0"
description = "Regex state-machine lexers that turn source text into typed tokens"
requires-python = ">=3.10"
dependencies = [
    "regex",
]
keywords = ["lexer", "tokenizer", "syntax", "highlighting", "regex"]
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
    "Topic :: Text Processing :: General",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tokenglow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
