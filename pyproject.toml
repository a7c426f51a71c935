[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quantumc"
version = "0.1.0"
description = "Tokenizer and parser front end for a small C dialect with quantum extensions"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "tokenizer", "parser", "c", "quantum"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tokenizer = "quantumc.tokenizer:main"
tokenparser = "quantumc.parser:main"
quantumc = "quantumc.compiler:main"

[tool.hatch.build.targets.wheel]
packages = ["quantumc"]

[tool.pytest.ini_options]
addopts = "-ra"
