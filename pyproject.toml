[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "letalg"
version = "0.1.0"
description = "A small let/lambda language lowered to a let-algebra IR with closure conversion and local lifting"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "ir", "ssa", "closure-conversion", "lambda", "let"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
letalg = "letalg.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["letalg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
