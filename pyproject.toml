[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rootrace"
version = "0.1.0"
description = "Find a root of a one-variable expression by racing Newton-Raphson, bisection and secant solvers"
requires-python = ">=3.10"
dependencies = []
keywords = ["root finding", "newton-raphson", "bisection", "secant", "postfix", "shunting-yard"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rootrace = "rootrace.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["rootrace"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
