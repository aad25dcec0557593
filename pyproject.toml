[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "x86enc"
version = "0.1.0"
description = "A small x86-64 instruction encoder built on operand schemata"
requires-python = ">=3.10"
dependencies = []
keywords = ["x86", "x86-64", "assembler", "encoder", "machine code", "modrm"]
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
    "Topic :: Software Development :: Assemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
x86enc = "x86enc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["x86enc"]

[tool.pytest.ini_options]
addopts = "-ra"
