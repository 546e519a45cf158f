[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "turbinevm"
version = "0.1.0"
description = "Instruction encoding, constant pool, bytecode buffer and instruction emitter for a register-based virtual machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["bytecode", "compiler", "virtual-machine", "register-machine", "code-generation"]
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
    "Topic :: Software Development :: Compilers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["turbinevm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
