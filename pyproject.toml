[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mbmap"
version = "1.0.0"
description = "Modbus-style register memory maps with bit, word and typed access, plus address range merging"
requires-python = ">=3.10"
dependencies = []
keywords = ["modbus", "registers", "memory-map", "coils", "embedded"]
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
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mbmap-demo = "mbmap.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["mbmap"]

[tool.pytest.ini_options]
addopts = "-ra"
