[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lwepir"
version = "0.0.1"
description = "Index-based single-server private information retrieval built on the learning-with-errors problem"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["pir", "private information retrieval", "lwe", "lattice", "cryptography"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lwepir"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
