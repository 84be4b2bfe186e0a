[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smite"
version = "0.0.0"
description = "Fuzzing harness toolkit for Lightning Network nodes: BOLT 8 Noise transport, secp256k1 keys, BOLT types, process control and scenario runners."
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "lightning",
    "bolt",
    "noise",
    "fuzzing",
    "testing",
    "bitcoin",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["smite"]

[tool.hatch.build.targets.sdist]
include = [
    "smite",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
