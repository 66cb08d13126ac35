[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "randomness_sts"
version = "0.1.0"
description = "Statistical tests for judging the randomness of bit sequences, after the NIST Statistical Test Suite"
requires-python = ">=3.10"
dependencies = [
    "scipy",
]
keywords = [
    "randomness",
    "statistics",
    "nist",
    "sts",
    "rng",
    "bit sequence",
    "hypothesis testing",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sts-benchmark = "randomness_sts.benchmark:main"

[tool.hatch.build.targets.wheel]
packages = ["randomness_sts"]

[tool.pytest.ini_options]
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
