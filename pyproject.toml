[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ktl"
version = "0.1.0"
description = "Composable memory allocators, allocator-aware containers and allocation benchmarks over a simulated address space"
requires-python = ">=3.10"
dependencies = []
keywords = ["allocator", "memory", "composable", "stack allocator", "benchmark", "packed pointer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ktl-bench = "ktl.benchmarks:main"

[tool.hatch.build.targets.wheel]
packages = ["ktl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
