[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rustdoc_adapter"
version = "0.1.0"
description = "Query adapter over rustdoc JSON crate data: vertices, properties, edges and attribute parsing"
requires-python = ">=3.10"
dependencies = []
keywords = ["rustdoc", "query", "adapter", "graph", "api-analysis", "attributes"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rustdoc_adapter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
