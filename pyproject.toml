[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fmesdk"
version = "0.1.0"
description = "Feature management and experimentation building blocks: bucketing, campaign allocation, settings handling, event batching and event payloads"
requires-python = ">=3.10"
dependencies = []
keywords = ["feature-flags", "experimentation", "a/b-testing", "bucketing", "rollout"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fmesdk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
