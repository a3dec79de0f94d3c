[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "conkit"
version = "0.1.0"
description = "Concurrency building blocks: thread pool, cache, cancellable listener, concurrent owners, reference counting, stacks and hazard pointers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "concurrency",
    "thread-pool",
    "hazard-pointers",
    "lock-free",
    "behaviour-oriented-concurrency",
]
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

[project.scripts]
conkit-hello-server = "conkit.server:main"

[tool.hatch.build.targets.wheel]
packages = ["conkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
