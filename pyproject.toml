[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "epollserve"
version = "0.1.0"
description = "A small epoll-driven TCP echo server and client with a background stream logger"
requires-python = ">=3.10"
dependencies = []
keywords = ["epoll", "tcp", "echo", "server", "socket", "networking", "logging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
epollserve-server = "epollserve.server:main"

[tool.hatch.build.targets.wheel]
packages = ["epollserve"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
