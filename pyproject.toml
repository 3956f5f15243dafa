[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oapiware"
version = "0.1.0"
description = "WSGI building blocks for OpenAPI services: header parsing, content negotiation, a URL router and method multiplexer, parameter binding, error responders and API documentation pages."
requires-python = ">=3.10"
dependencies = [
    "werkzeug",
]
keywords = [
    "openapi",
    "swagger",
    "wsgi",
    "middleware",
    "router",
    "content-negotiation",
    "redoc",
    "rapidoc",
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
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["oapiware"]

[tool.hatch.build.targets.sdist]
include = ["oapiware", "tests", "pyproject.toml"]

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
