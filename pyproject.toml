[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixelhide"
version = "1.0.0"
description = "Hide files inside the low bits of image pixels and recover them again"
requires-python = ">=3.10"
keywords = ["steganography", "image", "png", "lsb", "embedding", "aes", "sha256", "crc32"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[project.scripts]
pixelhide = "pixelhide.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pixelhide"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
