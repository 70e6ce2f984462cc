[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pcmflow"
version = "0.1.0"
description = "Iterator-based PCM sample sources: format, channel and sample-rate conversion, mixing, queueing and WAV decoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "pcm", "resampling", "mixer", "wav", "samples"]
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
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["pcmflow"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
