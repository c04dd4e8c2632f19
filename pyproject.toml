[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dxsynth"
version = "0.1.0"
description = "Fixed-point FM synthesis building blocks: operators, envelopes, LFO, filters and WAV output"
requires-python = ">=3.10"
dependencies = []
keywords = ["synthesizer", "fm", "dx7", "audio", "dsp", "fixed-point"]
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
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dxsynth"]

[tool.pytest.ini_options]
addopts = "-ra"
