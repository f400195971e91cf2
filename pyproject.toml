[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "recorder"
version = "0.1.0"
description = "Building blocks for an ambient meeting recorder: dual-channel PulseAudio capture, speech gating, chunking, and transcription, chat completion and DevTools clients"
requires-python = ">=3.10"
keywords = [
    "audio",
    "recording",
    "transcription",
    "whisper",
    "pulseaudio",
    "meetings",
    "llm",
    "chrome-devtools-protocol",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Capture/Recording",
    "Topic :: Multimedia :: Sound/Audio :: Speech",
]
dependencies = [
    "httpx",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["recorder"]

[tool.hatch.build.targets.sdist]
include = ["recorder", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
