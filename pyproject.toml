[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "m3u8dl"
version = "0.1.0"
description = "Download HLS (M3U8) streams, decrypt AES-128 segments and merge them into a single TS file"
requires-python = ">=3.10"
keywords = ["m3u8", "hls", "downloader", "video", "transport-stream"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
m3u8dl = "m3u8dl.cli:main"
m3u8-detect = "m3u8dl.detect:main"

[tool.hatch.build.targets.wheel]
packages = ["m3u8dl"]

[tool.pytest.ini_options]
addopts = "-ra"
