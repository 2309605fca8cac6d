[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "galtonboard"
version = "0.1.0"
description = "A Galton board simulation drawn into a 128x64 SSD1306-style monochrome frame buffer"
requires-python = ">=3.10"
dependencies = []
keywords = ["galton", "simulation", "ssd1306", "oled", "framebuffer", "histogram"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
galtonboard = "galtonboard.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["galtonboard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
