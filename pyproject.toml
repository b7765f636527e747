[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xostools"
version = "0.1.0"
description = "Tools for an educational operating system: an XFS disk image manager and the building blocks of an XSM machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["xfs", "xsm", "disk-image", "emulator", "operating-system", "education"]
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
    "Topic :: Education",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xfs-interface = "xostools.xfs.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["xostools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
