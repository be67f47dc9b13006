[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mmapsum"
version = "0.1.0"
description = "Sum the numbers on each line of a file in a worker process, exchanging data through a memory-mapped file"
requires-python = ">=3.10"
dependencies = []
keywords = ["mmap", "ipc", "shared-memory", "subprocess"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mmapsum = "mmapsum.parent:main"
mmapsum-child = "mmapsum.child:main"

[tool.hatch.build.targets.wheel]
packages = ["mmapsum"]

[tool.pytest.ini_options]
addopts = "-ra"
