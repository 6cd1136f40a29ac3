[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hendos"
version = "0.1.0"
description = "Userland shell, login prompt, ELF loader and x86_64 descriptor-table model of a small hobby operating system"
requires-python = ">=3.10"
dependencies = []
keywords = ["operating-system", "shell", "elf", "x86_64", "gdt", "idt", "signals"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
hendos-shell = "hendos.shell:main"
hendos-getty = "hendos.getty:main"
hendos-tools = "hendos.tools:main"

[tool.hatch.build.targets.wheel]
packages = ["hendos"]

[tool.pytest.ini_options]
addopts = "-ra"
