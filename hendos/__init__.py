"""Shell, login prompt, ELF loader and descriptor-table models of a small x86_64 operating system."""

__version__ = "0.1.0"
__all__ = ["elf", "gdt", "getty", "shell", "signals", "tools"]