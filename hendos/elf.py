"""Parsing and loading of statically linked x86-64 ELF executables."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

PAGE_SIZE = 4096

PT_NULL = 0
PT_LOAD = 1
PT_DYNAMIC = 2
PT_INTERP = 3
PT_NOTE = 4
PT_SHLIB = 5
PT_PHDR = 6

ELF_MAGIC = b"\x7fELF"
ELFDATA2LSB = 1
EM_X86_64 = 0x3E
ET_EXEC = 2

_HEADER_FORMAT = "<4sBBBBB7sHHIQQQIHHHHHH"
HEADER_SIZE = struct.calcsize(_HEADER_FORMAT)
_PHDR_FORMAT = "<IIQQQQQQ"
PROGRAM_HEADER_SIZE = struct.calcsize(_PHDR_FORMAT)


class ElfError(ValueError):
    """Raised when a file cannot be loaded as an executable."""


@dataclass(frozen=True)
class ElfHeader:
    """The fixed-size file header of a 64-bit ELF file."""

    elf_class: int
    data_encoding: int
    ident_version: int
    osabi: int
    abiversion: int
    type: int
    machine: int
    version: int
    entry: int
    phoff: int
    shoff: int
    flags: int
    ehsize: int
    phentsize: int
    phnum: int
    shentsize: int
    shnum: int
    shstrndx: int


@dataclass(frozen=True)
class ProgramHeader:
    """One entry of the program header table."""

    type: int
    flags: int
    offset: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    align: int


@dataclass
class LoadedImage:
    """An executable laid out in memory: entry point and 4 KiB pages by address."""

    entry: int
    program_headers: list[ProgramHeader]
    pages: dict[int, bytes] = field(default_factory=dict)


def _align_down(value: int, alignment: int) -> int:
    return value - value % alignment


def _align_up(value: int, alignment: int) -> int:
    return _align_down(value + alignment - 1, alignment)


def parse_header(data: bytes) -> ElfHeader:
    """Decode and validate the ELF header at the start of data."""
    if len(data) < HEADER_SIZE:
        raise ElfError("failed to read ELF header")
    (
        magic,
        elf_class,
        encoding,
        ident_version,
        osabi,
        abiversion,
        _pad,
        *rest,
    ) = struct.unpack_from(_HEADER_FORMAT, data)
    if magic != ELF_MAGIC:
        raise ElfError("not a valid ELF file")
    header = ElfHeader(elf_class, encoding, ident_version, osabi, abiversion, *rest)
    if header.data_encoding != ELFDATA2LSB:
        raise ElfError("big-endian ELF is not supported")
    if header.machine != EM_X86_64:
        raise ElfError(f"architecture {header.machine:#x} is not supported")
    if header.type != ET_EXEC:
        raise ElfError("not an executable")
    return header


def parse_program_headers(data: bytes, header: ElfHeader) -> list[ProgramHeader]:
    """Decode the program header table that header describes."""
    size = PROGRAM_HEADER_SIZE * header.phnum
    table = data[header.phoff : header.phoff + size]
    if len(table) != size:
        raise ElfError("failed to read program headers")
    return [ProgramHeader(*fields) for fields in struct.iter_unpack(_PHDR_FORMAT, table)]


def load_image(data: bytes) -> LoadedImage:
    """Lay out every loadable segment of an executable in zero-filled pages.

    Dynamically linked executables are rejected.
    """
    header = parse_header(data)
    program_headers = parse_program_headers(data, header)
    image = LoadedImage(entry=header.entry, program_headers=program_headers)

    for ph in program_headers:
        if ph.type == PT_INTERP:
            raise ElfError("dynamically linked executables are not supported")
        if ph.type != PT_LOAD:
            continue

        start = _align_down(ph.vaddr, PAGE_SIZE)
        end = _align_up(ph.vaddr + ph.memsz, PAGE_SIZE)
        cursor = ph.offset
        remaining = ph.filesz
        for index in range((end - start) // PAGE_SIZE):
            chunk = b""
            if remaining > 0:
                wanted = min(PAGE_SIZE, remaining)
                chunk = data[cursor : cursor + wanted]
                cursor += len(chunk)
                remaining -= wanted
            address = _align_down(ph.vaddr + PAGE_SIZE * index, PAGE_SIZE)
            image.pages[address] = chunk.ljust(PAGE_SIZE, b"\0")
    return image