"""Global descriptor table and 64-bit task state segment layout."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

GDT_ENTRIES = 7
KERNEL_CODE_SELECTOR = 0x08
KERNEL_DATA_SELECTOR = 0x10
TSS_SELECTOR = 0x28
KERNEL_STACK_TOP = 0x00000037FFFF0000

_ENTRY_FORMAT = "<HHBBBB"
_ENTRY_SIZE = struct.calcsize(_ENTRY_FORMAT)
_TSS_FORMAT = "<I3QQ7QQHH"
_TSS_SIZE = struct.calcsize(_TSS_FORMAT)


def _check_range(name: str, value: int, bits: int) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} {value:#x} does not fit in {bits} bits")


@dataclass(frozen=True)
class GdtEntry:
    """One 8-byte segment descriptor."""

    limit_low: int = 0
    base_low: int = 0
    base_mid: int = 0
    access: int = 0
    granularity: int = 0
    base_high: int = 0

    def __post_init__(self) -> None:
        _check_range("limit_low", self.limit_low, 16)
        _check_range("base_low", self.base_low, 16)
        _check_range("base_mid", self.base_mid, 8)
        _check_range("access", self.access, 8)
        _check_range("granularity", self.granularity, 8)
        _check_range("base_high", self.base_high, 8)

    def pack(self) -> bytes:
        """Encode the descriptor in its in-memory layout."""
        return struct.pack(
            _ENTRY_FORMAT,
            self.limit_low,
            self.base_low,
            self.base_mid,
            self.access,
            self.granularity,
            self.base_high,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "GdtEntry":
        """Decode a descriptor produced by pack()."""
        if len(data) != _ENTRY_SIZE:
            raise ValueError(f"a GDT entry is {_ENTRY_SIZE} bytes, got {len(data)}")
        return cls(*struct.unpack(_ENTRY_FORMAT, data))


@dataclass
class TaskStateSegment:
    """The 64-bit TSS: privilege stacks and interrupt stack table."""

    rsp0: int = KERNEL_STACK_TOP
    rsp1: int = 0
    rsp2: int = 0
    ist: list[int] = field(default_factory=lambda: [0] * 7)
    iomap_base: int = 0

    def __post_init__(self) -> None:
        if len(self.ist) != 7:
            raise ValueError(f"the interrupt stack table has 7 slots, got {len(self.ist)}")
        for name, value in (("rsp0", self.rsp0), ("rsp1", self.rsp1), ("rsp2", self.rsp2)):
            _check_range(name, value, 64)
        for slot, value in enumerate(self.ist, start=1):
            _check_range(f"ist{slot}", value, 64)
        _check_range("iomap_base", self.iomap_base, 16)

    def pack(self) -> bytes:
        """Encode the segment in its in-memory layout."""
        return struct.pack(
            _TSS_FORMAT,
            0,
            self.rsp0,
            self.rsp1,
            self.rsp2,
            0,
            *self.ist,
            0,
            0,
            self.iomap_base,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "TaskStateSegment":
        """Decode a segment produced by pack()."""
        if len(data) != _TSS_SIZE:
            raise ValueError(f"a TSS is {_TSS_SIZE} bytes, got {len(data)}")
        fields = struct.unpack(_TSS_FORMAT, data)
        return cls(
            rsp0=fields[1],
            rsp1=fields[2],
            rsp2=fields[3],
            ist=list(fields[5:12]),
            iomap_base=fields[14],
        )


def build_gdt(tss_base: int, tss_size: int) -> list[GdtEntry]:
    """Build the seven descriptors: null, kernel/user code and data, and the TSS."""
    _check_range("tss_base", tss_base, 64)
    if tss_size <= 0:
        raise ValueError("tss_size must be positive")

    limit = (tss_size - 1) & 0xFFFF
    high = (tss_base >> 32) & 0xFFFFFFFF
    return [
        GdtEntry(),
        GdtEntry(access=0x9A, granularity=0x20),
        GdtEntry(access=0x92),
        GdtEntry(access=0xFA, granularity=0x20),
        GdtEntry(access=0xF2),
        GdtEntry(
            limit_low=limit,
            base_low=tss_base & 0xFFFF,
            base_mid=(tss_base >> 16) & 0xFF,
            access=0x89,
            granularity=(limit >> 16) & 0x0F,
            base_high=(tss_base >> 24) & 0xFF,
        ),
        # Upper half of the 16-byte system descriptor: base bits 32..63, then zero.
        GdtEntry(limit_low=high & 0xFFFF, base_low=(high >> 16) & 0xFFFF),
    ]