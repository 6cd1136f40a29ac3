"""CPU exceptions, interrupt gates and the signals they raise in a process."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Sequence

KERNEL_CODE_SELECTOR = 0x08
IDT_VECTORS = 256
SYSCALL_VECTOR = 0x80
INTERRUPT_GATE = 0xE
DEFAULT_IST = 1

_ENTRY_FORMAT = "<HHBBHII"
_ENTRY_SIZE = struct.calcsize(_ENTRY_FORMAT)


class Signal(IntEnum):
    """Signal numbers delivered to processes."""

    SIGNONE = 0
    SIGHUP = 1
    SIGINT = 2
    SIGQUIT = 3
    SIGILL = 4
    SIGTRAP = 5
    SIGABRT = 6
    SIGBUS = 7
    SIGFPE = 8
    SIGKILL = 9
    SIGUSR1 = 10
    SIGSEGV = 11
    SIGUSR2 = 12
    SIGPIPE = 13
    SIGALRM = 14
    SIGTERM = 15
    SIGSTKFLT = 16
    SIGCHLD = 17
    SIGCONT = 18
    SIGSTOP = 19
    SIGTSTP = 20
    SIGTTIN = 21
    SIGTTOU = 22
    SIGURG = 23
    SIGXCPU = 24
    SIGXFSZ = 25
    SIGVTALRM = 26
    SIGPROF = 27
    SIGWINCH = 28
    SIGIO = 29
    SIGPWR = 30
    SIGSYS = 31


class CpuException(IntEnum):
    """Architectural exception vectors handled by the kernel."""

    DIVIDE_ERROR = 0x0
    DEBUG = 0x1
    NMI = 0x2
    BREAKPOINT = 0x3
    OVERFLOW = 0x4
    BOUND_RANGE = 0x5
    INVALID_OPCODE = 0x6
    DEVICE_NOT_AVAILABLE = 0x7
    DOUBLE_FAULT = 0x8
    COPROCESSOR_OVERRUN = 0x9
    INVALID_TSS = 0xA
    SEGMENT_NOT_PRESENT = 0xB
    STACK_SEGMENT_FAULT = 0xC
    GENERAL_PROTECTION = 0xD
    PAGE_FAULT = 0xE
    RESERVED = 0xF
    X87_FLOATING_POINT = 0x10
    ALIGNMENT_CHECK = 0x11
    MACHINE_CHECK = 0x12
    SIMD_FLOATING_POINT = 0x13


class Disposition(Enum):
    """What the kernel does with a pending signal."""

    CORE_DUMP = "core"
    TERMINATE = "terminate"
    IGNORE = "ignore"


_SIMPLE_EXCEPTIONS = {
    CpuException.DIVIDE_ERROR: Signal.SIGFPE,
    CpuException.DEBUG: Signal.SIGTRAP,
    CpuException.NMI: None,
    CpuException.BREAKPOINT: Signal.SIGTRAP,
    CpuException.OVERFLOW: Signal.SIGSEGV,
    CpuException.BOUND_RANGE: Signal.SIGSEGV,
    CpuException.INVALID_OPCODE: Signal.SIGILL,
    CpuException.DEVICE_NOT_AVAILABLE: Signal.SIGSEGV,
    CpuException.DOUBLE_FAULT: None,
    CpuException.COPROCESSOR_OVERRUN: None,
    CpuException.INVALID_TSS: Signal.SIGBUS,
    CpuException.SEGMENT_NOT_PRESENT: Signal.SIGSEGV,
    CpuException.STACK_SEGMENT_FAULT: Signal.SIGSEGV,
    CpuException.RESERVED: None,
    CpuException.X87_FLOATING_POINT: Signal.SIGFPE,
    CpuException.ALIGNMENT_CHECK: Signal.SIGBUS,
    CpuException.MACHINE_CHECK: None,
    CpuException.SIMD_FLOATING_POINT: Signal.SIGFPE,
}

_CORE_DUMP_SIGNALS = frozenset(
    {
        Signal.SIGQUIT,
        Signal.SIGILL,
        Signal.SIGABRT,
        Signal.SIGFPE,
        Signal.SIGSEGV,
        Signal.SIGBUS,
        Signal.SIGXCPU,
        Signal.SIGTRAP,
        Signal.SIGXFSZ,
        Signal.SIGSYS,
    }
)

_TERMINATE_SIGNALS = frozenset(
    {
        Signal.SIGTERM,
        Signal.SIGHUP,
        Signal.SIGINT,
        Signal.SIGPIPE,
        Signal.SIGSTKFLT,
        Signal.SIGVTALRM,
        Signal.SIGALRM,
        Signal.SIGUSR1,
        Signal.SIGPROF,
        Signal.SIGPWR,
        Signal.SIGUSR2,
        Signal.SIGIO,
    }
)


def _check_range(name: str, value: int, bits: int) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} {value:#x} does not fit in {bits} bits")


@dataclass(frozen=True)
class IdtEntry:
    """One 16-byte interrupt descriptor."""

    offset: int
    selector: int = KERNEL_CODE_SELECTOR
    ist: int = 0
    attributes: int = 0

    def __post_init__(self) -> None:
        _check_range("offset", self.offset, 64)
        _check_range("selector", self.selector, 16)
        _check_range("ist", self.ist, 8)
        _check_range("attributes", self.attributes, 8)

    @property
    def present(self) -> bool:
        return bool(self.attributes & 0x80)

    @property
    def dpl(self) -> int:
        return (self.attributes >> 5) & 0x3

    @property
    def gate_type(self) -> int:
        return self.attributes & 0xF

    def pack(self) -> bytes:
        """Encode the descriptor in its in-memory layout."""
        return struct.pack(
            _ENTRY_FORMAT,
            self.offset & 0xFFFF,
            self.selector,
            self.ist,
            self.attributes,
            (self.offset >> 16) & 0xFFFF,
            (self.offset >> 32) & 0xFFFFFFFF,
            0,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "IdtEntry":
        """Decode a descriptor produced by pack()."""
        if len(data) != _ENTRY_SIZE:
            raise ValueError(f"an IDT entry is {_ENTRY_SIZE} bytes, got {len(data)}")
        low, selector, ist, attributes, mid, high, _ = struct.unpack(_ENTRY_FORMAT, data)
        return cls(
            offset=low | (mid << 16) | (high << 32),
            selector=selector,
            ist=ist,
            attributes=attributes,
        )


def make_gate(isr: int, dpl: int, ist: int) -> IdtEntry:
    """Build a present interrupt gate for the handler at address isr."""
    attributes = 0x80 | ((dpl & 0x3) << 5) | INTERRUPT_GATE
    return IdtEntry(offset=isr, selector=KERNEL_CODE_SELECTOR, ist=ist, attributes=attributes)


def build_idt(isr_addresses: Sequence[int]) -> list[IdtEntry]:
    """Build the full table; only the system-call vector is reachable from user mode."""
    if len(isr_addresses) != IDT_VECTORS:
        raise ValueError(f"expected {IDT_VECTORS} handler addresses, got {len(isr_addresses)}")
    return [
        make_gate(address, 3 if vector == SYSCALL_VECTOR else 0, DEFAULT_IST)
        for vector, address in enumerate(isr_addresses)
    ]


def signal_for_exception(vector: int, error_code: int = 0) -> Optional[Signal]:
    """Return the signal sent to the faulting process, or None if none is sent.

    Raises ValueError for vectors that are not CPU exceptions.
    """
    try:
        exception = CpuException(vector)
    except ValueError:
        raise ValueError(f"vector {vector:#x} is not a CPU exception") from None

    if exception is CpuException.GENERAL_PROTECTION:
        selector = error_code & 0xFFFF
        is_external = bool((error_code >> 17) & 1)
        is_table = bool((error_code >> 16) & 1)
        if error_code == 0:
            return Signal.SIGILL
        if is_external or is_table or not selector:
            return Signal.SIGSEGV
        return Signal.SIGILL

    if exception is CpuException.PAGE_FAULT:
        return Signal.SIGBUS if error_code & 0x1 else Signal.SIGSEGV

    return _SIMPLE_EXCEPTIONS[exception]


def disposition(signal: int) -> Disposition:
    """Return the default action for a signal."""
    if signal in _CORE_DUMP_SIGNALS:
        return Disposition.CORE_DUMP
    if signal in _TERMINATE_SIGNALS:
        return Disposition.TERMINATE
    return Disposition.IGNORE


def exit_status_for_signal(signal: int) -> Optional[int]:
    """Return the exit status a process gets from a signal, or None if it survives."""
    action = disposition(signal)
    if action is Disposition.CORE_DUMP:
        return int(signal) | 0x80
    if action is Disposition.TERMINATE:
        return int(signal)
    return None