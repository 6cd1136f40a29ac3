import pytest

from hendos.signals import (
    CpuException,
    Disposition,
    IdtEntry,
    Signal,
    build_idt,
    disposition,
    exit_status_for_signal,
    make_gate,
    signal_for_exception,
)


@pytest.mark.parametrize(
    "vector, expected",
    [
        (CpuException.DIVIDE_ERROR, Signal.SIGFPE),
        (CpuException.DEBUG, Signal.SIGTRAP),
        (CpuException.BREAKPOINT, Signal.SIGTRAP),
        (CpuException.OVERFLOW, Signal.SIGSEGV),
        (CpuException.INVALID_OPCODE, Signal.SIGILL),
        (CpuException.INVALID_TSS, Signal.SIGBUS),
        (CpuException.ALIGNMENT_CHECK, Signal.SIGBUS),
        (CpuException.SIMD_FLOATING_POINT, Signal.SIGFPE),
    ],
)
def test_simple_exceptions(vector, expected):
    assert signal_for_exception(vector) is expected


@pytest.mark.parametrize(
    "vector",
    [CpuException.NMI, CpuException.DOUBLE_FAULT, CpuException.MACHINE_CHECK, CpuException.RESERVED],
)
def test_exceptions_without_signal(vector):
    assert signal_for_exception(vector) is None


def test_general_protection_zero_error_code_is_illegal():
    assert signal_for_exception(CpuException.GENERAL_PROTECTION, 0) is Signal.SIGILL


def test_general_protection_external_is_segv():
    assert signal_for_exception(CpuException.GENERAL_PROTECTION, (1 << 17) | 0x10) is Signal.SIGSEGV


def test_general_protection_table_bit_is_segv():
    assert signal_for_exception(CpuException.GENERAL_PROTECTION, (1 << 16) | 0x10) is Signal.SIGSEGV


def test_general_protection_with_selector_is_illegal():
    assert signal_for_exception(CpuException.GENERAL_PROTECTION, 0x10) is Signal.SIGILL


def test_page_fault_not_present_is_segv():
    assert signal_for_exception(CpuException.PAGE_FAULT, 0) is Signal.SIGSEGV
    assert signal_for_exception(CpuException.PAGE_FAULT, 2) is Signal.SIGSEGV


def test_page_fault_protection_is_bus_error():
    assert signal_for_exception(CpuException.PAGE_FAULT, 1) is Signal.SIGBUS


def test_non_exception_vector_rejected():
    with pytest.raises(ValueError):
        signal_for_exception(0x21)


def test_dispositions():
    assert disposition(Signal.SIGSEGV) is Disposition.CORE_DUMP
    assert disposition(Signal.SIGTERM) is Disposition.TERMINATE
    assert disposition(Signal.SIGCHLD) is Disposition.IGNORE
    assert disposition(Signal.SIGNONE) is Disposition.IGNORE


def test_core_dump_status_sets_high_bit():
    status = exit_status_for_signal(Signal.SIGSEGV)
    assert status & 0x7F == Signal.SIGSEGV
    assert status & 0x80


def test_terminate_status_is_signal_number():
    assert exit_status_for_signal(Signal.SIGINT) == Signal.SIGINT


def test_ignored_signal_has_no_status():
    assert exit_status_for_signal(Signal.SIGWINCH) is None


def test_gate_attributes():
    gate = make_gate(0x1000, 3, 1)
    assert gate.present
    assert gate.dpl == 3
    assert gate.gate_type == 0xE
    assert gate.selector == 0x08
    assert gate.ist == 1


def test_gate_dpl_is_masked():
    assert make_gate(0x1000, 7, 0).dpl == 3


def test_entry_round_trip():
    entry = make_gate(0xFFFF_8000_1234_5678, 0, 1)
    packed = entry.pack()
    assert len(packed) == 16
    assert IdtEntry.unpack(packed) == entry


def test_entry_layout_splits_offset():
    packed = make_gate(0x1122334455667788, 0, 1).pack()
    assert packed[0:2] == bytes([0x88, 0x77])
    assert packed[6:8] == bytes([0x66, 0x55])
    assert packed[8:12] == bytes([0x44, 0x33, 0x22, 0x11])
    assert packed[12:16] == bytes(4)


def test_entry_rejects_out_of_range():
    with pytest.raises(ValueError):
        IdtEntry(offset=1 << 64)
    with pytest.raises(ValueError):
        IdtEntry.unpack(bytes(8))


def test_build_idt():
    addresses = [0x10000 + 16 * vector for vector in range(256)]
    table = build_idt(addresses)
    assert len(table) == 256
    assert [entry.offset for entry in table] == addresses
    assert table[0x80].dpl == 3
    assert all(entry.dpl == 0 for vector, entry in enumerate(table) if vector != 0x80)
    assert all(entry.ist == 1 and entry.present for entry in table)


def test_build_idt_requires_all_vectors():
    with pytest.raises(ValueError):
        build_idt([0] * 10)