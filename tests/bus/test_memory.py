"""Unit tests for CHIP-8 memory."""

import pytest

from pychip8.bus import MAX_PROGRAM_SIZE, Memory, MemoryError, RomSizeError


def test_memory_starts_zeroed() -> None:
    memory = Memory()
    assert len(memory) == 0x1000
    assert memory.snapshot() == bytes(0x1000)


def test_load16_is_big_endian() -> None:
    memory = Memory()
    memory.store8(0x200, 0x12)
    memory.store8(0x201, 0x34)
    assert memory.load16(0x200) == 0x1234

    memory.store16(0x300, 0xABCD)
    assert memory.read_block(0x300, 2) == b"\xAB\xCD"


def test_addresses_wrap_at_twelve_bits() -> None:
    memory = Memory()
    memory.store8(0x1005, 0x77)
    assert memory.load8(0x005) == 0x77

    memory.store16(0xFFF, 0xBEEF)
    assert memory.load8(0xFFF) == 0xBE
    assert memory.load8(0x000) == 0xEF


def test_store8_masks_value() -> None:
    memory = Memory()
    memory.store8(0x10, 0x1FF)
    assert memory.load8(0x10) == 0xFF


def test_load_program_accepts_full_size() -> None:
    memory = Memory()
    image = bytes([0xA5]) + bytes(MAX_PROGRAM_SIZE - 2) + bytes([0x5A])
    assert len(image) == 3584

    memory.load_program(image)

    assert memory.load8(0x200) == 0xA5
    assert memory.load8(0xFFF) == 0x5A


def test_load_program_rejects_oversize_image() -> None:
    memory = Memory()
    with pytest.raises(RomSizeError):
        memory.load_program(bytes([0x11]) * 3585)
    assert memory.load8(0x200) == 0x00


def test_rom_size_error_is_memory_error() -> None:
    assert issubclass(RomSizeError, MemoryError)


def test_clear() -> None:
    memory = Memory()
    memory.load_block(0x50, [1, 2, 3])
    memory.clear()
    assert memory.read_block(0x50, 3) == bytes(3)
