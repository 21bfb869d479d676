"""Byte-addressable 4 KiB memory used by the CHIP-8 interpreter.

The interpreter sees a flat 12-bit address space. The first 512 bytes are
reserved for the interpreter itself (the built-in hex font lives there) and
programs are loaded at ``PROGRAM_START``. Addresses are masked to 12 bits, so
reads and writes past ``0xFFF`` wrap around to the start of memory.
"""

from __future__ import annotations

from typing import Iterable

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


def _mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit address space of the interpreter."""

    return value & 0x0FFF


class MemoryError(Exception):
    """Raised when memory is used incorrectly."""


class RomSizeError(MemoryError):
    """Raised when a program image does not fit into program memory."""


class Memory:
    """Flat CHIP-8 memory block."""

    def __init__(self) -> None:
        self._data = bytearray(MEMORY_SIZE)

    def __len__(self) -> int:
        return MEMORY_SIZE

    def load8(self, address: int) -> int:
        return self._data[_mask12(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[_mask12(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def store16(self, address: int, value: int) -> None:
        self.store8(address, (value >> 8) & 0xFF)
        self.store8(address + 1, value & 0xFF)

    def load_block(self, address: int, data: Iterable[int]) -> None:
        """Copy ``data`` into memory starting at ``address``."""

        for offset, value in enumerate(data):
            self.store8(address + offset, value)

    def read_block(self, address: int, length: int) -> bytes:
        return bytes(self.load8(address + offset) for offset in range(length))

    def load_program(self, data: bytes) -> None:
        """Place a program image at ``PROGRAM_START``.

        Images larger than the 3584 bytes of program memory are rejected with
        :class:`RomSizeError`; nothing is written in that case.
        """

        if len(data) > MAX_PROGRAM_SIZE:
            raise RomSizeError(
                f"program is {len(data)} bytes; at most {MAX_PROGRAM_SIZE} bytes fit at {PROGRAM_START:#05x}"
            )
        self._data[PROGRAM_START : PROGRAM_START + len(data)] = data

    def clear(self) -> None:
        self._data[:] = bytes(MEMORY_SIZE)

    def snapshot(self) -> bytes:
        return bytes(self._data)
