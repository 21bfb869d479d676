"""Bus-related helpers for the CHIP-8 interpreter."""

from .memory import (
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    Memory,
    MemoryError,
    RomSizeError,
)

__all__ = [
    "Memory",
    "MemoryError",
    "RomSizeError",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
]
