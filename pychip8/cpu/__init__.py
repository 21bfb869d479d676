"""CPU package for the CHIP-8 interpreter."""

from .core import (
    CPUError,
    CPUState,
    Chip8CPU,
    IllegalOpcodeError,
    StackOverflowError,
    StackUnderflowError,
)
from .opcodes import Instruction, decode
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "Instruction",
    "decode",
    "opcodes",
]
