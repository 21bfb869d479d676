"""Opcode metadata and decoding for the CHIP-8 instruction set.

SHL is accepted at both ``8xy8`` and the conventional ``8xyE``. The second
encoding is an extension kept so that ROMs written for common interpreters
run unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Final, Iterable, List, Sequence


@dataclass(frozen=True)
class OpcodePattern:
    """A 16-bit opcode shape: ``opcode & mask == value`` selects it."""

    mask: int
    value: int
    mnemonic: str
    handler: str
    operands: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF:
            raise ValueError(f"mask out of range: {self.mask:#x}")
        if self.value & ~self.mask:
            raise ValueError(f"value {self.value:#06x} has bits outside mask {self.mask:#06x}")

    @property
    def leading_nibble(self) -> int:
        return (self.value >> 12) & 0xF

    @property
    def specificity(self) -> int:
        return bin(self.mask).count("1")

    def matches(self, opcode: int) -> bool:
        return opcode & self.mask == self.value


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit instruction word."""

    opcode: int
    pattern: OpcodePattern

    @property
    def mnemonic(self) -> str:
        return self.pattern.mnemonic

    @property
    def handler(self) -> str:
        return self.pattern.handler

    @property
    def kind(self) -> int:
        return (self.opcode >> 12) & 0xF

    @property
    def x(self) -> int:
        return (self.opcode >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.opcode >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.opcode & 0xF

    @property
    def nnn(self) -> int:
        return self.opcode & 0x0FFF

    @property
    def kk(self) -> int:
        return self.opcode & 0x00FF

    def format(self) -> str:
        """Render the instruction as assembly-like text, e.g. ``LD V1, 0x2a``."""

        if not self.pattern.operands:
            return self.mnemonic
        operands = self.pattern.operands.format(x=self.x, y=self.y, n=self.n, nnn=self.nnn, kk=self.kk)
        return f"{self.mnemonic} {operands}"


class OpcodeTable:
    """Builder for the pattern lists, grouped by leading nibble.

    Within a group the most specific pattern (most mask bits set) is tried
    first, so ``00E0``/``00EE`` take precedence over ``0nnn`` independently of
    registration order.
    """

    def __init__(self) -> None:
        self._groups: List[List[OpcodePattern]] = [[] for _ in range(16)]

    def register(self, pattern: OpcodePattern) -> None:
        group = self._groups[pattern.leading_nibble]
        for existing in group:
            if existing.mask == pattern.mask and existing.value == pattern.value:
                raise ValueError(
                    f"opcode pattern {pattern.value:#06x}/{pattern.mask:#06x} already registered as {existing.mnemonic}"
                )
        group.append(pattern)
        group.sort(key=lambda item: item.specificity, reverse=True)

    def register_all(self, patterns: Iterable[OpcodePattern]) -> None:
        for pattern in patterns:
            self.register(pattern)

    def freeze(self) -> Sequence[Sequence[OpcodePattern]]:
        return tuple(tuple(group) for group in self._groups)


def build_opcode_table(patterns: Iterable[OpcodePattern]) -> Sequence[Sequence[OpcodePattern]]:
    table = OpcodeTable()
    table.register_all(patterns)
    return table.freeze()


_FULL: Final[int] = 0xFFFF
_HEAD: Final[int] = 0xF000
_HEAD_TAIL: Final[int] = 0xF00F
_HEAD_BYTE: Final[int] = 0xF0FF


DEFAULT_PATTERNS: Sequence[OpcodePattern] = (
    OpcodePattern(_FULL, 0x00E0, "CLS", "op_cls"),
    OpcodePattern(_FULL, 0x00EE, "RET", "op_ret"),
    OpcodePattern(_HEAD, 0x0000, "SYS", "op_sys", "{nnn:#05x}"),
    OpcodePattern(_HEAD, 0x1000, "JP", "op_jp", "{nnn:#05x}"),
    OpcodePattern(_HEAD, 0x2000, "CALL", "op_call", "{nnn:#05x}"),
    OpcodePattern(_HEAD, 0x3000, "SE", "op_se_byte", "V{x:X}, {kk:#04x}"),
    OpcodePattern(_HEAD, 0x4000, "SNE", "op_sne_byte", "V{x:X}, {kk:#04x}"),
    OpcodePattern(_HEAD_TAIL, 0x5000, "SE", "op_se_reg", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD, 0x6000, "LD", "op_ld_byte", "V{x:X}, {kk:#04x}"),
    OpcodePattern(_HEAD, 0x7000, "ADD", "op_add_byte", "V{x:X}, {kk:#04x}"),
    OpcodePattern(_HEAD_TAIL, 0x8000, "LD", "op_ld_reg", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD_TAIL, 0x8001, "OR", "op_or", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD_TAIL, 0x8002, "AND", "op_and", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD_TAIL, 0x8003, "XOR", "op_xor", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD_TAIL, 0x8004, "ADD", "op_add_reg", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD_TAIL, 0x8005, "SUB", "op_sub", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD_TAIL, 0x8006, "SHR", "op_shr", "V{x:X}"),
    OpcodePattern(_HEAD_TAIL, 0x8007, "SUBN", "op_subn", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD_TAIL, 0x8008, "SHL", "op_shl", "V{x:X}"),
    OpcodePattern(_HEAD_TAIL, 0x800E, "SHL", "op_shl", "V{x:X}"),
    OpcodePattern(_HEAD_TAIL, 0x9000, "SNE", "op_sne_reg", "V{x:X}, V{y:X}"),
    OpcodePattern(_HEAD, 0xA000, "LD", "op_ld_i", "I, {nnn:#05x}"),
    OpcodePattern(_HEAD, 0xB000, "JP", "op_jp_v0", "V0, {nnn:#05x}"),
    OpcodePattern(_HEAD, 0xC000, "RND", "op_rnd", "V{x:X}, {kk:#04x}"),
    OpcodePattern(_HEAD, 0xD000, "DRW", "op_drw", "V{x:X}, V{y:X}, {n}"),
    OpcodePattern(_HEAD_BYTE, 0xE09E, "SKP", "op_skp", "V{x:X}"),
    OpcodePattern(_HEAD_BYTE, 0xE0A1, "SKNP", "op_sknp", "V{x:X}"),
    OpcodePattern(_HEAD_BYTE, 0xF007, "LD", "op_ld_vx_dt", "V{x:X}, DT"),
    OpcodePattern(_HEAD_BYTE, 0xF00A, "LD", "op_ld_vx_k", "V{x:X}, K"),
    OpcodePattern(_HEAD_BYTE, 0xF015, "LD", "op_ld_dt_vx", "DT, V{x:X}"),
    OpcodePattern(_HEAD_BYTE, 0xF018, "LD", "op_ld_st_vx", "ST, V{x:X}"),
    OpcodePattern(_HEAD_BYTE, 0xF01E, "ADD", "op_add_i_vx", "I, V{x:X}"),
    OpcodePattern(_HEAD_BYTE, 0xF029, "LD", "op_ld_f_vx", "F, V{x:X}"),
    OpcodePattern(_HEAD_BYTE, 0xF033, "LD", "op_ld_b_vx", "B, V{x:X}"),
    OpcodePattern(_HEAD_BYTE, 0xF055, "LD", "op_ld_mem_vx", "[I], V{x:X}"),
    OpcodePattern(_HEAD_BYTE, 0xF065, "LD", "op_ld_vx_mem", "V{x:X}, [I]"),
)


OPCODE_TABLE: Sequence[Sequence[OpcodePattern]] = build_opcode_table(DEFAULT_PATTERNS)


@lru_cache(maxsize=4096)
def decode(opcode: int) -> Instruction | None:
    """Decode a 16-bit word, returning ``None`` for unrecognised shapes."""

    opcode &= 0xFFFF
    for pattern in OPCODE_TABLE[opcode >> 12]:
        if pattern.matches(opcode):
            return Instruction(opcode, pattern)
    return None


__all__ = [
    "OpcodePattern",
    "Instruction",
    "OpcodeTable",
    "build_opcode_table",
    "DEFAULT_PATTERNS",
    "OPCODE_TABLE",
    "decode",
]
