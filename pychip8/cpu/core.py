"""CHIP-8 CPU: register file, fetch/decode/execute and instruction handlers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, List

from pychip8.bus import PROGRAM_START, Memory
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log, report
from pychip8.video import Framebuffer, glyph_address

from .opcodes import Instruction, decode


class CPUError(Exception):
    """Base error for CPU-related failures."""


class IllegalOpcodeError(CPUError):
    """Raised in strict mode when the CPU fetches an unrecognised word."""


class StackOverflowError(CPUError):
    """Raised when CALL is executed with a full return stack."""


class StackUnderflowError(CPUError):
    """Raised when RET is executed with an empty return stack."""


REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG = 0xF


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x000
    pc: int = PROGRAM_START
    sp: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0

    def clone(self) -> "CPUState":
        return CPUState(
            bytearray(self.v),
            self.i,
            self.pc,
            self.sp,
            list(self.stack),
            self.delay_timer,
            self.sound_timer,
        )


def _system_random_byte() -> int:
    return random.getrandbits(8)


@dataclass
class Chip8CPU:
    """CHIP-8 interpreter core.

    The CPU owns the register file and reaches memory, the framebuffer and the
    keypad through the objects handed to it. Timers live in :class:`CPUState`
    and are only read or written here; counting them down is the host's job.
    """

    memory: Memory
    framebuffer: Framebuffer
    keypad: Keypad
    random_byte: Callable[[], int] = field(default=_system_random_byte)
    strict_illegal: bool = False

    state: CPUState = field(default_factory=CPUState)
    cycle_count: int = 0

    def reset(self) -> None:
        """Reset the register file; memory and devices are left alone."""

        self.state = CPUState()
        self.cycle_count = 0

    def step(self) -> Instruction | None:
        """Execute a single instruction and return what was decoded.

        The program counter is advanced past the instruction before it is
        executed, so jumps overwrite it and skips add a further 2.
        """

        pc_before = self.state.pc
        opcode = self.fetch_opcode(pc_before)
        self.state.pc = (pc_before + 2) & 0xFFFF
        self.cycle_count += 1

        instruction = decode(opcode)
        if instruction is None:
            if self.strict_illegal:
                raise IllegalOpcodeError(f"illegal opcode {opcode:#06x} at {pc_before:#05x}")
            report("cpu", "unknown opcode=%04x pc=%03x", opcode, pc_before)
            return None

        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc_before, opcode, instruction.format())

        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")
        handler(instruction)
        return instruction

    def fetch_opcode(self, address: int) -> int:
        return self.memory.load16(address)

    # ------------------------------------------------------------------
    # Flow control

    def op_cls(self, _: Instruction) -> None:
        self.framebuffer.clear()

    def op_ret(self, _: Instruction) -> None:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError(f"RET with empty stack at {(state.pc - 2) & 0xFFFF:#05x}")
        state.sp -= 1
        state.pc = state.stack[state.sp]

    def op_sys(self, instruction: Instruction) -> None:
        """Machine-code call on the original hardware; ignored here."""

        if debug_enabled("cpu"):
            debug_log("cpu", "ignored SYS %03x", instruction.nnn)

    def op_jp(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: Instruction) -> None:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(f"CALL {instruction.nnn:#05x} with full stack ({STACK_DEPTH} entries)")
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = instruction.nnn

    def op_jp_v0(self, instruction: Instruction) -> None:
        self.state.pc = (self.state.v[0] + instruction.nnn) & 0x0FFF

    def op_se_byte(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] == instruction.kk:
            self._skip()

    def op_sne_byte(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] != instruction.kk:
            self._skip()

    def op_se_reg(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] == self.state.v[instruction.y]:
            self._skip()

    def op_sne_reg(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] != self.state.v[instruction.y]:
            self._skip()

    def op_skp(self, instruction: Instruction) -> None:
        if self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F):
            self._skip()

    def op_sknp(self, instruction: Instruction) -> None:
        if not self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F):
            self._skip()

    # ------------------------------------------------------------------
    # Loads and immediate arithmetic

    def op_ld_byte(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = instruction.kk

    def op_add_byte(self, instruction: Instruction) -> None:
        # No carry flag, unlike 8xy4.
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.kk) & 0xFF

    def op_ld_i(self, instruction: Instruction) -> None:
        self.state.i = instruction.nnn

    def op_rnd(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.random_byte() & 0xFF & instruction.kk

    # ------------------------------------------------------------------
    # ALU group (8xy_). Results are written before VF so the flag wins when x == F.

    def op_ld_reg(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.state.v[instruction.y]

    def op_or(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] |= v[instruction.y]

    def op_and(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] &= v[instruction.y]

    def op_xor(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] ^= v[instruction.y]

    def op_add_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        v[instruction.x] = total & 0xFF
        v[FLAG] = 1 if total > 0xFF else 0

    def op_sub(self, instruction: Instruction) -> None:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        v[instruction.x] = (vx - vy) & 0xFF
        v[FLAG] = 1 if vx > vy else 0

    def op_subn(self, instruction: Instruction) -> None:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        v[instruction.x] = (vy - vx) & 0xFF
        v[FLAG] = 1 if vy > vx else 0

    def op_shr(self, instruction: Instruction) -> None:
        v = self.state.v
        vx = v[instruction.x]
        v[instruction.x] = vx >> 1
        v[FLAG] = vx & 0x01

    def op_shl(self, instruction: Instruction) -> None:
        v = self.state.v
        vx = v[instruction.x]
        v[instruction.x] = (vx << 1) & 0xFF
        v[FLAG] = (vx >> 7) & 0x01

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, instruction: Instruction) -> None:
        state = self.state
        framebuffer = self.framebuffer
        origin_x = state.v[instruction.x] % framebuffer.width
        origin_y = state.v[instruction.y] % framebuffer.height
        collision = False

        for row in range(instruction.n):
            sprite = self.memory.load8(state.i + row)
            y = (origin_y + row) % framebuffer.height
            for column in range(8):
                if not sprite & (0x80 >> column):
                    continue
                x = (origin_x + column) % framebuffer.width
                if framebuffer.set(x, y, True):
                    collision = True

        state.v[FLAG] = 1 if collision else 0

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.state.delay_timer & 0xFF

    def op_ld_vx_k(self, instruction: Instruction) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            # Re-run this instruction on the next step until a key is down.
            self.state.pc = (self.state.pc - 2) & 0xFFFF
            return
        self.state.v[instruction.x] = key

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.state.delay_timer = self.state.v[instruction.x]

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.state.sound_timer = self.state.v[instruction.x]

    # ------------------------------------------------------------------
    # Index register and memory transfers

    def op_add_i_vx(self, instruction: Instruction) -> None:
        self.state.i = (self.state.i + self.state.v[instruction.x]) & 0xFFFF

    def op_ld_f_vx(self, instruction: Instruction) -> None:
        self.state.i = glyph_address(self.state.v[instruction.x])

    def op_ld_b_vx(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        address = self.state.i
        self.memory.store8(address, value // 100)
        self.memory.store8(address + 1, (value // 10) % 10)
        self.memory.store8(address + 2, value % 10)

    def op_ld_mem_vx(self, instruction: Instruction) -> None:
        state = self.state
        for index in range(instruction.x + 1):
            self.memory.store8(state.i + index, state.v[index])

    def op_ld_vx_mem(self, instruction: Instruction) -> None:
        state = self.state
        for index in range(instruction.x + 1):
            state.v[index] = self.memory.load8(state.i + index)

    # ------------------------------------------------------------------
    # Helpers

    def _skip(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0xFFFF
