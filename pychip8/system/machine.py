"""CHIP-8 machine assembly and host-facing control surface."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.bus import PROGRAM_START, Memory
from pychip8.cpu import Chip8CPU, Instruction
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Framebuffer, install_font


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    rom_image: Optional[bytes] = None
    seed: Optional[int] = None
    strict_illegal: bool = False


@dataclass
class Machine:
    """Aggregates the components of one CHIP-8 virtual machine.

    This is the single state object the host threads through its run loop:
    it calls :meth:`step` at the instruction rate, :meth:`tick_timers` at
    60 Hz, and :meth:`set_key` when host input changes.
    """

    memory: Memory
    cpu: Chip8CPU
    framebuffer: Framebuffer
    keypad: Keypad

    def load(self, data: bytes) -> None:
        """Copy a program image to ``PROGRAM_START``; oversize images raise ``RomSizeError``."""

        self.memory.load_program(data)

    def step(self) -> Instruction | None:
        return self.cpu.step()

    def run_cycles(self, count: int) -> int:
        """Execute ``count`` steps and return how many were run."""

        for _ in range(count):
            self.cpu.step()
        return count

    def tick_timers(self) -> None:
        """Count both timers down by one; call at 60 Hz."""

        state = self.cpu.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    def set_key(self, index: int, pressed: bool) -> None:
        self.keypad.set_key(index, pressed)

    @property
    def sound_active(self) -> bool:
        return self.cpu.state.sound_timer > 0

    def reset(self) -> None:
        """Return to power-on state while keeping the loaded program."""

        program = self.memory.read_block(PROGRAM_START, len(self.memory) - PROGRAM_START)
        self.memory.clear()
        install_font(self.memory)
        self.memory.load_program(program)
        self.framebuffer.clear()
        self.keypad.reset()
        self.cpu.reset()
        if debug_enabled("cpu"):
            debug_log("cpu", "machine reset")


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    memory = Memory()
    install_font(memory)
    if config.rom_image:
        memory.load_program(config.rom_image)

    framebuffer = Framebuffer()
    keypad = Keypad()
    rng = random.Random(config.seed)

    cpu = Chip8CPU(
        memory,
        framebuffer,
        keypad,
        random_byte=lambda: rng.getrandbits(8),
        strict_illegal=config.strict_illegal,
    )
    cpu.reset()

    return Machine(
        memory=memory,
        cpu=cpu,
        framebuffer=framebuffer,
        keypad=keypad,
    )
