"""Pygame frontend that drives the CHIP-8 machine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.bus import RomSizeError
from pychip8.cpu import CPUError
from pychip8.loader import RomFormatError, load_rom_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import Renderer, palette_by_name


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    cycles_per_second: int = 700
    fullscreen: bool = False
    palette: str = "mono"
    strict: bool = False
    seed: Optional[int] = None


class Chip8App:
    """Thin wrapper around the pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")
        rom_path = self._config.rom_path
        if not rom_path.exists():
            raise RuntimeError(f"ROM file not found: {rom_path}")

        machine = self._create_machine(rom_path)
        self._machine = machine
        renderer = Renderer(palette_by_name(self._config.palette))

        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {rom_path.name}")

        scale = self._config.scale
        surface_size = (machine.framebuffer.width * scale, machine.framebuffer.height * scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)

        clock = pygame.time.Clock()
        self._running = True

        import time

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)

                frame_start_time = time.perf_counter()
                self._step_cpu(machine)
                machine.tick_timers()

                if renderer.needs_redraw(machine.framebuffer):
                    frame = renderer.render(machine.framebuffer, scale=scale)
                    screen.blit(frame.to_surface(), (0, 0))
                    pygame.display.flip()

                frame_duration = time.perf_counter() - frame_start_time
                if self._perf_enabled and frame_duration > 0:
                    self._perf_frame += 1
                    debug_log(
                        "perf",
                        "frame=%d steps=%d frame_ms=%.3f",
                        self._perf_frame,
                        self._steps_per_frame(),
                        frame_duration * 1000.0,
                    )

                clock.tick(_FRAME_RATE)
        finally:
            pygame.quit()

    def _create_machine(self, rom_path: Path) -> Machine:
        machine = create_machine(
            MachineConfig(seed=self._config.seed, strict_illegal=self._config.strict)
        )
        try:
            load_rom_from_path(rom_path, machine.memory)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except (RomFormatError, RomSizeError) as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc
        return machine

    def _steps_per_frame(self) -> int:
        return max(1, self._config.cycles_per_second // _FRAME_RATE)

    def _step_cpu(self, machine: Machine) -> None:
        cpu = machine.cpu
        trace = self._trace_recorder

        try:
            for _ in range(self._steps_per_frame()):
                if trace is None:
                    cpu.step()
                    continue
                state_before = cpu.state.clone()
                opcode = cpu.fetch_opcode(state_before.pc)
                instruction = cpu.step()
                note = ""
                if instruction is None:
                    note = "unknown"
                elif instruction.handler == "op_ld_vx_k" and cpu.state.pc == state_before.pc:
                    note = "wait"
                trace.record_step(
                    state_before,
                    opcode,
                    mnemonic=instruction.format() if instruction is not None else "",
                    note=note,
                )
        except CPUError as exc:
            self._running = False
            if trace is not None:
                trace.dump("trace", 64)
            raise RuntimeError(f"CPU halted at pc={cpu.state.pc:03X}: {exc}") from exc

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        canonical = _canonical_name(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s canonical=%s pressed=%s", name, canonical, pressed)
        if canonical is None:
            return
        if pressed:
            machine.keypad.press(canonical)
        else:
            machine.keypad.release(canonical)


def _canonical_name(name: str) -> str | None:
    lowered = name.lower()
    if not lowered:
        return None
    if lowered.startswith("[") and lowered.endswith("]"):
        # Number pad keys are reported as "[1]" and behave like the top row.
        lowered = lowered[1:-1]
    if len(lowered) == 1:
        return lowered
    return None


_FRAME_RATE = 60
