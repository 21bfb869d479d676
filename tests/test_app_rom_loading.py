"""Chip8App ROM loading and stepping without a display."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from pychip8.ui.app import AppConfig, Chip8App, _canonical_name
from pychip8.utils import reload_categories


def _fake_pygame(names: dict[int, str]) -> SimpleNamespace:
    return SimpleNamespace(key=SimpleNamespace(name=lambda code: names[code]))


def test_app_creates_machine_from_rom(tmp_path) -> None:
    rom_path = tmp_path / "demo.ch8"
    rom_path.write_bytes(b"\x6A\x42")

    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)

    assert machine.memory.load16(0x200) == 0x6A42
    machine.step()
    assert machine.cpu.state.v[0xA] == 0x42


def test_app_reports_oversize_rom(tmp_path) -> None:
    rom_path = tmp_path / "huge.ch8"
    rom_path.write_bytes(bytes(4000))

    app = Chip8App(AppConfig(rom_path=rom_path))
    with pytest.raises(RuntimeError, match="Failed to load ROM"):
        app._create_machine(rom_path)


def test_app_reports_missing_rom(tmp_path) -> None:
    app = Chip8App(AppConfig())
    with pytest.raises(RuntimeError, match="not found"):
        app._create_machine(tmp_path / "missing.ch8")


def test_step_cpu_runs_one_frame_of_instructions(tmp_path) -> None:
    rom_path = tmp_path / "loop.ch8"
    rom_path.write_bytes(b"\x70\x01\x12\x00")  # ADD V0, 1 / JP 0x200

    app = Chip8App(AppConfig(rom_path=rom_path, cycles_per_second=600))
    machine = app._create_machine(rom_path)
    app._step_cpu(machine)

    assert machine.cpu.cycle_count == 10
    assert machine.cpu.state.v[0] == 5


def test_step_cpu_wraps_fatal_errors(tmp_path) -> None:
    rom_path = tmp_path / "ret.ch8"
    rom_path.write_bytes(b"\x00\xEE")

    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)

    with pytest.raises(RuntimeError, match="CPU halted"):
        app._step_cpu(machine)


def test_step_cpu_records_trace(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "trace")
    reload_categories()
    try:
        rom_path = tmp_path / "wait.ch8"
        rom_path.write_bytes(b"\xF0\x0A")
        app = Chip8App(AppConfig(rom_path=rom_path, cycles_per_second=120))
        machine = app._create_machine(rom_path)
        app._step_cpu(machine)
    finally:
        reload_categories()

    entry = app._trace_recorder.last_entry()
    assert entry is not None
    assert entry.pc == 0x200
    assert entry.mnemonic == "LD V0, K"
    assert entry.note == "wait"


def test_trace_does_not_mark_self_jump_as_wait(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "trace")
    reload_categories()
    try:
        rom_path = tmp_path / "halt.ch8"
        rom_path.write_bytes(b"\x12\x00")  # JP 0x200
        app = Chip8App(AppConfig(rom_path=rom_path, cycles_per_second=120))
        machine = app._create_machine(rom_path)
        app._step_cpu(machine)
    finally:
        reload_categories()

    entry = app._trace_recorder.last_entry()
    assert entry is not None
    assert entry.mnemonic == "JP 0x200"
    assert entry.note == ""


def test_key_events_reach_keypad(tmp_path) -> None:
    rom_path = tmp_path / "keys.ch8"
    rom_path.write_bytes(b"\x00\xE0")
    app = Chip8App(AppConfig(rom_path=rom_path))
    app._machine = app._create_machine(rom_path)
    pygame = _fake_pygame({1: "w", 2: "[3]", 3: "left shift"})

    app._handle_key_event(pygame, 1, pressed=True)
    app._handle_key_event(pygame, 2, pressed=True)
    app._handle_key_event(pygame, 3, pressed=True)

    assert app.machine.keypad.is_pressed(0x5)
    assert app.machine.keypad.is_pressed(0x3)

    app._handle_key_event(pygame, 1, pressed=False)
    assert not app.machine.keypad.is_pressed(0x5)


@pytest.mark.parametrize(
    ("name", "expected"),
    [("Q", "q"), ("[7]", "7"), ("left shift", None), ("", None)],
)
def test_canonical_name(name: str, expected) -> None:
    assert _canonical_name(name) == expected
