"""Baseline tests ensuring the package layout loads correctly."""

import pychip8


def test_package_exports() -> None:
    for name in ("cpu", "bus", "video", "io", "loader", "system", "ui", "utils"):
        assert hasattr(pychip8, name), f"missing submodule: {name}"


def test_core_exports() -> None:
    from pychip8 import cpu, video

    for name in ("Chip8CPU", "CPUState", "CPUError", "StackOverflowError", "StackUnderflowError"):
        assert hasattr(cpu, name), f"cpu missing symbol: {name}"
    assert hasattr(video, "Framebuffer")
