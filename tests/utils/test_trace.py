import pytest

from pychip8.cpu import CPUState
from pychip8.utils.trace import TraceRecorder


def _state(pc: int, **registers: int) -> CPUState:
    state = CPUState(pc=pc)
    for name, value in registers.items():
        state.v[int(name[1:], 16)] = value
    return state


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200, v0=0x11), 0x6011, mnemonic="LD V0, 0x11")
    recorder.record_step(_state(0x202, v1=0x22), 0x6122, mnemonic="LD V1, 0x22")
    recorder.record_step(_state(0x204), 0xF00A, mnemonic="LD V0, K", note="wait")

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert "pc=202" in lines[0]
    assert "pc=204" in lines[1]
    assert "note=wait" in lines[1]
    assert recorder.last_entry().opcode == 0xF00A


def test_trace_recorder_handles_unknown_opcode():
    recorder = TraceRecorder(1)
    recorder.record_step(_state(0x300, vf=0x01), None, note="unknown")
    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=----" in lines[0]
    assert lines[0].rstrip().endswith("note=unknown")
    assert "V=[00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 01]" in lines[0]


def test_trace_recorder_limit_and_clear():
    recorder = TraceRecorder(4)
    for offset in range(4):
        recorder.record_step(_state(0x200 + offset * 2), 0x0000)
    assert len(list(recorder.entries(limit=2))) == 2

    recorder.clear()
    assert recorder.last_entry() is None
    assert list(recorder.format_entries()) == []


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        TraceRecorder(0)
