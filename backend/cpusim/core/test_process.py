# backend/cpusim/core/test_process.py
from dataclasses import replace

import pytest

from cpusim.core.errors import ProcessValidationError, UnknownProcessError
from cpusim.core.process import PROCESS_COLORS, ProcessRegistry, ProcessState, id_number


def test_create_assigns_fresh_runtime_state():
    reg = ProcessRegistry()
    p = reg.create_process(arrival_time=2, burst_time=5, priority=1, deadline=9, period=7)

    assert p.pid == "P1"
    assert p.remaining_time == 5
    assert p.state == ProcessState.WAITING
    assert p.start_time is None
    assert p.completion_time is None
    assert p.waiting_time == 0
    assert p.turnaround_time == 0
    assert p.response_time is None
    assert p.color == PROCESS_COLORS[0]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"arrival_time": 0, "burst_time": 0},
        {"arrival_time": 0, "burst_time": -3},
        {"arrival_time": -1, "burst_time": 2},
        {"arrival_time": 0, "burst_time": 2, "deadline": 0},
        {"arrival_time": 0, "burst_time": 2, "period": 0},
    ],
)
def test_invalid_parameters_rejected(kwargs):
    reg = ProcessRegistry()
    with pytest.raises(ProcessValidationError):
        reg.create_process(**kwargs)
    assert len(reg) == 0


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        ProcessRegistry().create_process(0, 0)


def test_ids_are_never_reused():
    reg = ProcessRegistry()
    reg.create_process(0, 1)
    reg.create_process(0, 1)
    reg.remove_process("P2")
    assert reg.create_process(0, 1).pid == "P3"
    assert [p.pid for p in reg] == ["P1", "P3"]


def test_colors_cycle_by_creation_index():
    reg = ProcessRegistry()
    procs = [reg.create_process(0, 1) for _ in range(len(PROCESS_COLORS) + 1)]
    assert procs[-1].color == PROCESS_COLORS[0]
    assert procs[1].color == PROCESS_COLORS[1]


def test_remove_unknown_raises():
    reg = ProcessRegistry()
    with pytest.raises(UnknownProcessError):
        reg.remove_process("P7")
    with pytest.raises(KeyError):
        reg.get("P7")


def test_replace_all_requires_same_ids():
    reg = ProcessRegistry()
    p1 = reg.create_process(0, 3)
    reg.create_process(0, 3)
    with pytest.raises(ValueError):
        reg.replace_all([p1])


def test_reset_runtime_restores_fresh_state():
    reg = ProcessRegistry()
    p = reg.create_process(0, 3)
    done = replace(p, remaining_time=0, state=ProcessState.COMPLETED,
                   start_time=0, completion_time=3, turnaround_time=3)
    reg.replace_all([done])
    assert reg.get("P1").is_completed

    reg.reset_runtime()
    again = reg.get("P1")
    assert again.remaining_time == 3
    assert again.state == ProcessState.WAITING
    assert again.completion_time is None


def test_id_number():
    assert id_number("P12") == 12
    assert id_number("proc") == -1
