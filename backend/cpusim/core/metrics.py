# backend/cpusim/core/metrics.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .gantt import GanttBlock
from .process import Process, ProcessState


@dataclass(frozen=True)
class SimulationSummary:
    total_time: int
    busy_time: int
    cpu_utilization: float
    throughput: float
    completed: int
    avg_turnaround: float
    avg_waiting: float
    avg_response: float
    context_switches: int


@dataclass(frozen=True)
class SimulationEvent:
    time: int
    type: str  # ARRIVAL | START | PREEMPT | COMPLETE
    pid: str
    details: str


# same-timestamp ordering: arrivals, then completions, then preemptions, then starts
_EVENT_ORDER: Dict[str, int] = {"ARRIVAL": 1, "COMPLETE": 2, "PREEMPT": 3, "START": 4}


def count_context_switches(gantt: Sequence[GanttBlock]) -> int:
    busy = [b for b in gantt if not b.is_idle]
    if not busy:
        return 0

    switches = 0
    prev = busy[0].process_id

    for block in busy[1:]:
        if block.process_id != prev:
            switches += 1
        prev = block.process_id

    return switches


def _average(values: List[Optional[int]]) -> float:
    vals = [float(v) for v in values if v is not None]
    if not vals:
        return 0.0
    return sum(vals) / len(vals)


def summarize(processes: Sequence[Process], gantt: Sequence[GanttBlock]) -> SimulationSummary:
    total_time = gantt[-1].end if gantt else 0
    busy_time = sum(b.duration for b in gantt if not b.is_idle)
    completed = [p for p in processes if p.state == ProcessState.COMPLETED]

    cpu_util = (busy_time / total_time) * 100.0 if total_time > 0 else 0.0
    throughput = len(completed) / total_time if total_time > 0 else 0.0

    return SimulationSummary(
        total_time=total_time,
        busy_time=busy_time,
        cpu_utilization=cpu_util,
        throughput=throughput,
        completed=len(completed),
        avg_turnaround=_average([p.turnaround_time for p in completed]),
        avg_waiting=_average([p.waiting_time for p in completed]),
        avg_response=_average([p.response_time for p in completed]),
        context_switches=count_context_switches(gantt),
    )


def build_event_log(processes: Sequence[Process], gantt: Sequence[GanttBlock]) -> List[SimulationEvent]:
    """
    Chronological event log reconstructed from the process table and the Gantt log.

    A block that ends exactly at its process' completion time is a COMPLETE;
    any other end of a busy block is a PREEMPT.
    """
    by_id = {p.pid: p for p in processes}
    events: List[SimulationEvent] = []

    for p in processes:
        events.append(SimulationEvent(
            time=p.arrival_time,
            type="ARRIVAL",
            pid=p.pid,
            details=f"Arrived in Ready Queue (BT: {p.burst_time}, Prio: {p.priority})",
        ))

    for block in gantt:
        if block.is_idle:
            continue
        events.append(SimulationEvent(time=block.start, type="START", pid=block.process_id,
                                      details="Allocated to CPU"))
        proc = by_id.get(block.process_id)
        if proc is not None and proc.completion_time == block.end:
            events.append(SimulationEvent(time=block.end, type="COMPLETE", pid=block.process_id,
                                          details="Finished execution"))
        else:
            events.append(SimulationEvent(time=block.end, type="PREEMPT", pid=block.process_id,
                                          details="Preempted / Time Quantum Expired"))

    events.sort(key=lambda e: (e.time, _EVENT_ORDER[e.type]))
    return events
