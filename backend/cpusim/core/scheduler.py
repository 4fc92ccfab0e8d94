# backend/cpusim/core/scheduler.py
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from .process import Process, ProcessState, id_number
from .ranking import Algorithm, rank, select

logger = logging.getLogger(__name__)


# =============================================================
# Engine inputs / outputs
# =============================================================

@dataclass(frozen=True)
class SimulationConfig:
    algorithm: Algorithm = Algorithm.FCFS
    time_quantum: int = 2

    def __post_init__(self):
        if not isinstance(self.algorithm, Algorithm):
            # accept the plain string form ("RR", "EDF", ...)
            object.__setattr__(self, "algorithm", Algorithm(self.algorithm))
        if self.time_quantum < 1:
            raise ValueError(f"time_quantum must be >= 1 (got {self.time_quantum})")


@dataclass(frozen=True)
class Snapshot:
    tick: int = 0
    processes: Tuple[Process, ...] = ()
    ready_queue: Tuple[str, ...] = ()
    active_id: Optional[str] = None
    quantum_elapsed: int = 0


@dataclass(frozen=True)
class TickResult:
    processes: Tuple[Process, ...]
    active_id: Optional[str]
    ready_queue: Tuple[str, ...]
    quantum_elapsed: int
    executed_id: Optional[str]


def _check_preconditions(current_tick: int, processes: Sequence[Process], quantum_elapsed: int) -> None:
    if current_tick < 0:
        raise ValueError(f"current_tick must be >= 0 (got {current_tick})")
    if quantum_elapsed < 0:
        raise ValueError(f"quantum_elapsed must be >= 0 (got {quantum_elapsed})")
    seen = set()
    for p in processes:
        if not isinstance(p, Process):
            raise TypeError(f"expected Process, got {type(p).__name__}")
        if p.pid in seen:
            raise ValueError(f"duplicate process id {p.pid}")
        seen.add(p.pid)


# =============================================================
# Tick engine
# =============================================================

def advance_tick(
    current_tick: int,
    processes: Iterable[Process],
    config: SimulationConfig,
    ready_queue: Sequence[str],
    active_id: Optional[str],
    quantum_elapsed: int,
) -> TickResult:
    """
    Advance the simulation by exactly one time unit.

    Pure: the inputs are never modified and the result shares no mutable
    state with them. Process records are frozen dataclasses; updated records
    are new instances built with dataclasses.replace().

    Steps:
      1. admit arrivals into the ready queue (ties by numeric id)
      2. decide who holds the CPU for this tick
      3. reconcile READY / RUNNING / WAITING states and waiting times
      4. execute one unit on the active process, completing it if done
      5. rebuild the ready queue for display (all algorithms except RR)
    """
    procs: List[Process] = list(processes)
    _check_preconditions(current_tick, procs, quantum_elapsed)

    algorithm = config.algorithm
    by_id: Dict[str, Process] = {p.pid: p for p in procs}

    def alive(pid: Optional[str]) -> bool:
        p = by_id.get(pid) if pid is not None else None
        return p is not None and p.state != ProcessState.COMPLETED

    # Vacated ids (removed or already completed) drop out silently
    queue: List[str] = [pid for pid in ready_queue if alive(pid)]
    cpu_id = active_id
    q_clock = quantum_elapsed
    if cpu_id is not None and not alive(cpu_id):
        logger.debug("tick %d: active %s vacated", current_tick, cpu_id)
        cpu_id = None
        q_clock = 0

    # 1. Arrival admission
    def admit(pids: List[str]) -> None:
        for pid in sorted(pids, key=lambda x: (id_number(x), x)):
            queue.append(pid)
            by_id[pid] = replace(by_id[pid], state=ProcessState.READY)

    admit([
        p.pid for p in procs
        if p.arrival_time == current_tick
        and p.state != ProcessState.COMPLETED
        and p.pid not in queue
    ])
    # registered after their arrival tick had already gone by
    admit([
        p.pid for p in procs
        if p.arrival_time < current_tick
        and p.state != ProcessState.COMPLETED
        and p.pid not in queue
        and p.pid != cpu_id
    ])

    # 2. Selection
    if algorithm == Algorithm.RR:
        if cpu_id is not None:
            running = by_id[cpu_id]
            if running.remaining_time > 0 and q_clock >= config.time_quantum:
                queue = [pid for pid in queue if pid != cpu_id]
                queue.append(cpu_id)
                logger.debug("tick %d: quantum expired for %s", current_tick, cpu_id)
                cpu_id = None
                q_clock = 0

        if cpu_id is None and queue:
            cpu_id = queue[0]
            q_clock = 0
    else:
        candidates = [
            p for p in by_id.values()
            if p.arrival_time <= current_tick and p.state != ProcessState.COMPLETED
        ]
        running = by_id.get(cpu_id) if cpu_id is not None else None

        if not algorithm.is_preemptive and running is not None and running.remaining_time > 0:
            pass  # non-preemptive: keep the current occupant
        else:
            chosen = select(candidates, algorithm, current_tick)
            new_id = chosen.pid if chosen is not None else None
            if new_id != cpu_id:
                if cpu_id is not None:
                    logger.debug("tick %d: %s preempted by %s", current_tick, cpu_id, new_id)
                q_clock = 0
            cpu_id = new_id

    # 3. State reconciliation
    for pid, p in list(by_id.items()):
        if p.state == ProcessState.COMPLETED:
            continue
        if pid == cpu_id:
            by_id[pid] = replace(
                p,
                state=ProcessState.RUNNING,
                start_time=current_tick if p.start_time is None else p.start_time,
            )
        elif p.arrival_time <= current_tick:
            by_id[pid] = replace(p, state=ProcessState.READY, waiting_time=p.waiting_time + 1)
        else:
            by_id[pid] = replace(p, state=ProcessState.WAITING)

    # 4. Execution
    executed_id = cpu_id
    if cpu_id is not None:
        p = by_id[cpu_id]
        remaining = p.remaining_time - 1
        q_clock += 1
        if remaining <= 0:
            completion = current_tick + 1
            by_id[cpu_id] = replace(
                p,
                remaining_time=0,
                state=ProcessState.COMPLETED,
                completion_time=completion,
                turnaround_time=completion - p.arrival_time,
            )
            logger.debug("tick %d: %s completed at %d", current_tick, cpu_id, completion)
            queue = [pid for pid in queue if pid != cpu_id]
            cpu_id = None
            q_clock = 0
        else:
            by_id[cpu_id] = replace(p, remaining_time=remaining)

    # 5. Ready queue for display
    if algorithm != Algorithm.RR:
        waiting = [p for p in by_id.values() if p.state == ProcessState.READY and p.pid != cpu_id]
        queue = [p.pid for p in rank(waiting, algorithm, current_tick)]

    return TickResult(
        processes=tuple(by_id[p.pid] for p in procs),
        active_id=cpu_id,
        ready_queue=tuple(queue),
        quantum_elapsed=q_clock,
        executed_id=executed_id,
    )


def step(snapshot: Snapshot, config: SimulationConfig) -> Tuple[Snapshot, Optional[str]]:
    """Snapshot-in, snapshot-out wrapper around advance_tick()."""
    result = advance_tick(
        snapshot.tick,
        snapshot.processes,
        config,
        snapshot.ready_queue,
        snapshot.active_id,
        snapshot.quantum_elapsed,
    )
    nxt = Snapshot(
        tick=snapshot.tick + 1,
        processes=result.processes,
        ready_queue=result.ready_queue,
        active_id=result.active_id,
        quantum_elapsed=result.quantum_elapsed,
    )
    return nxt, result.executed_id


def all_completed(processes: Iterable[Process]) -> bool:
    return all(p.state == ProcessState.COMPLETED for p in processes)
