# backend/cpusim/core/simulation.py
from __future__ import annotations
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional
import logging

from .gantt import GanttBlock, record_tick
from .errors import ProcessValidationError
from .metrics import SimulationEvent, SimulationSummary, build_event_log, summarize
from .process import Process, ProcessRegistry
from .ranking import Algorithm
from .scheduler import SimulationConfig, Snapshot, all_completed, step

logger = logging.getLogger(__name__)


class Simulation:
    """
    Driver around the tick engine.

    Owns the process registry, the current snapshot, the algorithm config and
    the Gantt log. Each step() hands the snapshot to the engine and keeps the
    snapshot it returns; the engine itself holds no state.
    """

    def __init__(self, algorithm: Algorithm = Algorithm.FCFS, time_quantum: int = 2):
        self.registry = ProcessRegistry()
        self.config = SimulationConfig(algorithm=algorithm, time_quantum=time_quantum)
        self._snapshot = Snapshot()
        self._gantt: List[GanttBlock] = []

    # ---------- processes ----------

    def add_process(
        self,
        arrival_time: int,
        burst_time: int,
        priority: int = 0,
        deadline: Optional[int] = None,
        period: Optional[int] = None,
    ) -> Process:
        if arrival_time < self._snapshot.tick:
            raise ProcessValidationError(
                f"arrival_time {arrival_time} is before the current tick {self._snapshot.tick}"
            )
        proc = self.registry.create_process(arrival_time, burst_time, priority, deadline, period)
        self._sync_processes()
        return proc

    def load(self, processes: Iterable[Dict[str, Any]]) -> List[Process]:
        return [self.add_process(**params) for params in processes]

    def remove_process(self, pid: str) -> Process:
        proc = self.registry.remove_process(pid)
        snap = self._snapshot
        active_id = snap.active_id
        quantum_elapsed = snap.quantum_elapsed
        if active_id == pid:
            active_id = None
            quantum_elapsed = 0
        self._snapshot = replace(
            snap,
            processes=tuple(self.registry.snapshot()),
            ready_queue=tuple(x for x in snap.ready_queue if x != pid),
            active_id=active_id,
            quantum_elapsed=quantum_elapsed,
        )
        return proc

    def _sync_processes(self) -> None:
        self._snapshot = replace(self._snapshot, processes=tuple(self.registry.snapshot()))

    # ---------- config ----------

    def set_algorithm(self, algorithm: Algorithm, time_quantum: Optional[int] = None) -> None:
        """Switch algorithm and rewind to tick 0, keeping the process definitions."""
        quantum = self.config.time_quantum if time_quantum is None else time_quantum
        self.config = SimulationConfig(algorithm=algorithm, time_quantum=quantum)
        # a trajectory never mixes two algorithms
        self.reset()

    # ---------- stepping ----------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def tick(self) -> int:
        return self._snapshot.tick

    @property
    def gantt(self) -> List[GanttBlock]:
        return list(self._gantt)

    @property
    def processes(self) -> List[Process]:
        return list(self._snapshot.processes)

    @property
    def is_finished(self) -> bool:
        return len(self.registry) > 0 and all_completed(self._snapshot.processes)

    def step(self) -> Optional[str]:
        """Advance one tick. Returns the executed id (None when idle or finished)."""
        if self.is_finished or len(self.registry) == 0:
            return None

        tick = self._snapshot.tick
        nxt, executed_id = step(self._snapshot, self.config)
        self._snapshot = nxt
        self.registry.replace_all(nxt.processes)

        color = self.registry.get(executed_id).color if executed_id else None
        self._gantt = record_tick(self._gantt, tick, executed_id, color)

        if self.is_finished:
            logger.info("simulation finished at tick %d (%s)", nxt.tick, self.config.algorithm.value)
        return executed_id

    def run(self, max_ticks: int = 10000) -> int:
        """Step until every process completed or max_ticks steps were taken."""
        steps = 0
        while steps < max_ticks and len(self.registry) > 0 and not self.is_finished:
            self.step()
            steps += 1
        if not self.is_finished and len(self.registry) > 0:
            logger.warning("simulation stopped after %d ticks without finishing", steps)
        return steps

    def reset(self) -> None:
        """Rewind to tick 0, keeping the process definitions."""
        self.registry.reset_runtime()
        self._snapshot = Snapshot(processes=tuple(self.registry.snapshot()))
        self._gantt = []

    def clear(self) -> None:
        self.registry.clear()
        self._snapshot = Snapshot()
        self._gantt = []

    # ---------- reporting ----------

    def summary(self) -> SimulationSummary:
        return summarize(self._snapshot.processes, self._gantt)

    def events(self) -> List[SimulationEvent]:
        return build_event_log(self._snapshot.processes, self._gantt)
