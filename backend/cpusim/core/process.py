# backend/cpusim/core/process.py
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional
import logging
import re

from .errors import ProcessValidationError, UnknownProcessError

logger = logging.getLogger(__name__)

PROCESS_COLORS = [
    "#3b82f6",  # blue
    "#ef4444",  # red
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#8b5cf6",  # violet
    "#ec4899",  # pink
    "#06b6d4",  # cyan
    "#f97316",  # orange
    "#84cc16",  # lime
    "#d946ef",  # fuchsia
]

_ID_SUFFIX = re.compile(r"(\d+)$")


class ProcessState(str, Enum):
    WAITING = "WAITING"
    READY = "READY"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"


def id_number(pid: str) -> int:
    """Numeric suffix of a process id ("P12" -> 12); ids without one sort first."""
    m = _ID_SUFFIX.search(pid)
    return int(m.group(1)) if m else -1


# =============================================================
# Process record
# =============================================================

@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0
    deadline: Optional[int] = None
    period: Optional[int] = None
    color: str = PROCESS_COLORS[0]

    # Dynamic state, only changed by the tick engine
    remaining_time: Optional[int] = None
    state: ProcessState = ProcessState.WAITING
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    waiting_time: int = 0
    turnaround_time: int = 0

    def __post_init__(self):
        if self.remaining_time is None:
            # a fresh record has all of its burst left
            object.__setattr__(self, "remaining_time", self.burst_time)

    @property
    def response_time(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return self.start_time - self.arrival_time

    @property
    def is_completed(self) -> bool:
        return self.state == ProcessState.COMPLETED

    def fresh(self) -> "Process":
        """Same static parameters, dynamic state as right after creation."""
        return replace(
            self,
            remaining_time=self.burst_time,
            state=ProcessState.WAITING,
            start_time=None,
            completion_time=None,
            waiting_time=0,
            turnaround_time=0,
        )


def validate_parameters(
    arrival_time: int,
    burst_time: int,
    deadline: Optional[int] = None,
    period: Optional[int] = None,
) -> None:
    if burst_time < 1:
        raise ProcessValidationError(f"burst_time must be >= 1 (got {burst_time})")
    if arrival_time < 0:
        raise ProcessValidationError(f"arrival_time must be >= 0 (got {arrival_time})")
    if deadline is not None and deadline < 1:
        raise ProcessValidationError(f"deadline must be >= 1 when given (got {deadline})")
    if period is not None and period < 1:
        raise ProcessValidationError(f"period must be >= 1 when given (got {period})")


# =============================================================
# Registry
# =============================================================

class ProcessRegistry:
    """
    Ownership container for the canonical set of processes.

    Ids are handed out from a monotonic counter, so a removed id is never
    given to a later process. Insertion order is preserved.
    """

    def __init__(self, id_prefix: str = "P"):
        self.id_prefix = id_prefix
        self._processes: Dict[str, Process] = {}
        self._created = 0

    def create_process(
        self,
        arrival_time: int,
        burst_time: int,
        priority: int = 0,
        deadline: Optional[int] = None,
        period: Optional[int] = None,
    ) -> Process:
        validate_parameters(arrival_time, burst_time, deadline, period)

        index = self._created
        self._created += 1
        proc = Process(
            pid=f"{self.id_prefix}{index + 1}",
            arrival_time=int(arrival_time),
            burst_time=int(burst_time),
            priority=int(priority),
            deadline=deadline,
            period=period,
            color=PROCESS_COLORS[index % len(PROCESS_COLORS)],
            remaining_time=int(burst_time),
        )
        self._processes[proc.pid] = proc
        logger.debug("created %s (arrival=%d, burst=%d)", proc.pid, arrival_time, burst_time)
        return proc

    def remove_process(self, pid: str) -> Process:
        try:
            proc = self._processes.pop(pid)
        except KeyError:
            raise UnknownProcessError(pid) from None
        logger.debug("removed %s", pid)
        return proc

    def get(self, pid: str) -> Process:
        try:
            return self._processes[pid]
        except KeyError:
            raise UnknownProcessError(pid) from None

    def __contains__(self, pid: object) -> bool:
        return pid in self._processes

    def __iter__(self) -> Iterator[Process]:
        return iter(list(self._processes.values()))

    def __len__(self) -> int:
        return len(self._processes)

    def snapshot(self) -> List[Process]:
        # Process is frozen, so handing out the records never aliases mutable state
        return list(self._processes.values())

    def replace_all(self, processes: Iterable[Process]) -> None:
        """Write back engine output. Ids must match the registered set."""
        updated = {p.pid: p for p in processes}
        if set(updated) != set(self._processes):
            raise ValueError("replace_all() expects exactly the registered process ids")
        self._processes = {pid: updated[pid] for pid in self._processes}

    def reset_runtime(self) -> None:
        self._processes = {pid: p.fresh() for pid, p in self._processes.items()}

    def clear(self) -> None:
        self._processes.clear()
