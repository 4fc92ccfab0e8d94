# backend/cpusim/core/ranking.py
from __future__ import annotations
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import math

from .process import Process, id_number


class Algorithm(str, Enum):
    FCFS = "FCFS"
    SJF = "SJF"
    SRTF = "SRTF"
    RR = "RR"
    PRIORITY_NP = "PRIORITY_NP"
    PRIORITY_P = "PRIORITY_P"
    HRRN = "HRRN"
    EDF = "EDF"
    RMS = "RMS"

    @property
    def is_preemptive(self) -> bool:
        return self in PREEMPTIVE

    @property
    def label(self) -> str:
        return ALGORITHM_INFO[self][0]

    @property
    def description(self) -> str:
        return ALGORITHM_INFO[self][1]


PREEMPTIVE = frozenset({Algorithm.SRTF, Algorithm.PRIORITY_P, Algorithm.EDF, Algorithm.RMS})
NON_PREEMPTIVE = frozenset({Algorithm.FCFS, Algorithm.SJF, Algorithm.PRIORITY_NP, Algorithm.HRRN})

ALGORITHM_INFO: Dict[Algorithm, Tuple[str, str]] = {
    Algorithm.FCFS: ("First-Come, First-Served", "Simple queue based on arrival time."),
    Algorithm.SJF: ("Shortest Job First (Non-Preemptive)", "Selects process with smallest burst time."),
    Algorithm.SRTF: ("Shortest Remaining Time First", "Preemptive version of SJF."),
    Algorithm.RR: ("Round Robin", "Fixed time quantum cycler."),
    Algorithm.PRIORITY_NP: ("Priority (Non-Preemptive)", "Highest priority runs to completion."),
    Algorithm.PRIORITY_P: ("Priority (Preemptive)", "Highest priority interrupts running process."),
    Algorithm.HRRN: ("Highest Response Ratio Next", "Dynamic priority based on waiting time."),
    Algorithm.EDF: ("Earliest Deadline First", "Dynamic priority based on closest deadline."),
    Algorithm.RMS: ("Rate Monotonic Scheduling", "Static priority based on period duration."),
}


# =============================================================
# Ranking strategies
# =============================================================
# Each key is a pure function of (process, current tick). Sorting ascending
# puts the process that should run next first; every key ends with
# (arrival, numeric id) so ties are deterministic.

RankKey = Callable[[Process, int], tuple]


def response_ratio(p: Process, current_tick: int) -> float:
    waited = current_tick - p.arrival_time - (p.burst_time - p.remaining_time)
    return 1 + waited / p.burst_time


def _tiebreak(p: Process) -> Tuple[int, int, str]:
    return (p.arrival_time, id_number(p.pid), p.pid)


def _or_inf(value: Optional[int]) -> float:
    return math.inf if value is None else value


def _fcfs(p: Process, tick: int) -> tuple:
    return _tiebreak(p)


def _shortest(p: Process, tick: int) -> tuple:
    return (p.remaining_time, *_tiebreak(p))


def _priority(p: Process, tick: int) -> tuple:
    return (p.priority, *_tiebreak(p))


def _hrrn(p: Process, tick: int) -> tuple:
    # higher ratio wins, so negate for an ascending sort
    return (-response_ratio(p, tick), *_tiebreak(p))


def _edf(p: Process, tick: int) -> tuple:
    return (_or_inf(p.deadline), *_tiebreak(p))


def _rms(p: Process, tick: int) -> tuple:
    return (_or_inf(p.period), *_tiebreak(p))


RANKING: Dict[Algorithm, RankKey] = {
    Algorithm.FCFS: _fcfs,
    Algorithm.SJF: _shortest,
    Algorithm.SRTF: _shortest,
    Algorithm.PRIORITY_NP: _priority,
    Algorithm.PRIORITY_P: _priority,
    Algorithm.HRRN: _hrrn,
    Algorithm.EDF: _edf,
    Algorithm.RMS: _rms,
}


def rank(candidates: Iterable[Process], algorithm: Algorithm, current_tick: int) -> List[Process]:
    """Candidates ordered best-first. Round Robin has no ranking."""
    key = RANKING.get(algorithm)
    if key is None:
        raise ValueError(f"{algorithm.value} does not use a ranking strategy")
    return sorted(candidates, key=lambda p: key(p, current_tick))


def select(candidates: Iterable[Process], algorithm: Algorithm, current_tick: int) -> Optional[Process]:
    ranked = rank(candidates, algorithm, current_tick)
    return ranked[0] if ranked else None
