# backend/cpusim/core/presets.py
from __future__ import annotations
from typing import Any, Dict, List, Optional
import random

# arrival, burst, priority, deadline, period
DEFAULT_PROCESSES: List[Dict[str, Any]] = [
    {"arrival_time": 0, "burst_time": 5, "priority": 2, "deadline": 10, "period": 10},
    {"arrival_time": 1, "burst_time": 3, "priority": 1, "deadline": 5, "period": 5},
    {"arrival_time": 2, "burst_time": 8, "priority": 3, "deadline": 20, "period": 20},
    {"arrival_time": 3, "burst_time": 6, "priority": 4, "deadline": 15, "period": 15},
]


def random_workload(count: int = 5, seed: Optional[int] = None) -> List[Dict[str, Any]]:
    """Random process parameters, sorted by arrival time. Same seed, same workload."""
    rng = random.Random(seed)
    procs = [
        {
            "arrival_time": rng.randint(0, 7),
            "burst_time": rng.randint(2, 9),
            "priority": rng.randint(1, 5),
            "deadline": rng.randint(5, 24),
            "period": rng.randint(5, 19),
        }
        for _ in range(max(0, int(count)))
    ]
    procs.sort(key=lambda p: p["arrival_time"])
    return procs
