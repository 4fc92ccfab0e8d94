# backend/cpusim/core/gantt.py
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

IDLE = "IDLE"
IDLE_COLOR = "#1e293b"


@dataclass(frozen=True)
class GanttBlock:
    """Half-open interval [start, end) during which one occupant held the CPU."""
    process_id: str
    start: int
    end: int
    color: str = IDLE_COLOR

    @property
    def is_idle(self) -> bool:
        return self.process_id == IDLE

    @property
    def duration(self) -> int:
        return self.end - self.start


def record_tick(
    log: Sequence[GanttBlock],
    tick: int,
    executed_id: Optional[str],
    color: Optional[str] = None,
) -> List[GanttBlock]:
    """
    Return a new log with the occupant of `tick` appended.

    Consecutive ticks of the same occupant (or of idleness) extend the last
    block instead of opening a new one.
    """
    occupant = executed_id or IDLE
    blocks = list(log)
    last = blocks[-1] if blocks else None

    if last is not None and last.process_id == occupant and last.end == tick:
        blocks[-1] = replace(last, end=tick + 1)
        return blocks

    block_color = IDLE_COLOR if occupant == IDLE else (color or IDLE_COLOR)
    blocks.append(GanttBlock(process_id=occupant, start=tick, end=tick + 1, color=block_color))
    return blocks


def expand(log: Sequence[GanttBlock]) -> List[str]:
    """Per-tick occupant list, e.g. ["P1", "P1", "IDLE", "P2"]."""
    out: List[str] = []
    for block in log:
        out.extend([block.process_id] * block.duration)
    return out


def as_tuples(log: Sequence[GanttBlock], include_idle: bool = False) -> List[Tuple[str, int, int]]:
    return [(b.process_id, b.start, b.end) for b in log if include_idle or not b.is_idle]
