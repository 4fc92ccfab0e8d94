# backend/cpusim/models/schemas.py
from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, model_validator

from ..core.gantt import GanttBlock
from ..core.metrics import SimulationEvent, SimulationSummary
from ..core.process import Process, ProcessState
from ..core.ranking import Algorithm
from ..core.scheduler import SimulationConfig
from ..settings import DEFAULT_TIME_QUANTUM

# ---------- Process models ----------

class ProcessInput(BaseModel):
    """Creation parameters; ids and colors are assigned by the registry."""
    arrival_time: int = Field(ge=0)
    burst_time: int = Field(ge=1)
    priority: int = 0
    deadline: Optional[int] = Field(default=None, ge=1)
    period: Optional[int] = Field(default=None, ge=1)


class ProcessModel(BaseModel):
    pid: str
    arrival_time: int = Field(ge=0)
    burst_time: int = Field(ge=1)
    priority: int = 0
    deadline: Optional[int] = Field(default=None, ge=1)
    period: Optional[int] = Field(default=None, ge=1)
    color: str = "#3b82f6"

    remaining_time: Optional[int] = Field(default=None, ge=0)
    state: ProcessState = ProcessState.WAITING
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    waiting_time: int = Field(default=0, ge=0)
    turnaround_time: int = Field(default=0, ge=0)
    response_time: Optional[int] = None

    @classmethod
    def from_core(cls, p: Process) -> "ProcessModel":
        return cls(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            priority=p.priority,
            deadline=p.deadline,
            period=p.period,
            color=p.color,
            remaining_time=p.remaining_time,
            state=p.state,
            start_time=p.start_time,
            completion_time=p.completion_time,
            waiting_time=p.waiting_time,
            turnaround_time=p.turnaround_time,
            response_time=p.response_time,
        )

    def to_core(self) -> Process:
        # response_time is derived, so it is not carried back
        return Process(
            pid=self.pid,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            priority=self.priority,
            deadline=self.deadline,
            period=self.period,
            color=self.color,
            remaining_time=self.burst_time if self.remaining_time is None else self.remaining_time,
            state=self.state,
            start_time=self.start_time,
            completion_time=self.completion_time,
            waiting_time=self.waiting_time,
            turnaround_time=self.turnaround_time,
        )


# ---------- Configuration ----------

class ConfigInput(BaseModel):
    algorithm: Algorithm = Algorithm.FCFS
    time_quantum: int = Field(default=DEFAULT_TIME_QUANTUM, ge=1)

    def to_core(self) -> SimulationConfig:
        return SimulationConfig(algorithm=self.algorithm, time_quantum=self.time_quantum)


class AlgorithmInfo(BaseModel):
    id: Algorithm
    label: str
    description: str
    preemptive: bool


class SimulationInput(BaseModel):
    config: ConfigInput = Field(default_factory=ConfigInput)
    processes: List[ProcessInput]

    @model_validator(mode="before")
    @classmethod
    def accept_flat(cls, data: Any) -> Any:
        """
        Accept either:
          - nested: { config: { algorithm, time_quantum }, processes: [...] }
          - flat:   { algorithm, time_quantum, processes: [...] }
        """
        if not isinstance(data, dict) or "config" in data:
            return data
        cfg = {k: data[k] for k in ("algorithm", "time_quantum") if k in data}
        rest = {k: v for k, v in data.items() if k not in ("algorithm", "time_quantum")}
        return {**rest, "config": cfg}


# ---------- Tick (stateless engine call) ----------

class TickRequest(BaseModel):
    tick: int = Field(default=0, ge=0)
    processes: List[ProcessModel]
    config: ConfigInput = Field(default_factory=ConfigInput)
    ready_queue: List[str] = Field(default_factory=list)
    active_id: Optional[str] = None
    quantum_elapsed: int = Field(default=0, ge=0)


class TickResponse(BaseModel):
    tick: int
    processes: List[ProcessModel]
    ready_queue: List[str]
    active_id: Optional[str] = None
    quantum_elapsed: int
    executed_id: Optional[str] = None


# ---------- Results ----------

class GanttBlockModel(BaseModel):
    process_id: str
    start: int
    end: int
    color: str

    @classmethod
    def from_core(cls, b: GanttBlock) -> "GanttBlockModel":
        return cls(process_id=b.process_id, start=b.start, end=b.end, color=b.color)


class SummaryModel(BaseModel):
    total_time: int = 0
    busy_time: int = 0
    cpu_utilization: float = 0.0
    throughput: float = 0.0
    completed: int = 0
    avg_turnaround: float = 0.0
    avg_waiting: float = 0.0
    avg_response: float = 0.0
    context_switches: int = 0

    @classmethod
    def from_core(cls, s: SimulationSummary) -> "SummaryModel":
        return cls(**asdict(s))


class EventModel(BaseModel):
    time: int
    type: str
    pid: str
    details: str

    @classmethod
    def from_core(cls, e: SimulationEvent) -> "EventModel":
        return cls(time=e.time, type=e.type, pid=e.pid, details=e.details)


class SimulationResult(BaseModel):
    config: ConfigInput
    finished: bool
    processes: List[ProcessModel] = Field(default_factory=list)
    gantt: List[GanttBlockModel] = Field(default_factory=list)
    summary: SummaryModel = Field(default_factory=SummaryModel)
    events: List[EventModel] = Field(default_factory=list)


class CompareRequest(BaseModel):
    processes: List[ProcessInput]
    algorithms: Optional[List[Algorithm]] = None
    time_quantum: int = Field(default=DEFAULT_TIME_QUANTUM, ge=1)


class CompareBundle(BaseModel):
    time_quantum: int
    results: Dict[str, SummaryModel] = Field(default_factory=dict)
    best_by_waiting: Optional[str] = None


# ---------- Sessions ----------

class SessionState(BaseModel):
    id: str
    tick: int
    config: ConfigInput
    finished: bool
    processes: List[ProcessModel] = Field(default_factory=list)
    ready_queue: List[str] = Field(default_factory=list)
    active_id: Optional[str] = None
    quantum_elapsed: int = 0
    gantt: List[GanttBlockModel] = Field(default_factory=list)


class SessionCreate(BaseModel):
    config: ConfigInput = Field(default_factory=ConfigInput)
    processes: List[ProcessInput] = Field(default_factory=list)
    preset: Optional[str] = Field(default=None, description="'default' or 'random'")
    seed: Optional[int] = None


class StepRequest(BaseModel):
    ticks: int = Field(default=1, ge=1)


class StepResponse(BaseModel):
    executed: List[Optional[str]]
    state: SessionState
