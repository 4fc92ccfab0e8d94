# backend/cpusim/routers/sessions.py
from __future__ import annotations
import logging
import uuid
from threading import Lock
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException

from ..core.errors import SchedulerError, UnknownProcessError
from ..core.presets import DEFAULT_PROCESSES, random_workload
from ..core.simulation import Simulation
from ..models.schemas import (
    ConfigInput,
    GanttBlockModel,
    ProcessInput,
    ProcessModel,
    SessionCreate,
    SessionState,
    SimulationResult,
    StepRequest,
    StepResponse,
)
from ..settings import MAX_SIMULATION_TICKS
from .simulate import simulation_result

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])

# In-memory only: sessions disappear when the process restarts
_sessions: Dict[str, Simulation] = {}
_sessions_lock = Lock()


def _get(session_id: str) -> Simulation:
    sim = _sessions.get(session_id)
    if sim is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return sim


def _state(session_id: str, sim: Simulation) -> SessionState:
    snap = sim.snapshot
    return SessionState(
        id=session_id,
        tick=snap.tick,
        config=ConfigInput(algorithm=sim.config.algorithm, time_quantum=sim.config.time_quantum),
        finished=sim.is_finished,
        processes=[ProcessModel.from_core(p) for p in snap.processes],
        ready_queue=list(snap.ready_queue),
        active_id=snap.active_id,
        quantum_elapsed=snap.quantum_elapsed,
        gantt=[GanttBlockModel.from_core(b) for b in sim.gantt],
    )


@router.post("/", response_model=SessionState, status_code=201)
def create_session(req: SessionCreate):
    if req.preset == "default":
        params = list(DEFAULT_PROCESSES)
    elif req.preset == "random":
        params = random_workload(seed=req.seed)
    elif req.preset is None:
        params = []
    else:
        raise HTTPException(status_code=422, detail=f"Unknown preset: {req.preset}")

    sim = Simulation(algorithm=req.config.algorithm, time_quantum=req.config.time_quantum)
    try:
        sim.load(params)
        sim.load(p.model_dump() for p in req.processes)
    except SchedulerError as e:
        raise HTTPException(status_code=422, detail=str(e))

    session_id = uuid.uuid4().hex
    with _sessions_lock:
        _sessions[session_id] = sim
    logger.info("session %s created with %d processes", session_id, len(sim.registry))
    return _state(session_id, sim)


@router.get("/{session_id}", response_model=SessionState)
def get_session(session_id: str):
    with _sessions_lock:
        return _state(session_id, _get(session_id))


@router.delete("/{session_id}", status_code=204)
def delete_session(session_id: str):
    with _sessions_lock:
        _get(session_id)
        del _sessions[session_id]


@router.post("/{session_id}/processes", response_model=ProcessModel, status_code=201)
def add_process(session_id: str, req: ProcessInput):
    with _sessions_lock:
        sim = _get(session_id)
        try:
            proc = sim.add_process(**req.model_dump())
        except SchedulerError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return ProcessModel.from_core(proc)


@router.delete("/{session_id}/processes/{pid}", response_model=SessionState)
def remove_process(session_id: str, pid: str):
    with _sessions_lock:
        sim = _get(session_id)
        try:
            sim.remove_process(pid)
        except UnknownProcessError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return _state(session_id, sim)


@router.put("/{session_id}/config", response_model=SessionState)
def set_config(session_id: str, req: ConfigInput):
    with _sessions_lock:
        sim = _get(session_id)
        sim.set_algorithm(req.algorithm, req.time_quantum)
        return _state(session_id, sim)


@router.post("/{session_id}/step", response_model=StepResponse)
def step_session(session_id: str, req: Optional[StepRequest] = None):
    ticks = req.ticks if req is not None else 1
    with _sessions_lock:
        sim = _get(session_id)
        executed: List[Optional[str]] = []
        for _ in range(ticks):
            if sim.is_finished or len(sim.registry) == 0:
                break
            executed.append(sim.step())
        return StepResponse(executed=executed, state=_state(session_id, sim))


@router.post("/{session_id}/run", response_model=SimulationResult)
def run_session(session_id: str):
    with _sessions_lock:
        sim = _get(session_id)
        sim.run(max_ticks=MAX_SIMULATION_TICKS)
        return simulation_result(sim)


@router.post("/{session_id}/reset", response_model=SessionState)
def reset_session(session_id: str):
    with _sessions_lock:
        sim = _get(session_id)
        sim.reset()
        return _state(session_id, sim)
