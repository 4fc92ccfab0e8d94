# backend/cpusim/routers/simulate.py
from __future__ import annotations
import logging
from typing import Iterable

from fastapi import APIRouter, HTTPException

from ..core.errors import SchedulerError
from ..core.scheduler import advance_tick
from ..core.simulation import Simulation
from ..models.schemas import (
    ConfigInput,
    EventModel,
    GanttBlockModel,
    ProcessInput,
    ProcessModel,
    SimulationInput,
    SimulationResult,
    SummaryModel,
    TickRequest,
    TickResponse,
)
from ..settings import MAX_SIMULATION_TICKS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulate", tags=["Simulation"])


def run_workload(config: ConfigInput, processes: Iterable[ProcessInput]) -> Simulation:
    """
    Build a fresh Simulation for the workload and step it to completion.

    Raises:
      - HTTPException(422) when a process is rejected by the registry
    """
    sim = Simulation(algorithm=config.algorithm, time_quantum=config.time_quantum)
    try:
        sim.load(p.model_dump() for p in processes)
    except SchedulerError as e:
        raise HTTPException(status_code=422, detail=str(e))
    sim.run(max_ticks=MAX_SIMULATION_TICKS)
    return sim


def simulation_result(sim: Simulation) -> SimulationResult:
    return SimulationResult(
        config=ConfigInput(algorithm=sim.config.algorithm, time_quantum=sim.config.time_quantum),
        finished=sim.is_finished,
        processes=[ProcessModel.from_core(p) for p in sim.processes],
        gantt=[GanttBlockModel.from_core(b) for b in sim.gantt],
        summary=SummaryModel.from_core(sim.summary()),
        events=[EventModel.from_core(e) for e in sim.events()],
    )


@router.post("/tick", response_model=TickResponse)
def tick(req: TickRequest):
    """
    Stateless engine call: the caller owns the snapshot and gets the next one back.
    """
    try:
        result = advance_tick(
            req.tick,
            [p.to_core() for p in req.processes],
            req.config.to_core(),
            req.ready_queue,
            req.active_id,
            req.quantum_elapsed,
        )
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid snapshot: {e}")

    return TickResponse(
        tick=req.tick + 1,
        processes=[ProcessModel.from_core(p) for p in result.processes],
        ready_queue=list(result.ready_queue),
        active_id=result.active_id,
        quantum_elapsed=result.quantum_elapsed,
        executed_id=result.executed_id,
    )


@router.post("/run", response_model=SimulationResult)
def run(payload: SimulationInput):
    """
    Run a workload to completion.

    Accepts the nested { config, processes } form or the flat
    { algorithm, time_quantum, processes } form.
    """
    sim = run_workload(payload.config, payload.processes)
    logger.info(
        "run %s with %d processes finished in %d ticks",
        payload.config.algorithm.value, len(payload.processes), sim.tick,
    )
    return simulation_result(sim)
