# backend/cpusim/routers/compare.py
from __future__ import annotations
from fastapi import APIRouter

from ..core.ranking import Algorithm
from ..models.schemas import CompareBundle, CompareRequest, ConfigInput, SummaryModel
from .simulate import run_workload

router = APIRouter(prefix="/compare", tags=["Comparison"])


@router.post("/", response_model=CompareBundle)
def compare(req: CompareRequest):
    """
    Run the same workload under each requested algorithm (all of them by default)
    and return one summary per algorithm.
    """
    algorithms = req.algorithms or list(Algorithm)
    results = {}
    for algo in algorithms:
        sim = run_workload(ConfigInput(algorithm=algo, time_quantum=req.time_quantum), req.processes)
        results[algo.value] = SummaryModel.from_core(sim.summary())

    best = min(results, key=lambda k: (results[k].avg_waiting, k)) if results else None
    return CompareBundle(time_quantum=req.time_quantum, results=results, best_by_waiting=best)
