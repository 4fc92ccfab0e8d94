# backend/cpusim/routers/config.py
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Query

from ..core.presets import DEFAULT_PROCESSES, random_workload
from ..core.ranking import Algorithm
from ..models.schemas import AlgorithmInfo, ProcessInput

router = APIRouter(prefix="/config", tags=["Configuration"])


@router.get("/algorithms", response_model=List[AlgorithmInfo])
def algorithms():
    return [
        AlgorithmInfo(id=a, label=a.label, description=a.description, preemptive=a.is_preemptive)
        for a in Algorithm
    ]


@router.get("/sample", response_model=List[ProcessInput])
def sample_config():
    return [ProcessInput(**p) for p in DEFAULT_PROCESSES]


@router.get("/random", response_model=List[ProcessInput])
def random_config(count: int = Query(default=5, ge=1, le=50), seed: Optional[int] = None):
    return [ProcessInput(**p) for p in random_workload(count, seed)]
