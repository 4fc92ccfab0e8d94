# backend/cpusim/settings.py
from __future__ import annotations
import os
from typing import List


def _parse_cors_origins(env_val: str | None) -> List[str]:
    if not env_val:
        return ["*"]
    items = [o.strip() for o in env_val.split(",")]
    # filter out empty strings
    items = [o for o in items if o]
    return items or ["*"]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


CORS_ORIGINS = _parse_cors_origins(os.getenv("CORS_ORIGINS", None))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_TIME_QUANTUM = _int_env("DEFAULT_TIME_QUANTUM", 2)
MAX_SIMULATION_TICKS = _int_env("MAX_SIMULATION_TICKS", 10000)
