# backend/cpusim/core/errors.py
from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulation core."""


class ProcessValidationError(SchedulerError, ValueError):
    """Raised when a process is created with invalid parameters."""


class UnknownProcessError(SchedulerError, KeyError):
    """Raised when a process id does not exist in the registry."""

    def __init__(self, pid: str):
        super().__init__(pid)
        self.pid = pid

    def __str__(self) -> str:
        return f"Unknown process: {self.pid}"
