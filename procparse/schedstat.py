"""Scheduler statistics from ``/proc/<pid>/schedstat``."""

from __future__ import annotations

from dataclasses import dataclass

from .common import IncompleteError, InternalError, parse_int


@dataclass(frozen=True)
class Schedstat:
    """Scheduler statistics of a process."""

    sum_exec_runtime: int
    """Time spent on the CPU, in nanoseconds."""
    run_delay: int
    """Time spent waiting on a runqueue, in nanoseconds."""
    pcount: int
    """Number of timeslices run on this CPU."""


def _parse_u64(text: str) -> int:
    value = parse_int(text, 10)
    if not 0 <= value < (1 << 64):
        raise InternalError(f"{text!r} does not fit in a 64-bit unsigned integer")
    return value


def parse_schedstat(text: str) -> Schedstat:
    """Parse the contents of a schedstat file."""
    tokens = text.split()
    if len(tokens) < 3:
        raise IncompleteError()
    sum_exec_runtime, run_delay, pcount = (_parse_u64(t) for t in tokens[:3])
    return Schedstat(sum_exec_runtime, run_delay, pcount)