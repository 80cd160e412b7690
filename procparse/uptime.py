"""System uptime from ``/proc/uptime``."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta

from .common import IncompleteError, InternalError


def _centisecond_duration(seconds: float) -> timedelta:
    whole = math.trunc(seconds)
    centis = math.floor((seconds - whole) * 100.0 + 0.5)
    return timedelta(seconds=whole, microseconds=centis * 10_000)


@dataclass(frozen=True)
class Uptime:
    """Seconds since boot, and seconds all cores have spent idle."""

    uptime: float
    idle: float

    def uptime_duration(self) -> timedelta:
        """The uptime (including time spent in suspend), to the centisecond."""
        return _centisecond_duration(self.uptime)

    def idle_duration(self) -> timedelta:
        """The sum of idle time over all cores, to the centisecond."""
        return _centisecond_duration(self.idle)


def _parse_float(text: str) -> float:
    if not text or any(c.isspace() or c == "_" for c in text):
        raise InternalError(f"failed to parse {text!r} as a number")
    try:
        return float(text)
    except ValueError:
        raise InternalError(f"failed to parse {text!r} as a number") from None


def parse_uptime(text: str | bytes) -> Uptime:
    """Parse the contents of the uptime file."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    tokens = text.strip().split(" ")
    if len(tokens) < 2:
        raise IncompleteError()
    return Uptime(_parse_float(tokens[0]), _parse_float(tokens[1]))