"""Process resource limits from ``/proc/<pid>/limits``."""

from __future__ import annotations

from dataclasses import dataclass

from .common import IncompleteError, InternalError, parse_int

_UNITLESS = ("Max nice priority", "Max realtime priority")


def parse_limit_value(text: str) -> int | None:
    """Parse one limit value; ``unlimited`` becomes None."""
    if text == "unlimited":
        return None
    value = parse_int(text, 10)
    if not 0 <= value < (1 << 64):
        raise InternalError(f"{text!r} does not fit in a 64-bit unsigned integer")
    return value


@dataclass(frozen=True)
class Limit:
    """A soft and hard limit; None means unlimited."""

    soft_limit: int | None
    hard_limit: int | None

    @classmethod
    def _from_pair(cls, soft: str, hard: str) -> Limit:
        return cls(parse_limit_value(soft), parse_limit_value(hard))


@dataclass(frozen=True)
class Limits:
    """All resource limits of a process (see getrlimit(2))."""

    max_cpu_time: Limit
    max_file_size: Limit
    max_data_size: Limit
    max_stack_size: Limit
    max_core_file_size: Limit
    max_resident_set: Limit
    max_processes: Limit
    max_open_files: Limit
    max_locked_memory: Limit
    max_address_space: Limit
    max_file_locks: Limit
    max_pending_signals: Limit
    max_msgqueue_size: Limit
    max_nice_priority: Limit
    max_realtime_priority: Limit
    max_realtime_timeout: Limit


_NAMES = {
    "max_cpu_time": "Max cpu time",
    "max_file_size": "Max file size",
    "max_data_size": "Max data size",
    "max_stack_size": "Max stack size",
    "max_core_file_size": "Max core file size",
    "max_resident_set": "Max resident set",
    "max_processes": "Max processes",
    "max_open_files": "Max open files",
    "max_locked_memory": "Max locked memory",
    "max_address_space": "Max address space",
    "max_file_locks": "Max file locks",
    "max_pending_signals": "Max pending signals",
    "max_msgqueue_size": "Max msgqueue size",
    "max_nice_priority": "Max nice priority",
    "max_realtime_priority": "Max realtime priority",
    "max_realtime_timeout": "Max realtime timeout",
}


def parse_limits(text: str) -> Limits:
    """Parse the contents of a limits file."""
    pairs: dict[str, tuple[str, str]] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("Limit"):
            continue
        tokens = line.split()
        if line.startswith(_UNITLESS):
            # These two limits have no units column.
            if len(tokens) < 2:
                raise IncompleteError()
            soft, hard = tokens[-2], tokens[-1]
            name = " ".join(tokens[:-2])
        else:
            if len(tokens) < 3:
                raise IncompleteError()
            soft, hard = tokens[-3], tokens[-2]
            name = " ".join(tokens[:-3])
        pairs[name] = (soft, hard)

    values = {}
    for attr, name in _NAMES.items():
        pair = pairs.pop(name, None)
        if pair is None:
            raise IncompleteError()
        values[attr] = Limit._from_pair(*pair)
    return Limits(**values)