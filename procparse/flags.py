"""Kernel process flags, coredump filter flags and process states."""

from __future__ import annotations

import enum

from .common import InternalError, ProcError


class StatFlags(enum.IntFlag):
    """Kernel flags for a process, as found in the ``flags`` field of ``stat``."""

    PF_IDLE = 0x0000_0002
    PF_EXITING = 0x0000_0004
    PF_EXITPIDONE = 0x0000_0008
    PF_VCPU = 0x0000_0010
    PF_WQ_WORKER = 0x0000_0020
    PF_FORKNOEXEC = 0x0000_0040
    PF_MCE_PROCESS = 0x0000_0080
    PF_SUPERPRIV = 0x0000_0100
    PF_DUMPCORE = 0x0000_0200
    PF_SIGNALED = 0x0000_0400
    PF_MEMALLOC = 0x0000_0800
    PF_NPROC_EXCEEDED = 0x0000_1000
    PF_USED_MATH = 0x0000_2000
    PF_USED_ASYNC = 0x0000_4000
    PF_NOFREEZE = 0x0000_8000
    PF_FROZEN = 0x0001_0000
    PF_KSWAPD = 0x0002_0000
    PF_MEMALLOC_NOFS = 0x0004_0000
    PF_MEMALLOC_NOIO = 0x0008_0000
    PF_LESS_THROTTLE = 0x0010_0000
    PF_KTHREAD = 0x0020_0000
    PF_RANDOMIZE = 0x0040_0000
    PF_SWAPWRITE = 0x0080_0000
    PF_MEMSTALL = 0x0100_0000
    PF_UMH = 0x0200_0000
    PF_NO_SETAFFINITY = 0x0400_0000
    PF_MCE_EARLY = 0x0800_0000
    PF_MEMALLOC_NOCMA = 0x1000_0000
    PF_MUTEX_TESTER = 0x2000_0000
    PF_FREEZER_SKIP = 0x4000_0000
    PF_SUSPEND_TASK = 0x8000_0000


class CoredumpFlags(enum.IntFlag):
    """Flags of ``/proc/<pid>/coredump_filter``."""

    ANONYMOUS_PRIVATE_MAPPINGS = 0x01
    ANONYMOUS_SHARED_MAPPINGS = 0x02
    FILEBACKED_PRIVATE_MAPPINGS = 0x04
    FILEBACKED_SHARED_MAPPINGS = 0x08
    ELF_HEADERS = 0x10
    PROVATE_HUGEPAGES = 0x20
    SHARED_HUGEPAGES = 0x40
    PRIVATE_DAX_PAGES = 0x80
    SHARED_DAX_PAGES = 0x100


class ProcState(enum.Enum):
    """The state of a process, keyed by its one-letter code."""

    RUNNING = "R"
    SLEEPING = "S"
    WAITING = "D"
    ZOMBIE = "Z"
    STOPPED = "T"
    TRACING = "t"
    DEAD = "X"
    WAKEKILL = "K"
    WAKING = "W"
    PARKED = "P"
    IDLE = "I"

    @classmethod
    def from_char(cls, char: str) -> ProcState | None:
        """The state for a one-letter code, or None if the code is not known."""
        if char == "x":
            char = "X"
        try:
            return cls(char)
        except ValueError:
            return None

    @classmethod
    def parse(cls, text: str) -> ProcState:
        """Parse a state from the first character of ``text``."""
        if not text:
            raise ProcError("empty string")
        state = cls.from_char(text[0])
        if state is None:
            raise InternalError("failed to convert")
        return state