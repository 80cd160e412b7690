"""Process status from ``/proc/<pid>/stat``."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta

from .common import IncompleteError, InternalError, parse_int
from .flags import ProcState, StatFlags

_KNOWN_STAT_FLAGS = 0
for _flag in StatFlags:
    _KNOWN_STAT_FLAGS |= int(_flag)
del _flag


def _check_range(text: str, value: int, bits: int, signed: bool) -> int:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1))
    else:
        low, high = 0, 1 << bits
    if not low <= value < high:
        kind = "signed" if signed else "unsigned"
        raise InternalError(f"{text!r} does not fit in a {bits}-bit {kind} integer")
    return value


def _parse(text: str, bits: int, signed: bool) -> int:
    return _check_range(text, parse_int(text, 10), bits, signed)


def _required(tokens: Iterator[str], bits: int, signed: bool) -> int:
    token = next(tokens, None)
    if token is None:
        raise IncompleteError()
    return _parse(token, bits, signed)


def _optional(tokens: Iterator[str], bits: int, signed: bool) -> int | None:
    token = next(tokens, None)
    if token is None:
        return None
    return _parse(token, bits, signed)


@dataclass
class Stat:
    """Status information about a process.

    Fields that older kernels do not provide are None when absent.
    """

    pid: int
    comm: str
    state: str
    ppid: int
    pgrp: int
    session: int
    tty_nr: int
    tpgid: int
    flags: int
    minflt: int
    cminflt: int
    majflt: int
    cmajflt: int
    utime: int
    stime: int
    cutime: int
    cstime: int
    priority: int
    nice: int
    num_threads: int
    itrealvalue: int
    starttime: int
    vsize: int
    rss: int
    rsslim: int
    startcode: int
    endcode: int
    startstack: int
    kstkesp: int
    kstkeip: int
    signal: int
    blocked: int
    sigignore: int
    sigcatch: int
    wchan: int
    nswap: int
    cnswap: int
    exit_signal: int | None = None
    processor: int | None = None
    rt_priority: int | None = None
    policy: int | None = None
    delayacct_blkio_ticks: int | None = None
    guest_time: int | None = None
    cguest_time: int | None = None
    start_data: int | None = None
    end_data: int | None = None
    start_brk: int | None = None
    arg_start: int | None = None
    arg_end: int | None = None
    env_start: int | None = None
    env_end: int | None = None
    exit_code: int | None = None

    def proc_state(self) -> ProcState:
        """The process state as an enum member."""
        state = ProcState.from_char(self.state)
        if state is None:
            raise InternalError(f"{self.state!r} is not a recognized process state")
        return state

    def tty_device(self) -> tuple[int, int]:
        """The controlling terminal decoded into ``(major, minor)``."""
        major = (self.tty_nr & 0xFFF00) >> 8
        minor = (self.tty_nr & 0x000FF) | ((self.tty_nr >> 12) & 0xFFF00)
        return major, minor

    def stat_flags(self) -> StatFlags:
        """The kernel flags word as a bitfield; unknown bits are an error."""
        if self.flags & ~_KNOWN_STAT_FLAGS:
            raise InternalError(f"Can't construct flags bitfield from {self.flags!r}")
        return StatFlags(self.flags)

    def start_datetime(self, boot_time: datetime, ticks_per_second: int) -> datetime:
        """The time the process started, given the boot time and the clock tick rate."""
        seconds_since_boot = self.starttime / ticks_per_second
        return boot_time + timedelta(milliseconds=int(seconds_since_boot * 1000.0))

    def rss_bytes(self, page_size: int) -> int:
        """The resident set size in bytes."""
        return self.rss * page_size


def parse_stat(text: str | bytes) -> Stat:
    """Parse the contents of a stat file."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    buf = text.strip()

    start_paren = buf.find("(")
    end_paren = buf.rfind(")")
    if start_paren < 1 or end_paren < start_paren:
        raise IncompleteError()
    pid = _parse(buf[: start_paren - 1], 32, True)
    comm = buf[start_paren + 1 : end_paren]
    tokens = iter(buf[end_paren + 2 :].split(" "))

    state_token = next(tokens, None)
    if not state_token:
        raise IncompleteError()
    state = state_token[0]

    def req(bits: int, signed: bool) -> int:
        return _required(tokens, bits, signed)

    def opt(bits: int, signed: bool) -> int | None:
        return _optional(tokens, bits, signed)

    return Stat(
        pid=pid,
        comm=comm,
        state=state,
        ppid=req(32, True),
        pgrp=req(32, True),
        session=req(32, True),
        tty_nr=req(32, True),
        tpgid=req(32, True),
        flags=req(32, False),
        minflt=req(64, False),
        cminflt=req(64, False),
        majflt=req(64, False),
        cmajflt=req(64, False),
        utime=req(64, False),
        stime=req(64, False),
        cutime=req(64, True),
        cstime=req(64, True),
        priority=req(64, True),
        nice=req(64, True),
        num_threads=req(64, True),
        itrealvalue=req(64, True),
        starttime=req(64, False),
        vsize=req(64, False),
        rss=req(64, False),
        rsslim=req(64, False),
        startcode=req(64, False),
        endcode=req(64, False),
        startstack=req(64, False),
        kstkesp=req(64, False),
        kstkeip=req(64, False),
        signal=req(64, False),
        blocked=req(64, False),
        sigignore=req(64, False),
        sigcatch=req(64, False),
        wchan=req(64, False),
        nswap=req(64, False),
        cnswap=req(64, False),
        exit_signal=opt(32, True),
        processor=opt(32, True),
        rt_priority=opt(32, False),
        policy=opt(32, False),
        delayacct_blkio_ticks=opt(64, False),
        guest_time=opt(64, False),
        cguest_time=opt(64, True),
        start_data=opt(64, False),
        end_data=opt(64, False),
        start_brk=opt(64, False),
        arg_start=opt(64, False),
        arg_end=opt(64, False),
        env_start=opt(64, False),
        env_end=opt(64, False),
        exit_code=opt(32, True),
    )