"""System V shared memory segments from ``/proc/sysvipc/shm``."""

from __future__ import annotations

from dataclasses import dataclass

from .common import IncompleteError, InternalError, parse_int


def _int(text: str, bits: int, signed: bool) -> int:
    value = parse_int(text, 10)
    if signed:
        low, high = -(1 << (bits - 1)), 1 << (bits - 1)
    else:
        low, high = 0, 1 << bits
    if not low <= value < high:
        kind = "signed" if signed else "unsigned"
        raise InternalError(f"{text!r} does not fit in a {bits}-bit {kind} integer")
    return value


@dataclass(frozen=True, order=True)
class Shm:
    """A shared memory segment.

    Its ``key`` matches the key of a VSYS memory mapping, and ``shmid`` that
    mapping's inode.
    """

    key: int
    shmid: int
    perms: int
    size: int
    cpid: int
    lpid: int
    nattch: int
    uid: int
    gid: int
    cuid: int
    cgid: int
    atime: int
    dtime: int
    ctime: int
    rss: int
    swap: int


# (bits, signed) for each column, in file order.
_COLUMNS = (
    (32, True),
    (64, False),
    (16, False),
    (64, False),
    (32, True),
    (32, True),
    (32, False),
    (16, False),
    (16, False),
    (16, False),
    (16, False),
    (64, False),
    (64, False),
    (64, False),
    (64, False),
    (64, False),
)


def parse_sysvipc_shm(text: str) -> list[Shm]:
    """Parse the contents of ``/proc/sysvipc/shm``; the header line is skipped."""
    segments: list[Shm] = []
    for line in text.splitlines()[1:]:
        tokens = line.split()
        if len(tokens) < len(_COLUMNS):
            raise IncompleteError()
        values = [_int(token, bits, signed) for token, (bits, signed) in zip(tokens, _COLUMNS)]
        segments.append(Shm(*values))
    return segments