"""Process I/O counters, file descriptor targets and memory usage in pages."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

from .common import IncompleteError, InternalError, parse_int


def _u64(text: str) -> int:
    value = parse_int(text, 10)
    if not 0 <= value < (1 << 64):
        raise InternalError(f"{text!r} does not fit in a 64-bit unsigned integer")
    return value


@dataclass(frozen=True)
class Io:
    """I/O statistics of a process, from ``/proc/<pid>/io``."""

    rchar: int
    wchar: int
    syscr: int
    syscw: int
    read_bytes: int
    write_bytes: int
    cancelled_write_bytes: int


_IO_FIELDS = (
    "rchar",
    "wchar",
    "syscr",
    "syscw",
    "read_bytes",
    "write_bytes",
    "cancelled_write_bytes",
)


def parse_io(text: str) -> Io:
    """Parse the contents of an io file."""
    values: dict[str, int] = {}
    for line in text.splitlines():
        if not line or " " not in line:
            continue
        parts = line.split()
        if len(parts) < 2:
            raise IncompleteError()
        key, value = parts[0], parts[1]
        values[key[:-1]] = _u64(value)
    try:
        return Io(**{name: values[name] for name in _IO_FIELDS})
    except KeyError:
        raise IncompleteError() from None


class FDKind(enum.Enum):
    """What an open file descriptor refers to."""

    PATH = "path"
    SOCKET = "socket"
    NET = "net"
    PIPE = "pipe"
    ANON_INODE = "anon_inode"
    MEMFD = "memfd"
    OTHER = "other"


@dataclass(frozen=True)
class FDTarget:
    """The target of a file descriptor link.

    PATH sets ``path``; SOCKET, NET and PIPE set ``inode``; ANON_INODE and
    MEMFD set ``name``; OTHER sets both ``name`` (the type) and ``inode``.
    """

    kind: FDKind
    path: Path | None = None
    inode: int | None = None
    name: str | None = None


_INODE_KINDS = {"socket": FDKind.SOCKET, "net": FDKind.NET, "pipe": FDKind.PIPE}


def _bracketed_inode(text: str) -> int:
    if len(text) <= 2:
        raise IncompleteError()
    return _u64(text[1:-1])


def parse_fd_target(text: str) -> FDTarget:
    """Parse the target of a ``/proc/<pid>/fd/<n>`` link."""
    if not text.startswith("/") and ":" in text:
        parts = text.split(":")
        fd_type = parts[0]
        if fd_type == "":
            raise IncompleteError()
        if len(parts) < 2:
            raise IncompleteError()
        if fd_type == "anon_inode":
            return FDTarget(FDKind.ANON_INODE, name=parts[1])
        inode = _bracketed_inode(parts[1])
        kind = _INODE_KINDS.get(fd_type)
        if kind is not None:
            return FDTarget(kind, inode=inode)
        return FDTarget(FDKind.OTHER, inode=inode, name=fd_type)
    if text.startswith("/memfd:"):
        return FDTarget(FDKind.MEMFD, name=text[len("/memfd:"):])
    return FDTarget(FDKind.PATH, path=Path(text))


@dataclass(frozen=True)
class StatM:
    """Memory usage of a process in pages, from ``/proc/<pid>/statm``."""

    size: int
    resident: int
    shared: int
    text: int
    lib: int
    data: int
    dt: int


def parse_statm(text: str) -> StatM:
    """Parse the contents of a statm file."""
    tokens = text.split()
    if len(tokens) < 7:
        raise IncompleteError()
    return StatM(*(_u64(token) for token in tokens[:7]))