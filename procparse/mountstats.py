"""Mount statistics from ``/proc/<pid>/mountstats``, including NFS counters."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from datetime import timedelta
from pathlib import Path
from typing import TypeVar

from .common import IncompleteError, InternalError, parse_int

_C = TypeVar("_C")


def _unsigned(text: str, bits: int = 64, radix: int = 10) -> int:
    value = parse_int(text, radix)
    if not 0 <= value < (1 << bits):
        raise InternalError(f"{text!r} does not fit in a {bits}-bit unsigned integer")
    return value


def _take(tokens: Iterator[str]) -> str:
    token = next(tokens, None)
    if token is None:
        raise IncompleteError()
    return token


def _counters(cls: type[_C], text: str) -> _C:
    tokens = iter(text.split())
    values = [_unsigned(_take(tokens)) for _ in fields(cls)]
    return cls(*values)


class NFSServerCaps(enum.IntFlag):
    """Capabilities of an NFS server, from the ``caps=`` value of a mount."""

    NFS_CAP_READDIRPLUS = 1
    NFS_CAP_HARDLINKS = 1 << 1
    NFS_CAP_SYMLINKS = 1 << 2
    NFS_CAP_ACLS = 1 << 3
    NFS_CAP_ATOMIC_OPEN = 1 << 4
    NFS_CAP_LGOPEN = 1 << 5
    NFS_CAP_FILEID = 1 << 6
    NFS_CAP_MODE = 1 << 7
    NFS_CAP_NLINK = 1 << 8
    NFS_CAP_OWNER = 1 << 9
    NFS_CAP_OWNER_GROUP = 1 << 10
    NFS_CAP_ATIME = 1 << 11
    NFS_CAP_CTIME = 1 << 12
    NFS_CAP_MTIME = 1 << 13
    NFS_CAP_POSIX_LOCK = 1 << 14
    NFS_CAP_UIDGID_NOMAP = 1 << 15
    NFS_CAP_STATEID_NFSV41 = 1 << 16
    NFS_CAP_ATOMIC_OPEN_V1 = 1 << 17
    NFS_CAP_SECURITY_LABEL = 1 << 18
    NFS_CAP_SEEK = 1 << 19
    NFS_CAP_ALLOCATE = 1 << 20
    NFS_CAP_DEALLOCATE = 1 << 21
    NFS_CAP_LAYOUTSTATS = 1 << 22
    NFS_CAP_CLONE = 1 << 23
    NFS_CAP_COPY = 1 << 24
    NFS_CAP_OFFLOAD_CANCEL = 1 << 25


_ALL_CAPS = 0
for _cap in NFSServerCaps:
    _ALL_CAPS |= int(_cap)
del _cap


@dataclass(frozen=True)
class NFSEventCounter:
    """The ``events`` section of an NFS mount's statistics."""

    inode_revalidate: int
    deny_try_revalidate: int
    data_invalidate: int
    attr_invalidate: int
    vfs_open: int
    vfs_lookup: int
    vfs_access: int
    vfs_update_page: int
    vfs_read_page: int
    vfs_read_pages: int
    vfs_write_page: int
    vfs_write_pages: int
    vfs_get_dents: int
    vfs_set_attr: int
    vfs_flush: int
    vfs_fs_sync: int
    vfs_lock: int
    vfs_release: int
    congestion_wait: int
    set_attr_trunc: int
    extend_write: int
    silly_rename: int
    short_read: int
    short_write: int
    delay: int
    pnfs_read: int
    pnfs_write: int


@dataclass(frozen=True)
class NFSByteCounter:
    """The ``bytes`` section of an NFS mount's statistics."""

    normal_read: int
    normal_write: int
    direct_read: int
    direct_write: int
    server_read: int
    server_write: int
    pages_read: int
    pages_write: int


@dataclass(frozen=True)
class NFSOperationStat:
    """Per-operation RPC statistics of an NFS mount."""

    operations: int
    transmissions: int
    major_timeouts: int
    bytes_sent: int
    bytes_recv: int
    cum_queue_time: timedelta
    cum_resp_time: timedelta
    cum_total_req_time: timedelta

    @classmethod
    def _parse(cls, text: str) -> NFSOperationStat:
        tokens = iter(text.split())
        counts = [_unsigned(_take(tokens)) for _ in range(5)]
        times = [timedelta(milliseconds=_unsigned(_take(tokens))) for _ in range(3)]
        return cls(*counts, *times)


@dataclass
class MountNFSStatistics:
    """Statistics that only NFS mounts provide."""

    version: str
    opts: list[str]
    age: timedelta
    caps: list[str]
    sec: list[str]
    events: NFSEventCounter
    bytes: NFSByteCounter
    per_op_stats: dict[str, NFSOperationStat] = field(default_factory=dict)

    @classmethod
    def _from_lines(cls, lines: Iterator[str], version: str) -> MountNFSStatistics:
        parsing_per_op = False
        opts: list[str] | None = None
        age: timedelta | None = None
        caps: list[str] | None = None
        sec: list[str] | None = None
        byte_counter: NFSByteCounter | None = None
        events: NFSEventCounter | None = None
        per_op: dict[str, NFSOperationStat] = {}

        for raw in lines:
            line = raw.strip()
            if not line:
                break
            if not parsing_per_op:
                if line.startswith("opts:"):
                    opts = line[5:].strip().split(",")
                elif line.startswith("age:"):
                    age = timedelta(seconds=_unsigned(line[4:].strip()))
                elif line.startswith("caps:"):
                    caps = line[5:].strip().split(",")
                elif line.startswith("sec:"):
                    sec = line[4:].strip().split(",")
                elif line.startswith("bytes:"):
                    byte_counter = _counters(NFSByteCounter, line[6:].strip())
                elif line.startswith("events:"):
                    events = _counters(NFSEventCounter, line[7:].strip())
                if line == "per-op statistics":
                    parsing_per_op = True
            else:
                parts = iter(line.split(":"))
                name = _take(parts)
                per_op[name] = NFSOperationStat._parse(_take(parts))

        if opts is None:
            raise InternalError("Failed to find opts field in nfs stats")
        if age is None:
            raise InternalError("Failed to find age field in nfs stats")
        if caps is None:
            raise InternalError("Failed to find caps field in nfs stats")
        if sec is None:
            raise InternalError("Failed to find sec field in nfs stats")
        if events is None:
            raise InternalError("Failed to find events section in nfs stats")
        if byte_counter is None:
            raise InternalError("Failed to find bytes section in nfs stats")
        return cls(version, opts, age, caps, sec, events, byte_counter, per_op)

    def server_caps(self) -> NFSServerCaps | None:
        """The server capabilities from the ``caps=`` value.

        None if there is no such value or it holds bits that are not known.
        """
        for data in self.caps:
            if data.startswith("caps=0x"):
                value = _unsigned(data[len("caps=0x"):], 32, 16)
                if value & ~_ALL_CAPS:
                    return None
                return NFSServerCaps(value)
        return None


@dataclass
class MountStat:
    """A single entry of a mountstats file."""

    device: str | None
    mount_point: Path
    fs: str
    statistics: MountNFSStatistics | None = None


def parse_mountstats(text: str) -> list[MountStat]:
    """Parse the whole contents of a mountstats file."""
    result: list[MountStat] = []
    lines = iter(text.splitlines())
    for line in lines:
        if not line.startswith("device "):
            continue
        # device <dev> mounted on <path> with fstype <fs> [statvers=<v>]
        tokens = iter(line.split())
        _take(tokens)
        device = _take(tokens)
        _take(tokens)
        _take(tokens)
        mount_point = Path(_take(tokens))
        _take(tokens)
        _take(tokens)
        fs = _take(tokens)
        extra = next(tokens, None)
        statistics = None
        if extra is not None and extra.startswith("statvers="):
            statistics = MountNFSStatistics._from_lines(lines, extra[len("statvers="):])
        result.append(MountStat(device, mount_point, fs, statistics))
    return result