"""Parsing of ``/proc/<pid>/mountinfo``: the mounts in a process's mount namespace."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .common import IncompleteError, InternalError, parse_int


def _next_token(tokens: Iterator[str]) -> str:
    token = next(tokens, None)
    if token is None:
        raise IncompleteError()
    return token


def _parse_signed(text: str, bits: int) -> int:
    value = parse_int(text, 10)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise InternalError(f"{text!r} does not fit in a {bits}-bit signed integer")
    return value


def _parse_unsigned(text: str, bits: int) -> int:
    value = parse_int(text, 10)
    if not 0 <= value < (1 << bits):
        raise InternalError(f"{text!r} does not fit in a {bits}-bit unsigned integer")
    return value


def _parse_options(text: str) -> dict[str, str | None]:
    options: dict[str, str | None] = {}
    for opt in text.split(","):
        name, sep, value = opt.partition("=")
        options[name] = value if sep else None
    return options


class MountOptKind(enum.Enum):
    """The kind of an optional field in a mountinfo line."""

    SHARED = "shared"
    MASTER = "master"
    PROPAGATE_FROM = "propagate_from"
    UNBINDABLE = "unbindable"


@dataclass(frozen=True)
class MountOptField:
    """An optional mountinfo field; ``value`` is the peer group ID, or None for unbindable."""

    kind: MountOptKind
    value: int | None = None


@dataclass
class MountInfo:
    """A single mount in a process's mount namespace."""

    mnt_id: int
    pid: int
    majmin: str
    root: str
    mount_point: Path
    mount_options: dict[str, str | None] = field(default_factory=dict)
    opt_fields: list[MountOptField] = field(default_factory=list)
    fs_type: str = ""
    mount_source: str | None = None
    super_options: dict[str, str | None] = field(default_factory=dict)

    @classmethod
    def from_line(cls, line: str) -> MountInfo:
        """Parse one line of a mountinfo file."""
        tokens = iter(line.split())
        mnt_id = _parse_signed(_next_token(tokens), 32)
        pid = _parse_signed(_next_token(tokens), 32)
        majmin = _next_token(tokens)
        root = _next_token(tokens)
        mount_point = Path(_next_token(tokens))
        mount_options = _parse_options(_next_token(tokens))

        opt_fields: list[MountOptField] = []
        while (token := _next_token(tokens)) != "-":
            parts = iter(token.split(":"))
            name = _next_token(parts)
            if name == MountOptKind.UNBINDABLE.value:
                opt_fields.append(MountOptField(MountOptKind.UNBINDABLE))
                continue
            try:
                kind = MountOptKind(name)
            except ValueError:
                continue
            opt_fields.append(MountOptField(kind, _parse_unsigned(_next_token(parts), 32)))

        fs_type = _next_token(tokens)
        source = _next_token(tokens)
        mount_source = None if source == "none" else source
        super_options = _parse_options(_next_token(tokens))

        return cls(
            mnt_id=mnt_id,
            pid=pid,
            majmin=majmin,
            root=root,
            mount_point=mount_point,
            mount_options=mount_options,
            opt_fields=opt_fields,
            fs_type=fs_type,
            mount_source=mount_source,
            super_options=super_options,
        )


def parse_mountinfo(text: str) -> list[MountInfo]:
    """Parse the whole contents of a mountinfo file."""
    return [MountInfo.from_line(line) for line in text.splitlines()]