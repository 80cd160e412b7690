"""Memory mappings from ``/proc/<pid>/maps``, ``smaps`` and ``smaps_rollup``."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass, field
from pathlib import Path

from .common import IncompleteError, InternalError, ProcError, parse_int


def _unsigned(text: str, bits: int = 64, radix: int = 10) -> int:
    value = parse_int(text, radix)
    if not 0 <= value < (1 << bits):
        raise InternalError(f"{text!r} does not fit in a {bits}-bit unsigned integer")
    return value


def _signed(text: str, bits: int = 32, radix: int = 10) -> int:
    value = parse_int(text, radix)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise InternalError(f"{text!r} does not fit in a {bits}-bit signed integer")
    return value


def _split_pair(text: str, sep: str, parse) -> tuple[int, int]:
    parts = text.split(sep)
    if len(parts) < 2:
        raise IncompleteError()
    return parse(parts[0]), parse(parts[1])


class MMPermissions(enum.IntFlag):
    """The permissions a process has on a memory mapping.

    SHARED and PRIVATE are mutually exclusive in real data.
    """

    NONE = 0
    READ = 1 << 0
    WRITE = 1 << 1
    EXECUTE = 1 << 2
    SHARED = 1 << 3
    PRIVATE = 1 << 4

    @classmethod
    def parse(cls, text: str) -> MMPermissions:
        """Parse a permission string such as ``rw-p``; unknown characters are ignored."""
        result = cls.NONE
        for char in text:
            result |= _PERMISSION_CHARS.get(char, cls.NONE)
        return result

    def as_str(self) -> str:
        """The four-character form used in the maps file."""
        if self & MMPermissions.SHARED:
            last = "s"
        elif self & MMPermissions.PRIVATE:
            last = "p"
        else:
            last = "-"
        return (
            ("r" if self & MMPermissions.READ else "-")
            + ("w" if self & MMPermissions.WRITE else "-")
            + ("x" if self & MMPermissions.EXECUTE else "-")
            + last
        )


_PERMISSION_CHARS = {
    "r": MMPermissions.READ,
    "w": MMPermissions.WRITE,
    "x": MMPermissions.EXECUTE,
    "s": MMPermissions.SHARED,
    "p": MMPermissions.PRIVATE,
}


class VmFlags(enum.IntFlag):
    """Kernel flags of a virtual memory area, named as in the man page."""

    NONE = 0
    RD = 1 << 0
    WR = 1 << 1
    EX = 1 << 2
    SH = 1 << 3
    MR = 1 << 4
    MW = 1 << 5
    ME = 1 << 6
    MS = 1 << 7
    GD = 1 << 8
    PF = 1 << 9
    DW = 1 << 10
    LO = 1 << 11
    IO = 1 << 12
    SR = 1 << 13
    RR = 1 << 14
    DC = 1 << 15
    DE = 1 << 16
    AC = 1 << 17
    NR = 1 << 18
    HT = 1 << 19
    SF = 1 << 20
    NL = 1 << 21
    AR = 1 << 22
    WF = 1 << 23
    DD = 1 << 24
    SD = 1 << 25
    MM = 1 << 26
    HG = 1 << 27
    NH = 1 << 28
    MG = 1 << 29
    UM = 1 << 30
    UW = 1 << 31

    @classmethod
    def from_name(cls, flag: str) -> VmFlags:
        """The flag for a two-letter lower-case name; anything else is NONE."""
        if len(flag) != 2 or flag != flag.lower():
            return cls.NONE
        return cls.__members__.get(flag.upper(), cls.NONE)


class MMapKind(enum.Enum):
    """What backs a memory mapping."""

    PATH = "path"
    HEAP = "heap"
    STACK = "stack"
    TSTACK = "tstack"
    VDSO = "vdso"
    VVAR = "vvar"
    VSYSCALL = "vsyscall"
    ROLLUP = "rollup"
    ANONYMOUS = "anonymous"
    VSYS = "vsys"
    OTHER = "other"


_PSEUDO_PATHS = {
    "": MMapKind.ANONYMOUS,
    "[heap]": MMapKind.HEAP,
    "[stack]": MMapKind.STACK,
    "[vdso]": MMapKind.VDSO,
    "[vvar]": MMapKind.VVAR,
    "[vsyscall]": MMapKind.VSYSCALL,
    "[rollup]": MMapKind.ROLLUP,
}


@dataclass(frozen=True)
class MMapPath:
    """The pathname field of a mapping.

    ``value`` is a Path for PATH, the thread ID for TSTACK, the shared memory key
    for VSYS, the name inside the brackets for OTHER, and None otherwise.
    """

    kind: MMapKind
    value: Path | int | str | None = None

    @classmethod
    def parse(cls, text: str) -> MMapPath:
        x = text.strip()
        kind = _PSEUDO_PATHS.get(x)
        if kind is not None:
            return cls(kind)
        if x.startswith("[stack:"):
            parts = x[1:-1].split(":")
            if len(parts) < 2:
                raise IncompleteError()
            return cls(MMapKind.TSTACK, _unsigned(parts[1], 32))
        if x.startswith("[") and x.endswith("]"):
            return cls(MMapKind.OTHER, x[1:-1])
        if x.startswith("/SYSV"):
            # 32-bit signed hex key: /SYSVaabbccdd (deleted)
            if len(x) < 13:
                raise IncompleteError()
            key = _unsigned(x[5:13], 32, 16)
            if key >= 1 << 31:
                key -= 1 << 32
            return cls(MMapKind.VSYS, key)
        return cls(MMapKind.PATH, Path(x))


@dataclass
class MMapExtension:
    """Extra information about a mapping, from an smaps file.

    Memory statistics in ``map`` are in bytes.
    """

    map: dict[str, int] = field(default_factory=dict)
    vm_flags: VmFlags = VmFlags.NONE

    def is_empty(self) -> bool:
        return not self.map and self.vm_flags == VmFlags.NONE


@dataclass
class MemoryMap:
    """One entry of a maps or smaps file."""

    address: tuple[int, int]
    perms: MMPermissions
    offset: int
    dev: tuple[int, int]
    inode: int
    pathname: MMapPath
    extension: MMapExtension = field(default_factory=MMapExtension)

    @classmethod
    def from_line(cls, line: str) -> MemoryMap:
        """Parse the header line of a mapping."""
        parts = line.split(" ", 5)
        if len(parts) < 6:
            raise IncompleteError()
        address, perms, offset, dev, inode, path = parts
        return cls(
            address=_split_pair(address, "-", lambda t: _unsigned(t, 64, 16)),
            perms=MMPermissions.parse(perms),
            offset=_unsigned(offset, 64, 16),
            dev=_split_pair(dev, ":", lambda t: _signed(t, 32, 16)),
            inode=_unsigned(inode),
            pathname=MMapPath.parse(path),
        )


def _starts_upper(line: str) -> bool:
    return bool(line) and line[0] in string.ascii_uppercase


def _apply_attribute(mapping: MemoryMap, line: str) -> None:
    if line.startswith("VmFlags"):
        flags = VmFlags.NONE
        for name in line.split()[1:]:
            flags |= VmFlags.from_name(name)
        mapping.extension.vm_flags = flags
        return
    parts = line.split()
    if len(parts) < 2:
        return
    key, value = parts[0], parts[1]
    multiplier = 1024 if len(parts) > 2 else 1
    try:
        number = _unsigned(value)
    except ProcError:
        raise ProcError("Value in `Key: Value` pair was not actually a number") from None
    mapping.extension.map[key.rstrip(":")] = number * multiplier


def parse_memory_maps(text: str) -> list[MemoryMap]:
    """Parse a maps, smaps or smaps_rollup file."""
    maps: list[MemoryMap] = []
    current: MemoryMap | None = None
    for line in text.splitlines():
        if _starts_upper(line):
            if current is None:
                raise IncompleteError()
            _apply_attribute(current, line)
        else:
            if current is not None:
                maps.append(current)
            current = MemoryMap.from_line(line)
    if current is not None:
        maps.append(current)
    return maps


@dataclass
class SmapsRollup:
    """The accumulated memory statistics of ``/proc/<pid>/smaps_rollup``."""

    memory_map_rollup: list[MemoryMap]


def parse_smaps_rollup(text: str) -> SmapsRollup:
    """Parse the contents of an smaps_rollup file."""
    return SmapsRollup(parse_memory_maps(text))