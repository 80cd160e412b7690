"""Kernel information from ``/proc/sys/kernel``: version, build info, limits and sysrq."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime

from .common import ProcError, parse_int

THREADS_MIN = 20
"""The minimum value that can be written to ``/proc/sys/kernel/threads-max``."""

THREADS_MAX = 0x3FFF_FFFF
"""The maximum value that can be written to ``/proc/sys/kernel/threads-max``."""


def _parse_unsigned(text: str, bits: int, message: str) -> int:
    try:
        value = parse_int(text, 10)
    except ProcError:
        raise ProcError(message) from None
    if not 0 <= value < (1 << bits):
        raise ProcError(message)
    return value


@dataclass(frozen=True, order=True)
class Version:
    """A kernel version, in major.minor.patch form."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string; anything after the leading digits and dots is ignored."""
        end = next(
            (i for i, c in enumerate(text) if c != "." and not (c.isascii() and c.isdigit())),
            len(text),
        )
        parts = iter(text[:end].split("."))
        names = ("major", "minor", "patch")
        raw = []
        for name in names:
            part = next(parts, None)
            if part is None:
                raise ProcError(f"Missing {name} version component")
            raw.append(part)
        major = _parse_unsigned(raw[0], 8, "Failed to parse major version")
        minor = _parse_unsigned(raw[1], 8, "Failed to parse minor version")
        patch = _parse_unsigned(raw[2], 16, "Failed to parse patch version")
        return cls(major, minor, patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class KernelType:
    """The kernel type, such as ``Linux``."""

    sysname: str

    @classmethod
    def parse(cls, text: str) -> KernelType:
        return cls(text)


@dataclass
class BuildInfo:
    """Kernel build information from ``/proc/sys/kernel/version``."""

    version: str
    flags: set[str] = field(default_factory=set)
    extra: str = ""

    @classmethod
    def parse(cls, text: str) -> BuildInfo:
        tokens = iter(text.split(" "))
        first = next(tokens)
        if not first.startswith("#"):
            raise ProcError("Failed to parse kernel build version")
        version = first[1:]
        flags: set[str] = set()
        extra = ""
        for token in tokens:
            if all(c.isupper() for c in token):
                flags.add(token)
            else:
                extra = token + " "
                break
        extra += " ".join(tokens)
        return cls(version, flags, extra)

    def smp(self) -> bool:
        """Whether the kernel was built with SMP."""
        return "SMP" in self.flags

    def preempt(self) -> bool:
        """Whether the kernel was built with PREEMPT."""
        return "PREEMPT" in self.flags

    def preemptrt(self) -> bool:
        """Whether the kernel was built with PREEMPTRT."""
        return "PREEMPTRT" in self.flags

    def version_number(self) -> int:
        """The number formed by the leading digits of the version, e.g. ``21`` for ``21~1``."""
        digits = []
        for c in self.version:
            if not (c.isascii() and c.isdigit()):
                break
            digits.append(c)
        return _parse_unsigned("".join(digits), 32, "Failed to parse version number")

    def extra_date(self) -> datetime:
        """Parse the build timestamp in the extra field, in local time."""
        attempts = (
            (f"{self.extra} +0000", "%a %b %d %H:%M:%S UTC %Y %z"),
            (self.extra, "%a, %d %b %Y %H:%M:%S %z"),
        )
        for text, fmt in attempts:
            try:
                return datetime.strptime(text, fmt).astimezone()
            except ValueError:
                continue
        raise ProcError("Failed to parse extra field to date")


@dataclass(frozen=True)
class SemaphoreLimits:
    """System V semaphore limits from ``/proc/sys/kernel/sem``."""

    semmsl: int
    semmns: int
    semopm: int
    semmni: int

    @classmethod
    def parse(cls, text: str) -> SemaphoreLimits:
        names = ("SEMMSL", "SEMMNS", "SEMOPM", "SEMMNI")
        tokens = iter(text.split())
        raw = []
        for name in names:
            token = next(tokens, None)
            if token is None:
                raise ProcError(f"Missing {name}")
            raw.append(token)
        values = [
            _parse_unsigned(token, 64, f"Failed to parse {name}") for token, name in zip(raw, names)
        ]
        return cls(*values)


class AllowedFunctions(enum.IntFlag):
    """Sysrq functions that may be enabled individually."""

    ENABLE_CONTROL_LOG_LEVEL = 2
    ENABLE_CONTROL_KEYBOARD = 4
    ENABLE_DEBUGGING_DUMPS = 8
    ENABLE_SYNC_COMMAND = 16
    ENABLE_REMOUNT_READ_ONLY = 32
    ENABLE_SIGNALING_PROCESSES = 64
    ALLOW_REBOOT_POWEROFF = 128
    ALLOW_NICING_REAL_TIME_TASKS = 256


_ALL_FUNCTIONS = 0
for _flag in AllowedFunctions:
    _ALL_FUNCTIONS |= int(_flag)
del _flag


@dataclass(frozen=True)
class SysRq:
    """The value of ``/proc/sys/kernel/sysrq``.

    Either fully disabled, fully enabled, or limited to a set of functions.
    """

    enabled: bool
    functions: AllowedFunctions | None = None

    @classmethod
    def disable(cls) -> SysRq:
        return cls(False)

    @classmethod
    def enable(cls) -> SysRq:
        return cls(True)

    @classmethod
    def allowing(cls, functions: AllowedFunctions) -> SysRq:
        return cls(True, AllowedFunctions(functions))

    @classmethod
    def parse(cls, text: str) -> SysRq:
        value = _parse_unsigned(text, 16, f"failed to parse {text!r} as a sysrq value")
        if value == 0:
            return cls.disable()
        if value == 1:
            return cls.enable()
        if value & ~_ALL_FUNCTIONS:
            raise ProcError("Invalid value")
        return cls.allowing(AllowedFunctions(value))

    def to_number(self) -> int:
        """The numeric form written to ``/proc/sys/kernel/sysrq``."""
        if self.functions is not None:
            return int(self.functions)
        return 1 if self.enabled else 0