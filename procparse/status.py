"""Process status from ``/proc/<pid>/status``."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from .common import IncompleteError, InternalError, ProcError, parse_int

_T = TypeVar("_T")


def _unsigned(text: str, bits: int = 64, radix: int = 10) -> int:
    value = parse_int(text, radix)
    if not 0 <= value < (1 << bits):
        raise InternalError(f"{text!r} does not fit in a {bits}-bit unsigned integer")
    return value


def _signed(text: str, bits: int = 32) -> int:
    value = parse_int(text, 10)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise InternalError(f"{text!r} does not fit in a {bits}-bit signed integer")
    return value


def _with_kb(text: str) -> int:
    return _unsigned(text.replace(" kB", ""))


def _hex64(text: str) -> int:
    return _unsigned(text, 64, 16)


def _signed_list(text: str) -> list[int]:
    return [_signed(item) for item in text.split()]


def _sigq(text: str) -> tuple[int, int]:
    parts = text.split("/")
    if len(parts) < 2:
        raise IncompleteError()
    return _unsigned(parts[0]), _unsigned(parts[1])


def _allowed(text: str) -> list[int]:
    return [_unsigned(item, 32, 16) for item in text.split(",")]


def _allowed_list(text: str) -> list[tuple[int, int]]:
    ranges: list[tuple[int, int]] = []
    for item in text.split(","):
        if "-" in item:
            parts = item.split("-")
            begin = _unsigned(parts[0], 32)
            if len(parts) > 1:
                ranges.append((begin, _unsigned(parts[1], 32)))
        else:
            value = _unsigned(item, 32)
            ranges.append((value, value))
    return ranges


def parse_uid_gid(text: str, index: int) -> int:
    """The ``index``-th whitespace separated ID of a ``Uid`` or ``Gid`` value."""
    parts = text.split()
    if not 0 <= index < len(parts):
        raise IncompleteError()
    return _unsigned(parts[index], 32)


@dataclass
class Status:
    """Status information about a process.

    Fields that only some kernels provide are None when absent.
    """

    name: str
    umask: int | None
    state: str
    tgid: int
    ngid: int | None
    pid: int
    ppid: int
    tracerpid: int
    ruid: int
    euid: int
    suid: int
    fuid: int
    rgid: int
    egid: int
    sgid: int
    fgid: int
    fdsize: int
    groups: list[int]
    nstgid: list[int] | None
    nspid: list[int] | None
    nspgid: list[int] | None
    nssid: list[int] | None
    vmpeak: int | None
    vmsize: int | None
    vmlck: int | None
    vmpin: int | None
    vmhwm: int | None
    vmrss: int | None
    rssanon: int | None
    rssfile: int | None
    rssshmem: int | None
    vmdata: int | None
    vmstk: int | None
    vmexe: int | None
    vmlib: int | None
    vmpte: int | None
    vmswap: int | None
    hugetlbpages: int | None
    threads: int
    sigq: tuple[int, int]
    sigpnd: int
    shdpnd: int
    sigblk: int
    sigign: int
    sigcgt: int
    capinh: int
    capprm: int
    capeff: int
    capbnd: int | None
    capamb: int | None
    nonewprivs: int | None
    seccomp: int | None
    speculation_store_bypass: str | None
    cpus_allowed: list[int] | None
    cpus_allowed_list: list[tuple[int, int]] | None
    mems_allowed: list[int] | None
    mems_allowed_list: list[tuple[int, int]] | None
    voluntary_ctxt_switches: int | None
    nonvoluntary_ctxt_switches: int | None
    core_dumping: bool | None
    thp_enabled: bool | None


def _read_fields(text: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    for line in text.splitlines():
        if not line:
            continue
        parts = line.split(":")
        if len(parts) < 2:
            raise IncompleteError()
        fields[parts[0]] = parts[1].strip()
    return fields


def parse_status(text: str) -> Status:
    """Parse the contents of a status file."""
    fields = _read_fields(text)

    def required(key: str) -> str:
        try:
            return fields.pop(key)
        except KeyError:
            raise IncompleteError() from None

    def optional(key: str, convert: Callable[[str], _T]) -> _T | None:
        value = fields.pop(key, None)
        return None if value is None else convert(value)

    def lenient(key: str, convert: Callable[[str], _T]) -> _T | None:
        value = fields.pop(key, None)
        if value is None:
            return None
        try:
            return convert(value)
        except ProcError:
            return None

    name = required("Name")
    umask = optional("Umask", lambda x: _unsigned(x, 32, 8))
    state = required("State")
    tgid = _signed(required("Tgid"))
    ngid = optional("Ngid", _signed)
    pid = _signed(required("Pid"))
    ppid = _signed(required("PPid"))
    tracerpid = _signed(required("TracerPid"))
    uid = required("Uid")
    ruid, euid, suid, fuid = (parse_uid_gid(uid, i) for i in range(4))
    gid = required("Gid")
    rgid, egid, sgid, fgid = (parse_uid_gid(gid, i) for i in range(4))

    return Status(
        name=name,
        umask=umask,
        state=state,
        tgid=tgid,
        ngid=ngid,
        pid=pid,
        ppid=ppid,
        tracerpid=tracerpid,
        ruid=ruid,
        euid=euid,
        suid=suid,
        fuid=fuid,
        rgid=rgid,
        egid=egid,
        sgid=sgid,
        fgid=fgid,
        fdsize=_unsigned(required("FDSize"), 32),
        groups=_signed_list(required("Groups")),
        nstgid=optional("NStgid", _signed_list),
        nspid=optional("NSpid", _signed_list),
        nspgid=optional("NSpgid", _signed_list),
        nssid=optional("NSsid", _signed_list),
        vmpeak=optional("VmPeak", _with_kb),
        vmsize=optional("VmSize", _with_kb),
        vmlck=optional("VmLck", _with_kb),
        vmpin=optional("VmPin", _with_kb),
        vmhwm=optional("VmHWM", _with_kb),
        vmrss=optional("VmRSS", _with_kb),
        rssanon=optional("RssAnon", _with_kb),
        rssfile=optional("RssFile", _with_kb),
        rssshmem=optional("RssShmem", _with_kb),
        vmdata=optional("VmData", _with_kb),
        vmstk=optional("VmStk", _with_kb),
        vmexe=optional("VmExe", _with_kb),
        vmlib=optional("VmLib", _with_kb),
        vmpte=optional("VmPTE", _with_kb),
        vmswap=optional("VmSwap", _with_kb),
        hugetlbpages=optional("HugetlbPages", _with_kb),
        threads=_unsigned(required("Threads")),
        sigq=_sigq(required("SigQ")),
        sigpnd=_hex64(required("SigPnd")),
        shdpnd=_hex64(required("ShdPnd")),
        sigblk=_hex64(required("SigBlk")),
        sigign=_hex64(required("SigIgn")),
        sigcgt=_hex64(required("SigCgt")),
        capinh=_hex64(required("CapInh")),
        capprm=_hex64(required("CapPrm")),
        capeff=_hex64(required("CapEff")),
        capbnd=optional("CapBnd", _hex64),
        capamb=optional("CapAmb", _hex64),
        nonewprivs=optional("NoNewPrivs", _unsigned),
        seccomp=optional("Seccomp", lambda x: _unsigned(x, 32)),
        speculation_store_bypass=fields.pop("Speculation_Store_Bypass", None),
        cpus_allowed=optional("Cpus_allowed", _allowed),
        cpus_allowed_list=lenient("Cpus_allowed_list", _allowed_list),
        mems_allowed=optional("Mems_allowed", _allowed),
        mems_allowed_list=lenient("Mems_allowed_list", _allowed_list),
        voluntary_ctxt_switches=optional("voluntary_ctxt_switches", _unsigned),
        nonvoluntary_ctxt_switches=optional("nonvoluntary_ctxt_switches", _unsigned),
        core_dumping=optional("CoreDumping", lambda x: x == "1"),
        thp_enabled=optional("THP_enabled", lambda x: x == "1"),
    )