"""Error types and number parsing shared by the procfs parsers."""

from __future__ import annotations

from pathlib import Path

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class ProcError(ValueError):
    """Base class for every error raised while interpreting procfs data."""


class IncompleteError(ProcError):
    """The data ended before everything that was expected had been read."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is None:
            super().__init__("incomplete data")
        else:
            super().__init__(f"incomplete data in {self.path}")


class InternalError(ProcError):
    """The data did not have the shape the parser expects."""


def parse_int(text: str, radix: int = 10) -> int:
    """Parse an integer strictly: an optional sign followed by digits of ``radix``.

    Whitespace, underscores and base prefixes such as ``0x`` are rejected.
    """
    if not 2 <= radix <= 36:
        raise ValueError(f"radix must be between 2 and 36, not {radix}")
    body = text[1:] if text[:1] in ("+", "-") else text
    allowed = _DIGITS[:radix]
    if not body or any(c not in allowed for c in body.lower()):
        raise InternalError(f"failed to parse {text!r} as a base-{radix} integer")
    return int(text, radix)