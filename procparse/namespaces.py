"""Namespaces of a process, from ``/proc/<pid>/ns``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(eq=False)
class Namespace:
    """A namespace a process belongs to.

    Two namespaces are the same when their inode number and device ID match.
    """

    ns_type: str
    path: Path
    identifier: int
    device_id: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Namespace):
            return NotImplemented
        return self.identifier == other.identifier and self.device_id == other.device_id

    def __hash__(self) -> int:
        return hash((self.identifier, self.device_id))