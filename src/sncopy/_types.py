"""Data structures shared by the copy session and its reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Classification(str, Enum):
    """What happens to one source file.

    Members: ``LOCAL_REUSE`` (already correct at the destination),
    ``CACHE_COPY`` (copied from a cached local version), ``REMOTE_COPY``
    (copied from the source repository).
    """
    LOCAL_REUSE = "local"
    CACHE_COPY = "cached"
    REMOTE_COPY = "remote"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass(frozen=True)
class PlannedFile:
    """A source file and its size, as listed in a :class:`CopyPlan`."""
    path: str
    size: int


@dataclass
class CopyPlan:
    """What a copy session would do (``--dry-run``).

    Attributes:
        local_reuse: Files already correct at the destination.
        cache_copy: Files that would be copied from the cache version.
        remote_copy: Files that would be copied from the source.
    """
    local_reuse: list[PlannedFile] = field(default_factory=list)
    cache_copy: list[PlannedFile] = field(default_factory=list)
    remote_copy: list[PlannedFile] = field(default_factory=list)

    def add(self, kind: Classification, entry: PlannedFile) -> None:
        self.files(kind).append(entry)

    def files(self, kind: Classification) -> list[PlannedFile]:
        if kind is Classification.LOCAL_REUSE:
            return self.local_reuse
        if kind is Classification.CACHE_COPY:
            return self.cache_copy
        return self.remote_copy

    def bytes(self, kind: Classification) -> int:
        return sum(e.size for e in self.files(kind))

    @property
    def total(self) -> int:
        return len(self.local_reuse) + len(self.cache_copy) + len(self.remote_copy)

    @property
    def up_to_date(self) -> bool:
        """``True`` if nothing needs copying."""
        return not self.cache_copy and not self.remote_copy
