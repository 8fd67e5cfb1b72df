"""Progress counters and completion estimates for a copy session.

:class:`ProgressTracker` owns the session counters.  All of them are
guarded by one lock, the only state shared between the pipeline threads.
Readers take an immutable :class:`ProgressSnapshot`, which derives the
percentages, time left and ETA.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from ._types import Classification


@dataclass(frozen=True)
class ProgressSnapshot:
    """Counters at one instant, plus derived estimates."""
    files_found: int = 0
    bytes_found: int = 0
    files_remote: int = 0
    bytes_remote: int = 0
    files_cached: int = 0
    bytes_cached: int = 0
    files_reused: int = 0
    bytes_reused: int = 0
    enumerated: bool = False
    started: datetime = datetime.min
    elapsed: timedelta = timedelta(0)
    remote_name: str = ""
    cached_name: str = ""

    @property
    def files_processed(self) -> int:
        return self.files_remote + self.files_cached + self.files_reused

    @property
    def bytes_processed(self) -> int:
        return self.bytes_remote + self.bytes_cached + self.bytes_reused

    @property
    def files_left(self) -> int:
        return self.files_found - self.files_processed

    @property
    def bytes_left(self) -> int:
        return self.bytes_found - self.bytes_processed

    @property
    def byte_percent(self) -> float:
        # The +1 terms keep the ratio defined before anything is found
        return ((self.bytes_remote + self.bytes_cached + 1) * 100.0
                / (self.bytes_found - self.bytes_reused + 1))

    @property
    def file_percent(self) -> float:
        return ((self.files_remote + self.files_cached + 1) * 100.0
                / (self.files_found - self.files_reused + 1))

    @property
    def percent(self) -> float:
        """Blend of byte and file progress, weighted towards the lower one."""
        by_bytes = self.byte_percent
        by_files = self.file_percent
        if by_bytes > by_files:
            return by_bytes * 0.2 + by_files * 0.8
        return by_bytes * 0.95 + by_files * 0.05

    @property
    def expected_total(self) -> timedelta:
        return self.elapsed * (100.0 / self.percent)

    @property
    def time_left(self) -> timedelta:
        return self.expected_total - self.elapsed

    @property
    def eta(self) -> datetime:
        return self.started + self.expected_total

    @property
    def provisional(self) -> bool:
        """True until the source walk is over and the totals are final."""
        return not self.enumerated

    def speed(self, nbytes: int) -> float:
        """Average bytes per second for *nbytes* over the elapsed time."""
        return nbytes / (self.elapsed.total_seconds() + 1)


class ProgressTracker:
    """Thread-safe, monotonically increasing session counters."""

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._lock = threading.Lock()
        self._clock = clock
        self._started = now()
        self._t0 = clock()
        self._files_found = 0
        self._bytes_found = 0
        self._files_remote = 0
        self._bytes_remote = 0
        self._files_cached = 0
        self._bytes_cached = 0
        self._files_reused = 0
        self._bytes_reused = 0
        self._enumerated = False
        self._remote_name = ""
        self._cached_name = ""

    @property
    def started(self) -> datetime:
        return self._started

    def found(self, size: int) -> None:
        with self._lock:
            self._files_found += 1
            self._bytes_found += size

    def reused(self, size: int) -> None:
        with self._lock:
            self._files_reused += 1
            self._bytes_reused += size

    def copying(self, kind: Classification, name: str) -> None:
        """Record the file currently being copied (display only)."""
        with self._lock:
            if kind is Classification.CACHE_COPY:
                self._cached_name = name
            else:
                self._remote_name = name

    def copied(self, kind: Classification, size: int) -> None:
        with self._lock:
            if kind is Classification.CACHE_COPY:
                self._files_cached += 1
                self._bytes_cached += size
                self._cached_name = ""
            else:
                self._files_remote += 1
                self._bytes_remote += size
                self._remote_name = ""

    def enumeration_done(self) -> None:
        with self._lock:
            self._enumerated = True

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(
                files_found=self._files_found,
                bytes_found=self._bytes_found,
                files_remote=self._files_remote,
                bytes_remote=self._bytes_remote,
                files_cached=self._files_cached,
                bytes_cached=self._bytes_cached,
                files_reused=self._files_reused,
                bytes_reused=self._bytes_reused,
                enumerated=self._enumerated,
                started=self._started,
                elapsed=timedelta(seconds=self._clock() - self._t0),
                remote_name=self._remote_name,
                cached_name=self._cached_name,
            )
