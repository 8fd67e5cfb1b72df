"""Differential copy of one source version to the local destination.

A :class:`CopySession` runs four activities side by side:

1. walk the source version, queueing one classification task per file;
2. run the classification tasks, each of which reuses the file in place
   or queues a copy from the cache version or from the source;
3. run the cache copies;
4. run the remote copies.

Each activity closes the queue it feeds when it ends, so the ones
downstream drain and stop.  A progress sink, if given, is called with a
:class:`~sncopy.progress.ProgressSnapshot` at a fixed interval and once
more at the end.
"""

from __future__ import annotations

import functools
import shutil
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path

from loguru import logger

from ._types import Classification, CopyPlan, PlannedFile
from .exceptions import SnCopyError
from .progress import ProgressSnapshot, ProgressTracker
from .repo import Repository, stamp
from .version import FileComparison, SourceFile, Version, find_file, walk_files
from .workqueue import TaskQueue

ProgressSink = Callable[[ProgressSnapshot], None]

DEFAULT_INTERVAL = 5.0


def classify(
    source_file: SourceFile,
    destination: Version | None,
    cache: Version | None,
) -> tuple[Classification, Path, int]:
    """Decide what to do with *source_file*.

    Returns ``(classification, origin, size)`` where *origin* is the file
    to copy from (the destination file itself for ``LOCAL_REUSE``) and
    *size* is the source file's size.
    """
    st = source_file.path.stat()
    candidates = (
        (Classification.LOCAL_REUSE, destination),
        (Classification.CACHE_COPY, cache),
    )
    for kind, version in candidates:
        if version is None:
            continue
        found = find_file(version, source_file.rel_path)
        if found is not None and FileComparison(st, found.stat()).reusable:
            return kind, found, st.st_size
    return Classification.REMOTE_COPY, source_file.path, st.st_size


def plan_copy(
    repository: Repository, source: Version, cache: Version | None = None,
) -> CopyPlan:
    """Classify every file of *source* without creating or copying anything."""
    path = repository.destination_path(source)
    destination = Version.from_path(path) if path.is_dir() else None
    plan = CopyPlan()
    for f in walk_files(source):
        kind, _origin, size = classify(f, destination, cache)
        plan.add(kind, PlannedFile(f.rel_path, size))
    return plan


class CopySession:
    """One copy of *source* into the repository's destination root.

    The destination directory is created when the session is constructed.
    :meth:`execute` may be called only once.

    Args:
        repository: Where the source and destination versions live.
        source: The version to copy.
        cache: Another local version to copy identical files from.
        workers: Maximum number of classification and copy tasks running
            at once (``None`` for the thread pool default).
        progress: Called with a :class:`ProgressSnapshot` every *interval*
            seconds and when the session ends.  Exceptions it raises are
            logged and ignored.
        interval: Seconds between progress calls.
    """

    def __init__(
        self,
        repository: Repository,
        source: Version,
        cache: Version | None = None,
        *,
        workers: int | None = None,
        progress: ProgressSink | None = None,
        interval: float = DEFAULT_INTERVAL,
    ):
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.repository = repository
        self.source = source
        self.cache = cache
        self.destination = repository.create_destination(source)
        self.tracker = ProgressTracker()
        self._workers = workers
        self._sink = progress
        self._interval = interval
        self._source_files = TaskQueue()
        self._local_copies = TaskQueue()
        self._remote_copies = TaskQueue()
        self._stop = threading.Event()
        self._render_failed = False
        self._executed = False

    def __repr__(self) -> str:
        return f"CopySession({self.source.name!r}, cache={self.cache and self.cache.name!r})"

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _copy(self, kind: Classification, origin: Path, source_file: SourceFile, size: int) -> None:
        target_dir = self.destination.location
        if source_file.rel_dir:
            target_dir = target_dir.joinpath(*source_file.rel_dir.split("/"))
        self.tracker.copying(kind, source_file.path.name)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / source_file.path.name
        shutil.copyfile(origin, target)
        shutil.copystat(origin, target)
        self.tracker.copied(kind, size)
        logger.debug("Copied {} ({}, {} bytes)", source_file.rel_path, kind, size)

    def _discriminate(self, source_file: SourceFile) -> Classification:
        kind, origin, size = classify(source_file, self.destination, self.cache)
        self.tracker.found(size)
        logger.debug("{}: {}", source_file.rel_path, kind)
        if kind is Classification.LOCAL_REUSE:
            self.tracker.reused(size)
        elif kind is Classification.CACHE_COPY:
            self._local_copies.push(
                functools.partial(self._copy, kind, origin, source_file, size))
        else:
            self._remote_copies.push(
                functools.partial(self._copy, kind, origin, source_file, size))
        return kind

    def _enumerate(self) -> None:
        try:
            for f in walk_files(self.source):
                self._source_files.push(functools.partial(self._discriminate, f))
        finally:
            self._source_files.close()
        self.tracker.enumeration_done()
        logger.info("Source walk of {} complete", self.source)

    def _discriminate_all(self, pool: ThreadPoolExecutor) -> None:
        try:
            self._source_files.execute_all(pool)
        finally:
            self._local_copies.close()
            self._remote_copies.close()

    # ------------------------------------------------------------------
    # Progress display
    # ------------------------------------------------------------------

    def _render(self) -> None:
        try:
            self._sink(self.tracker.snapshot())
        except Exception:
            if not self._render_failed:
                self._render_failed = True
                logger.warning("Progress display failed; the copy continues")
            logger.opt(exception=True).debug("Progress display error")

    def _display_loop(self) -> None:
        while not self._stop.is_set():
            self._render()
            self._stop.wait(self._interval)
        self._render()

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def execute(self) -> ProgressSnapshot:
        """Run the copy and return the final counters.

        Raises the first failure of the walk, classification, or copy
        activities (in that order) once all of them have ended.  The
        destination's timestamp is set back to the source's in either case;
        if that fails while a copy error is being raised, it is only logged.
        """
        if self._executed:
            raise SnCopyError("A CopySession can only be executed once")
        self._executed = True

        logger.info(
            "Copying {} to {} (cache: {})",
            self.source.location, self.destination.location,
            self.cache.location if self.cache else "none",
        )
        display = None
        if self._sink is not None:
            display = threading.Thread(
                target=self._display_loop, name="sncopy-progress", daemon=True)
            display.start()

        try:
            with ThreadPoolExecutor(max_workers=self._workers,
                                    thread_name_prefix="sncopy-worker") as pool, \
                 ThreadPoolExecutor(max_workers=4,
                                    thread_name_prefix="sncopy-stage") as stages:
                activities = [
                    stages.submit(self._enumerate),
                    stages.submit(self._discriminate_all, pool),
                    stages.submit(self._local_copies.execute_all, pool),
                    stages.submit(self._remote_copies.execute_all, pool),
                ]
                wait(activities)
        finally:
            self._stop.set()
            if display is not None:
                display.join()

        failure = next(
            (f.exception() for f in activities if f.exception() is not None), None)

        # Adding entries changed the directory mtime; restore the order key
        try:
            stamp(self.destination.location, self.source.timestamp)
        except OSError:
            if failure is None:
                raise
            logger.opt(exception=True).warning(
                "Could not restamp {}", self.destination.location)

        if failure is not None:
            logger.error("Copy of {} failed: {}", self.source, failure)
            raise failure

        result = self.tracker.snapshot()
        logger.info(
            "Copy of {} done: {} remote, {} cached, {} reused",
            self.source, result.files_remote, result.files_cached, result.files_reused,
        )
        return result
