"""Versions: one timestamped subdirectory per build or release.

A :class:`Version` is a plain value.  What a version can *do* depends on
its role and lives in free functions: source versions are enumerated with
:func:`walk_files`, destination versions answer point lookups with
:func:`find_file`.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from loguru import logger


def version_time(st: os.stat_result, *, created: bool = False) -> float:
    """Ordering key of a version directory.

    With *created*, the creation time is used where the platform reports
    one (``st_birthtime``); otherwise, and always without *created*, the
    modification time.  Destination versions use the modification time
    because that is the one the copier can set.
    """
    if created:
        birth = getattr(st, "st_birthtime", None)
        if birth:
            return birth
    return st.st_mtime


@dataclass(frozen=True)
class Version:
    """A version directory.

    Attributes:
        tag: Lower-cased directory name, the identity used to compare
            versions across case-insensitive filesystems.
        name: Directory name as found on disk.
        location: Absolute path of the directory.
        timestamp: Time of the directory (seconds since the epoch);
            versions are ordered by it.  See :func:`version_time`.
    """
    tag: str
    name: str
    location: Path = field(compare=False)
    timestamp: float = field(compare=False)

    @classmethod
    def from_path(cls, path: str | Path, *, created: bool = False) -> Version:
        p = Path(path).absolute()
        return cls(
            tag=p.name.lower(),
            name=p.name,
            location=p,
            timestamp=version_time(p.stat(), created=created),
        )

    @property
    def created(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SourceFile:
    """A file found while walking a source version.

    Attributes:
        path: Absolute path of the file.
        rel_dir: Directory part of *rel_path* (``""`` at the version root).
        rel_path: Path relative to the version root, forward slashes.
    """
    path: Path
    rel_dir: str
    rel_path: str


@dataclass(frozen=True)
class FileComparison:
    """Size and modification-time comparison of two files.

    Contents are never read: two files are considered *reusable* for one
    another when both their size and their modification time are equal.
    """
    source: os.stat_result
    other: os.stat_result

    @classmethod
    def of(cls, source: str | Path, other: str | Path) -> FileComparison:
        return cls(os.stat(source), os.stat(other))

    @property
    def same_size(self) -> bool:
        return self.source.st_size == self.other.st_size

    @property
    def same_time(self) -> bool:
        return self.source.st_mtime_ns == self.other.st_mtime_ns

    @property
    def older(self) -> bool:
        """True if the source is older than the other file."""
        return self.source.st_mtime_ns < self.other.st_mtime_ns

    @property
    def reusable(self) -> bool:
        return self.same_size and self.same_time


def _is_hidden_dir(name: str) -> bool:
    return name.startswith(".")


def _raise(exc: OSError) -> None:
    raise exc


def _dir_key(path: str) -> tuple[int, int]:
    st = os.stat(path)
    return st.st_dev, st.st_ino


def walk_files(version: Version) -> Iterator[SourceFile]:
    """Yield every file under a source version.

    Symbolic links to directories are followed.  A link back to one of
    its own ancestors is skipped with a warning.  Directories whose name
    starts with ``.`` are skipped at any depth, together with everything
    below them.  Files are yielded as they are found; the walk is not
    sorted.
    """
    base = version.location
    top = os.fspath(base)
    ancestors = {top: frozenset({_dir_key(top)})}
    for dirpath, dirnames, filenames in os.walk(top, onerror=_raise, followlinks=True):
        seen = ancestors.pop(dirpath)
        kept = []
        for d in dirnames:
            if _is_hidden_dir(d):
                continue
            sub = os.path.join(dirpath, d)
            key = _dir_key(sub)
            if key in seen:
                logger.warning("Skipping {}: it links back to a parent directory", sub)
                continue
            ancestors[sub] = seen | {key}
            kept.append(d)
        dirnames[:] = kept
        rel_dir = Path(dirpath).relative_to(base).as_posix()
        if rel_dir == ".":
            rel_dir = ""
        for fname in filenames:
            rel_path = f"{rel_dir}/{fname}" if rel_dir else fname
            yield SourceFile(Path(dirpath) / fname, rel_dir, rel_path)


def find_file(version: Version, rel_path: str) -> Path | None:
    """Return the file at *rel_path* under a destination version, or None."""
    p = version.location.joinpath(*rel_path.split("/"))
    if p.is_file():
        return p
    return None
