"""Repository: the source and destination version catalogs.

A repository is a pair of roots, each holding one subdirectory per
version.  Listings are taken once and cached: a :class:`Repository` is a
point-in-time snapshot, and a destination created through it does not
show up in a previously obtained :meth:`Repository.destinations` list.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from .version import Version

VersionFilter = Callable[[str], bool]


def _accept_all(name: str) -> bool:
    return True


class VersionCatalog:
    """Versions found under one root, newest first.

    With *created*, versions are ordered by creation time where the
    platform reports it (see :func:`~sncopy.version.version_time`).
    """

    def __init__(self, root: str | Path, version_filter: VersionFilter | None = None,
                 *, created: bool = False):
        self.root = Path(root)
        self._filter = version_filter or _accept_all
        self._created = created
        self._versions: list[Version] | None = None

    def __repr__(self) -> str:
        return f"VersionCatalog({str(self.root)!r})"

    def versions(self) -> list[Version]:
        """Return the cached listing, reading the root on first call.

        A missing root yields an empty listing.
        """
        if self._versions is None:
            found: list[Version] = []
            if self.root.is_dir():
                with os.scandir(self.root) as it:
                    for entry in it:
                        if not entry.is_dir():
                            continue
                        if self._filter(entry.name.lower()):
                            found.append(Version.from_path(entry.path, created=self._created))
            # Sort by name first so equal timestamps keep a stable order
            found.sort(key=lambda v: v.tag)
            found.sort(key=lambda v: v.timestamp, reverse=True)
            self._versions = found
            logger.debug("{} versions under {}", len(found), self.root)
        return self._versions

    def find(self, name: str) -> Version | None:
        """Return the version whose tag equals *name* (case-insensitive)."""
        tag = name.lower()
        for v in self.versions():
            if v.tag == tag:
                return v
        return None


class Repository:
    """Source versions, destination versions, and destination creation."""

    def __init__(
        self,
        source: str | Path,
        destination: str | Path,
        version_filter: VersionFilter | None = None,
    ):
        self._sources = VersionCatalog(source, version_filter, created=True)
        self._destinations = VersionCatalog(destination, version_filter)

    def __repr__(self) -> str:
        return (f"Repository({str(self.source_root)!r}, "
                f"{str(self.destination_root)!r})")

    @property
    def source_root(self) -> Path:
        return self._sources.root

    @property
    def destination_root(self) -> Path:
        return self._destinations.root

    def sources(self) -> list[Version]:
        return self._sources.versions()

    def destinations(self) -> list[Version]:
        return self._destinations.versions()

    def find_source(self, name: str) -> Version | None:
        return self._sources.find(name)

    def find_destination(self, name: str) -> Version | None:
        return self._destinations.find(name)

    def best_source(self) -> Version | None:
        """The newest source version, or None if there is none."""
        sources = self.sources()
        return sources[0] if sources else None

    def caches(self, source: Version) -> list[Version]:
        """Destination versions usable as a cache for *source*, newest first."""
        return [d for d in self.destinations() if d.tag != source.tag]

    def best_cache(self, source: Version) -> Version | None:
        """The newest destination version with a tag other than *source*'s."""
        for d in self.destinations():
            if d.tag != source.tag:
                return d
        return None

    def destination_path(self, source: Version) -> Path:
        """Where the local copy of *source* lives (it may not exist yet)."""
        return self.destination_root / source.name

    def create_destination(self, source: Version) -> Version:
        """Create the destination directory for *source* and return it.

        Creating an existing destination is not an error.  The directory's
        timestamp is set to the source's so that version ordering does not
        depend on when the copy ran.
        """
        path = self.destination_path(source)
        path.mkdir(parents=True, exist_ok=True)
        stamp(path, source.timestamp)
        logger.info("Destination {} ready", path)
        return Version.from_path(path)


def stamp(path: str | Path, timestamp: float) -> None:
    """Set the access and modification time of *path* to *timestamp*."""
    os.utime(path, (timestamp, timestamp))
