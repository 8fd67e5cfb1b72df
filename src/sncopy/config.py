"""JSON configuration: where the versions live and which ones are visible."""

from __future__ import annotations

import functools
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from ._filter import FACTOR_MODES, Expr, evaluate, parse_include_exclude
from .exceptions import ConfigError
from .repo import Repository
from .session import DEFAULT_INTERVAL

APP_DIR = "SnCopy"


def search_dirs() -> list[Path]:
    """Directories searched for a configuration, in order."""
    dirs = [Path.cwd(), Path.home() / "Documents" / APP_DIR]
    if sys.platform == "win32" and os.environ.get("APPDATA"):
        dirs.append(Path(os.environ["APPDATA"]) / APP_DIR)
    else:
        base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        dirs.append(Path(base) / APP_DIR)
    return dirs


def resolve_config(name: str, dirs: list[Path] | None = None) -> Path:
    """Find the configuration file called *name* (or *name*.json).

    An absolute *name* is only looked up as given.
    """
    if dirs is None:
        dirs = search_dirs()
    if Path(name).is_absolute():
        dirs = [Path(name).parent]
        name = Path(name).name
    for d in dirs:
        for candidate in (d / name, d / f"{name}.json"):
            if candidate.is_file():
                logger.debug("Using configuration {}", candidate)
                return candidate
    raise ConfigError(f"Configuration {name} not found")


@dataclass
class Config:
    """Resolved configuration values.

    Attributes:
        source: Root of the source repository (one subdirectory per version).
        destination: Local root receiving the copies.
        include: Version-name include expression ("" matches all).
        exclude: Version-name exclude expression ("" excludes none).
        factors: How factors within one filter term combine, "and" or "or".
        workers: Bound on concurrent copy tasks, None for the default.
        interval: Seconds between progress renders.
    """
    source: Path
    destination: Path
    include: str = ""
    exclude: str = ""
    factors: str = "and"
    workers: int | None = None
    interval: float = DEFAULT_INTERVAL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")
        for key in ("source", "destination"):
            if not isinstance(data.get(key), str) or not data[key]:
                raise ConfigError(f"Configuration is missing {key!r}")
        versions = data.get("versions")
        if versions is None:
            versions = {}
        if not isinstance(versions, dict):
            raise ConfigError("'versions' must be an object")
        factors = versions.get("factors") or "and"
        if factors not in FACTOR_MODES:
            raise ConfigError(f"Invalid versions.factors {factors!r}: expected 'and' or 'or'")
        workers = data.get("workers")
        if workers is not None and (not isinstance(workers, int) or workers < 1):
            raise ConfigError(f"Invalid workers {workers!r}: expected a positive integer")
        interval = data.get("interval", DEFAULT_INTERVAL)
        if not isinstance(interval, (int, float)) or interval <= 0:
            raise ConfigError(f"Invalid interval {interval!r}: expected a positive number")
        return cls(
            source=Path(data["source"]),
            destination=Path(data["destination"]),
            include=(versions.get("include") or "").lower(),
            exclude=(versions.get("exclude") or "").lower(),
            factors=factors,
            workers=workers,
            interval=float(interval),
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid configuration {path}: {exc}") from exc
        return cls.from_dict(data)

    @property
    def version_filter(self) -> Expr:
        return parse_include_exclude(self.include, self.exclude, factors=self.factors)

    def repository(self) -> Repository:
        return Repository(
            self.source, self.destination,
            functools.partial(evaluate, self.version_filter),
        )


def load_config(name: str = "default") -> Config:
    """Resolve *name* and load it."""
    return Config.load(resolve_config(name))
