"""Shared fixtures for sncopy tests."""

import json
import os

import pytest
from click.testing import CliRunner
from loguru import logger

from sncopy import Repository

T0 = 1_600_000_000


def write_tree(base, files, mtime=T0):
    """Create *files* ({rel_path: bytes}) under *base* with a fixed mtime."""
    base.mkdir(parents=True, exist_ok=True)
    for rel, data in files.items():
        p = base.joinpath(*rel.split("/"))
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        os.utime(p, (mtime, mtime))
    return base


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop sinks added by the CLI so they do not outlive the test."""
    yield
    logger.remove()


@pytest.fixture
def roots(tmp_path):
    """(source_root, destination_root), both existing and empty."""
    src = tmp_path / "share"
    dst = tmp_path / "local"
    src.mkdir()
    dst.mkdir()
    return src, dst


@pytest.fixture
def make_version():
    """Return ``make(root, name, files, timestamp, mtime=T0)``.

    Builds a version directory and sets its timestamp last, after the
    files have been written.
    """
    def make(root, name, files=None, timestamp=T0, mtime=T0):
        d = write_tree(root / name, files or {}, mtime=mtime)
        os.utime(d, (timestamp, timestamp))
        return d
    return make


@pytest.fixture
def repo(roots):
    src, dst = roots
    return Repository(src, dst)


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, roots):
    """A configuration file pointing at the two roots."""
    src, dst = roots
    p = tmp_path / "test.json"
    p.write_text(json.dumps({
        "source": str(src),
        "destination": str(dst),
        "interval": 0.05,
    }))
    return p
