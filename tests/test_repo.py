"""Tests for VersionCatalog and Repository."""

import functools
import os

from sncopy import Repository, VersionCatalog
from sncopy._filter import evaluate, parse_include_exclude

from conftest import T0


class TestVersionCatalog:
    def test_newest_first(self, tmp_path, make_version):
        make_version(tmp_path, "v1", timestamp=T0 + 10)
        make_version(tmp_path, "v3", timestamp=T0 + 30)
        make_version(tmp_path, "v2", timestamp=T0 + 20)
        names = [v.name for v in VersionCatalog(tmp_path).versions()]
        assert names == ["v3", "v2", "v1"]

    def test_ignores_plain_files(self, tmp_path, make_version):
        make_version(tmp_path, "v1")
        (tmp_path / "notes.txt").write_text("x")
        assert [v.name for v in VersionCatalog(tmp_path).versions()] == ["v1"]

    def test_missing_root_is_empty(self, tmp_path):
        assert VersionCatalog(tmp_path / "nope").versions() == []

    def test_filter_sees_lowercased_name(self, tmp_path, make_version):
        make_version(tmp_path, "V2-Release")
        seen = []

        def accept(name):
            seen.append(name)
            return True

        VersionCatalog(tmp_path, accept).versions()
        assert seen == ["v2-release"]

    def test_filter_expression(self, tmp_path, make_version):
        make_version(tmp_path, "v1.0", timestamp=T0 + 1)
        make_version(tmp_path, "v2.0", timestamp=T0 + 2)
        make_version(tmp_path, "v2.1-beta", timestamp=T0 + 3)
        expr = parse_include_exclude("^v2", "beta")
        cat = VersionCatalog(tmp_path, functools.partial(evaluate, expr))
        assert [v.name for v in cat.versions()] == ["v2.0"]

    def test_listing_is_cached(self, tmp_path, make_version):
        make_version(tmp_path, "v1")
        cat = VersionCatalog(tmp_path)
        first = cat.versions()
        make_version(tmp_path, "v2", timestamp=T0 + 100)
        assert cat.versions() is first
        assert [v.name for v in cat.versions()] == ["v1"]

    def test_find_case_insensitive(self, tmp_path, make_version):
        make_version(tmp_path, "Build-7")
        cat = VersionCatalog(tmp_path)
        assert cat.find("BUILD-7").name == "Build-7"
        assert cat.find("build-8") is None


class TestBestSource:
    def test_newest(self, roots, make_version, repo):
        src, _ = roots
        make_version(src, "v1", timestamp=T0 + 1)
        make_version(src, "v2", timestamp=T0 + 2)
        assert repo.best_source().name == "v2"

    def test_none_when_empty(self, repo):
        assert repo.best_source() is None


class TestBestCache:
    def test_skips_same_tag(self, roots, make_version, repo):
        src, dst = roots
        make_version(src, "V3", timestamp=T0 + 3)
        make_version(dst, "v3", timestamp=T0 + 3)
        make_version(dst, "v2", timestamp=T0 + 2)
        make_version(dst, "v1", timestamp=T0 + 1)
        source = repo.best_source()
        cache = repo.best_cache(source)
        assert cache.name == "v2"
        assert cache.tag != source.tag

    def test_none_when_only_self(self, roots, make_version, repo):
        src, dst = roots
        make_version(src, "v3")
        make_version(dst, "v3")
        assert repo.best_cache(repo.best_source()) is None

    def test_caches_lists_all_others(self, roots, make_version, repo):
        src, dst = roots
        make_version(src, "v3", timestamp=T0 + 3)
        make_version(dst, "v3", timestamp=T0 + 3)
        make_version(dst, "v1", timestamp=T0 + 1)
        make_version(dst, "v2", timestamp=T0 + 2)
        assert [v.name for v in repo.caches(repo.best_source())] == ["v2", "v1"]


class TestCreateDestination:
    def test_creates_and_stamps(self, roots, make_version, repo):
        src, dst = roots
        make_version(src, "v5", timestamp=T0 + 500)
        source = repo.best_source()
        d = repo.create_destination(source)
        assert d.location == dst / "v5"
        assert d.location.is_dir()
        assert d.tag == source.tag
        assert d.timestamp == source.timestamp
        assert os.stat(dst / "v5").st_mtime == T0 + 500

    def test_idempotent(self, roots, make_version, repo):
        src, dst = roots
        make_version(src, "v5")
        source = repo.best_source()
        repo.create_destination(source)
        (dst / "v5" / "kept.txt").write_text("x")
        d = repo.create_destination(source)
        assert (d.location / "kept.txt").read_text() == "x"

    def test_creates_missing_root(self, tmp_path, make_version):
        src = tmp_path / "share"
        make_version(src, "v1")
        repo = Repository(src, tmp_path / "new" / "local")
        d = repo.create_destination(repo.best_source())
        assert d.location.is_dir()

    def test_not_seen_by_earlier_listing(self, roots, make_version, repo):
        src, _ = roots
        make_version(src, "v1")
        assert repo.destinations() == []
        repo.create_destination(repo.best_source())
        assert repo.destinations() == []

    def test_stamped_destination_orders_by_source_time(self, roots, make_version):
        src, dst = roots
        make_version(src, "old", timestamp=T0 + 1)
        make_version(src, "new", timestamp=T0 + 2)
        first = Repository(src, dst)
        # Copy the newer version first, then the older one
        first.create_destination(first.find_source("new"))
        first.create_destination(first.find_source("old"))
        later = Repository(src, dst)
        assert [v.name for v in later.destinations()] == ["new", "old"]
