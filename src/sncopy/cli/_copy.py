"""The copy command."""

from __future__ import annotations

import click

from .._types import Classification
from ..exceptions import NoSourceVersionError, SnCopyError
from ..repo import Repository
from ..session import CopySession, plan_copy
from ..version import Version
from ._display import ConsoleDisplay
from ._helpers import main, _load_config, _open_repository, _select, _status


def _pick_source(repo: Repository, name: str | None, interactive: bool) -> Version:
    if name is not None:
        source = repo.find_source(name)
        if source is None:
            raise click.ClickException(f"Source version not found: {name}")
        return source
    if interactive:
        source = _select(repo.sources(), "Please select the source version")
    else:
        source = repo.best_source()
    if source is None:
        raise NoSourceVersionError("No source version available")
    return source


def _pick_cache(repo: Repository, source: Version, name: str | None,
                no_cache: bool, interactive: bool) -> Version | None:
    if no_cache:
        return None
    if name is not None:
        cache = repo.find_destination(name)
        if cache is None:
            raise click.ClickException(f"Cache version not found: {name}")
        if cache.tag == source.tag:
            raise click.ClickException("The cache version must differ from the source version")
        return cache
    if interactive:
        return _select(repo.caches(source),
                       "Please select a previous version to use as prefetch")
    return repo.best_cache(source)


def _print_plan(plan) -> None:
    labels = {
        Classification.LOCAL_REUSE: "Local files reused",
        Classification.CACHE_COPY: "Cached files to copy",
        Classification.REMOTE_COPY: "Remote files to copy",
    }
    for kind, label in labels.items():
        click.echo(f"{label + ':':<22} {len(plan.files(kind)):>8} "
                   f"{plan.bytes(kind):>24,} bytes")
    if plan.up_to_date:
        click.echo("Destination is up to date.")


@main.command()
@click.option("--source", "source_name", default=None,
              help="Source version to copy (default: the newest).")
@click.option("--cache", "cache_name", default=None,
              help="Local version to reuse files from (default: the newest other one).")
@click.option("--no-cache", is_flag=True, default=False,
              help="Do not reuse files from another local version.")
@click.option("--interactive", "-i", is_flag=True, default=False,
              help="Pick the source and cache versions from a menu.")
@click.option("--workers", type=click.IntRange(min=1), default=None,
              help="Maximum number of concurrent copy tasks.")
@click.option("--interval", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Seconds between progress updates.")
@click.option("--dry-run", "-n", is_flag=True, default=False,
              help="Show what would be copied without copying.")
@click.pass_context
def copy(ctx, source_name, cache_name, no_cache, interactive, workers, interval, dry_run):
    """Copy a source version to the destination root.

    \b
    Every file of the source version is either:
      reused   already present in the destination with the same size and time
      cached   copied from the cache version, where it is identical
      remote   copied from the source repository
    """
    if cache_name is not None and no_cache:
        raise click.ClickException("--cache and --no-cache are mutually exclusive")
    cfg = _load_config(ctx)
    repo = _open_repository(ctx)

    try:
        source = _pick_source(repo, source_name, interactive)
    except NoSourceVersionError as exc:
        click.echo(str(exc))
        return
    cache = _pick_cache(repo, source, cache_name, no_cache, interactive)
    _status(ctx, f"Source version: {source}")
    _status(ctx, f"Cache version: {cache if cache is not None else '(none)'}")

    try:
        if dry_run:
            _print_plan(plan_copy(repo, source, cache))
            return
        session = CopySession(
            repo, source, cache,
            workers=workers if workers is not None else cfg.workers,
            progress=ConsoleDisplay(),
            interval=interval if interval is not None else cfg.interval,
        )
        result = session.execute()
    except (SnCopyError, OSError) as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Copied {source} to {session.destination.location}: "
        f"{result.files_remote} remote, {result.files_cached} cached, "
        f"{result.files_reused} reused ({result.bytes_found:,} bytes)"
    )
