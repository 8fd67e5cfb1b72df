"""The versions command."""

from __future__ import annotations

import click

from ._helpers import main, _open_repository


def _version_line(v, marker: str) -> str:
    return f"{marker:1} {v.created:%Y-%m-%d %H:%M:%S}  {v.name}"


@main.command()
@click.pass_context
def versions(ctx):
    """List source and destination versions, newest first.

    The best source is marked with '*', the destination that would serve
    as its cache with '+'.
    """
    repo = _open_repository(ctx)
    best = repo.best_source()
    cache = repo.best_cache(best) if best is not None else None

    click.echo(f"Sources ({repo.source_root}):")
    if not repo.sources():
        click.echo("  (none)")
    for v in repo.sources():
        click.echo("  " + _version_line(v, "*" if v == best else ""))

    click.echo(f"Destinations ({repo.destination_root}):")
    if not repo.destinations():
        click.echo("  (none)")
    for v in repo.destinations():
        click.echo("  " + _version_line(v, "+" if v == cache else ""))
