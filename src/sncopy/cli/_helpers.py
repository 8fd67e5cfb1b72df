"""Shared helpers, the version picker, and the main CLI group."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, TypeVar

import click

from ..config import Config, load_config
from ..exceptions import ConfigError
from ..log import setup_logger
from ..repo import Repository

T = TypeVar("T")

MAX_CHOICES = 9


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _load_config(ctx) -> Config:
    """Load the configuration named on the command line (cached per run)."""
    cfg = ctx.obj.get("config")
    if cfg is None:
        try:
            cfg = load_config(ctx.obj["config_name"])
        except (ConfigError, OSError) as exc:
            raise click.ClickException(str(exc))
        ctx.obj["config"] = cfg
    return cfg


def _open_repository(ctx) -> Repository:
    cfg = _load_config(ctx)
    _status(ctx, f"Source: {cfg.source}")
    _status(ctx, f"Destination: {cfg.destination}")
    return cfg.repository()


def _select(options: Sequence[T], prompt: str, max_choices: int = MAX_CHOICES) -> T | None:
    """Let the user pick one of the first *max_choices* options.

    Returns None when there is nothing to pick or the user enters 0.  A
    single option is returned without asking.
    """
    values = list(options)[:max_choices]
    if not values:
        return None
    if len(values) == 1:
        return values[0]

    click.echo(prompt)
    while True:
        for i, v in enumerate(values, 1):
            click.echo(f"({i}) - {v}")
        click.echo(f"Enter the value from 1 to {len(values)}, or 0 to select nothing")
        raw = click.prompt("", default="", show_default=False, prompt_suffix="> ")
        try:
            n = int(raw.strip())
        except ValueError:
            n = -1
        if n == 0:
            return None
        if 1 <= n <= len(values):
            return values[n - 1]
        click.echo("I did not understand")


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "-c", "config_name", default="default", envvar="SNCOPY_CONFIG",
              show_default=True,
              help="Configuration name or path (or set SNCOPY_CONFIG).")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path),
              help="Also write a detailed log to this file.")
@click.pass_context
def main(ctx, config_name, verbose, log_file):
    """sncopy: stage large versioned trees from a slow share.

    Copies the newest version directory from the source root to the
    local destination root.  Files already present locally with the same
    size and modification time are reused; files identical in an older
    local version are copied from there instead of from the share.

    \b
    Quick start:
      sncopy versions
      sncopy copy
      sncopy copy --dry-run
      sncopy copy -i

    \b
    Configurations are JSON files looked up by name in the current
    directory, ~/Documents/SnCopy and the user configuration directory.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_name"] = config_name
    setup_logger(verbose=verbose, log_file=log_file)
