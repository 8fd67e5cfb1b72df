"""Console rendering of the copy progress table."""

from __future__ import annotations

import shutil
from datetime import timedelta

import click

from ..progress import ProgressSnapshot

_HOME = "\x1b[H"
_RULE = " " * 26 + "-------- ------------------------"
_HEADER = " " * 26 + "-Files-- -----------------Bytes--"


def _fmt_duration(td: timedelta) -> str:
    seconds = max(int(td.total_seconds()), 0)
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h}:{m:02d}:{s:02d}"


def _row(label: str, files: int, nbytes: int, speed: float | None = None,
         name: str = "") -> str:
    speed_col = f"{speed:>12,.0f} B/s" if speed is not None else ""
    return f"{label + ':':<25} {files:>8} {nbytes:>24,} {speed_col:>18} {name}"


def _estimates(snap: ProgressSnapshot) -> tuple[str, str]:
    """Time left and ETA, or placeholders while they are out of range."""
    try:
        return _fmt_duration(snap.time_left), f"{snap.eta:%Y-%m-%d %H:%M:%S}"
    except OverflowError:
        return "--", "--"


def format_table(snap: ProgressSnapshot) -> list[str]:
    """Return the progress table for *snap* as a list of lines."""
    est = " (est.)" if snap.provisional else ""
    left, eta = _estimates(snap)
    lines = [
        _HEADER,
        _row("Remote Files Found", snap.files_found, snap.bytes_found),
        _row("Remote Files Copied", snap.files_remote, snap.bytes_remote,
             snap.speed(snap.bytes_remote), snap.remote_name),
        _row("Cached Files Copied", snap.files_cached, snap.bytes_cached,
             snap.speed(snap.bytes_cached), snap.cached_name),
        _row("Local Files Reused", snap.files_reused, snap.bytes_reused),
        _RULE,
        _row("Total", snap.files_processed, snap.bytes_processed,
             snap.speed(snap.bytes_processed)),
        _row("Left", snap.files_left, snap.bytes_left),
        "",
        f"Performed:    {int(snap.percent)}% ({int(snap.byte_percent)}% Bytes, "
        f"{int(snap.file_percent)}% Files){est}",
        f"Time elapsed: {_fmt_duration(snap.elapsed)}{est}",
        f"Time left:    {left}{est}",
        f"ETA:          {eta}{est}",
    ]
    return lines


class ConsoleDisplay:
    """Progress sink that redraws the table in place on the terminal."""

    def __init__(self) -> None:
        self._width = -1

    def __call__(self, snap: ProgressSnapshot) -> None:
        width = shutil.get_terminal_size().columns
        if width != self._width:
            click.clear()
            self._width = width
        n = max(width - 1, 1)
        out = [_HOME]
        for line in format_table(snap):
            out.append(line[:n].ljust(n) + "\n")
        click.echo("".join(out), nl=False)
