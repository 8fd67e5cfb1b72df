"""Console-script entry point for ``sncopy``.

The command line needs click, which only the ``cli`` extra installs; the
copy library itself does not.
"""

import sys


def main():
    try:
        from .cli import main as cli_main
    except ImportError as exc:
        sys.exit(
            f"sncopy: the command line is unavailable ({exc}).\n"
            "Reinstall with the cli extra:  pip install 'sncopy[cli]'"
        )
    cli_main(prog_name="sncopy")
