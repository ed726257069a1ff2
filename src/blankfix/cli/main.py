"""Click CLI entry point for blankfix."""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from blankfix._version import __version__
from blankfix.core.output import error_console


@click.group()
@click.version_option(version=__version__, prog_name="blankfix")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug)")
def cli(verbose: int):
    """blankfix - find and safely repair blank-screen defects.

    Scan a front-end source tree for structural defects and apply only
    verified, reversible fixes.
    """
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


# Import and register subcommands
from blankfix.cli.scan_cmd import scan  # noqa: E402
from blankfix.cli.fix_cmd import fix  # noqa: E402
from blankfix.cli.undo_cmd import undo  # noqa: E402

cli.add_command(scan)
cli.add_command(fix)
cli.add_command(undo)


if __name__ == "__main__":
    cli()
