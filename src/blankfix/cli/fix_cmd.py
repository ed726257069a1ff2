"""blankfix fix command."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.prompt import Confirm

from blankfix.core.config import load_config
from blankfix.core.errors import ProjectRootError
from blankfix.core.output import console, print_repair_outcome
from blankfix.fix.engine import RepairEngine


@click.command()
@click.argument("target", default=".")
@click.option("--dry-run", is_flag=True, help="Verify candidate fixes without writing them")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.option("--max-retries", type=int, default=None, help="Override the retry budget")
def fix(target: str, dry_run: bool, yes: bool, max_retries: int | None):
    """Apply ultra-safe fixes to TARGET.

    Only comment-out-stray-line and add-missing-backticks edits are applied,
    each one verified and backed up first. A recovery plan is always written.
    """
    project_path = Path(target).resolve()
    config = load_config(project_path)
    if max_retries is not None:
        config.engine.max_retries = max_retries
    dry_run = dry_run or config.fix.dry_run

    if not dry_run and not yes:
        console.print("\n  Backups are saved next to each changed file and under .blankfix/backups/")
        if not Confirm.ask("  Apply ultra-safe fixes?", default=True):
            console.print("  [dim]Cancelled.[/dim]")
            return

    engine = RepairEngine(project_path, config)
    try:
        outcome = engine.repair(dry_run=dry_run)
    except ProjectRootError as e:
        raise click.ClickException(str(e))

    print_repair_outcome(outcome)

    if outcome.fallback is not None and outcome.fallback.needs_manual_intervention:
        sys.exit(1)
