"""blankfix undo command."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from blankfix.core.errors import UnknownBackupError
from blankfix.core.output import console
from blankfix.fix.undo import RollbackManager


@click.command()
@click.argument("target", default=".")
@click.option("--list", "list_all", is_flag=True, help="List available snapshots")
@click.option("--snapshot", "snapshot_id", type=str, help="Restore a whole snapshot by backup id")
def undo(target: str, list_all: bool, snapshot_id: str | None):
    """Undo the last repair session.

    By default the recovery plan is replayed. Use --snapshot to restore
    the critical files captured at the start of a session instead.
    """
    project_path = Path(target).resolve()
    manager = RollbackManager(project_path)

    if list_all:
        manifests = manager.backups.list_backups()
        if not manifests:
            console.print("\n  No snapshots found.\n")
            return

        console.print("\n  [bold]Snapshots[/bold]\n")
        for manifest in manifests:
            console.print(
                f"  {manifest.backup_id}  [{manifest.timestamp}]  {len(manifest.snapshot_files)} files",
                markup=False,
            )
        console.print()
        return

    if snapshot_id:
        try:
            results = manager.restore_snapshot(snapshot_id)
        except UnknownBackupError as e:
            raise click.ClickException(str(e))
    else:
        plan = manager.load_plan()
        if plan is None:
            console.print("\n  No recovery plan found. Run `blankfix fix` first.\n")
            return
        results = manager.rollback(plan)

    if not results:
        console.print("\n  Nothing to undo.\n")
        return

    for result in results:
        if result.success:
            console.print(f"  [green]✅[/green] {escape(result.message)}")
        else:
            console.print(f"  [red]❌[/red] {escape(result.message)}")
