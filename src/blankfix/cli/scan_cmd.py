"""blankfix scan command."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from blankfix.core.config import ensure_gitignore, get_state_dir, load_config
from blankfix.core.errors import ProjectRootError
from blankfix.core.models import FallbackReport
from blankfix.core.output import get_progress, print_fallback_report, print_scan_result
from blankfix.fix.engine import RepairEngine


@click.command()
@click.argument("target", default=".")
@click.option("--max-retries", type=int, default=None, help="Override the retry budget")
@click.option("--json", "as_json", is_flag=True, help="Print findings as JSON")
def scan(target: str, max_retries: int | None, as_json: bool):
    """Scan TARGET for structural defects.

    Note: if every strategy fails on every attempt, the emergency fallback
    may repair a known entry-point defect (a backup is written first).
    """
    project_path = Path(target).resolve()
    config = load_config(project_path)
    if max_retries is not None:
        config.engine.max_retries = max_retries

    try:
        state_dir = get_state_dir(project_path)
    except OSError as e:
        raise click.ClickException(f"Cannot use {project_path}: {e}")

    first_run_marker = state_dir / ".initialized"
    if not first_run_marker.exists():
        ensure_gitignore(project_path)
        first_run_marker.touch()

    engine = RepairEngine(project_path, config)
    try:
        if as_json:
            result = engine.scan()
        else:
            with get_progress() as progress:
                task = progress.add_task(f"Scanning {project_path}...", total=None)
                result = engine.scan()
                progress.update(task, completed=True)
    except ProjectRootError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(_result_to_dict(result), indent=2, default=str))
    elif isinstance(result, FallbackReport):
        print_fallback_report(result)
    else:
        print_scan_result(result)

    if isinstance(result, FallbackReport) and result.needs_manual_intervention:
        sys.exit(1)


def _result_to_dict(result) -> dict:
    if isinstance(result, FallbackReport):
        return {
            "mode": result.mode,
            "timestamp": result.timestamp,
            "last_error": result.last_error,
            "files": result.files,
            "fixes": [
                {
                    "file": str(r.file),
                    "applied": r.applied,
                    "reason": r.verification.reason,
                    "instructions": r.instructions,
                }
                for r in result.fix_records
            ],
        }
    return {
        "mode": result.mode,
        **result.summary(),
        "issues": [
            {
                "kind": f.kind,
                "file": f.file_path.as_posix(),
                "line": f.line,
                "severity": f.severity.value,
                "fix": f.fix_kind.value if f.fix_kind else None,
                "message": f.message,
            }
            for f in result.findings
        ],
    }
