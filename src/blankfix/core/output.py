"""Rich terminal formatting for blankfix output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from blankfix.core.models import (
    FallbackReport,
    Finding,
    FixRecord,
    RepairOutcome,
    ScanResult,
    Severity,
)

console = Console()
error_console = Console(stderr=True)


SEVERITY_ICONS = {
    Severity.CRITICAL: "[red]●[/red]",
    Severity.HIGH: "[magenta]●[/magenta]",
    Severity.MEDIUM: "[yellow]●[/yellow]",
    Severity.LOW: "[blue]●[/blue]",
}

SEVERITY_ORDER = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


def format_finding(finding: Finding) -> str:
    """Format a single finding for terminal output."""
    icon = SEVERITY_ICONS.get(finding.severity, "●")
    fix_label = f" [dim]({finding.fix_kind.value})[/dim]" if finding.fix_kind else ""
    return f"  {icon} {finding.kind}  {escape(finding.message)}  {escape(finding.location)}{fix_label}"


def print_scan_result(result: ScanResult) -> None:
    """Print a scan result panel."""
    lines = [""]
    findings = sorted(result.findings, key=lambda f: SEVERITY_ORDER[f.severity])
    for finding in findings:
        lines.append(format_finding(finding))
    if not findings:
        lines.append("  [green]No structural defects found.[/green]")
    lines.append("")
    lines.append(
        f"  {result.auto_fixable_count} auto-fixable | "
        f"{len(result.findings) - result.auto_fixable_count} manual"
    )
    lines.append(
        f"  {result.files_examined} files examined | {result.files_failed} failed | "
        f"strategy: {result.strategy_name}"
    )
    lines.append("")
    if result.auto_fixable_count:
        lines.append("  Quick fix: [bold]blankfix fix[/bold]")

    border = "red" if any(f.severity == Severity.CRITICAL for f in findings) else "green"
    console.print(Panel(
        "\n".join(lines),
        title="[bold]blankfix scan[/bold]",
        border_style=border,
        padding=(0, 1),
    ))


def print_fallback_report(report: FallbackReport) -> None:
    """Print the nuclear fallback report."""
    lines = [
        "",
        "  [red bold]All scan strategies failed on every attempt.[/red bold]",
        f"  Last error: {escape(report.last_error)}",
        "",
    ]
    for record in report.fix_records:
        lines.append(format_fix_record(record))
        if record.instructions:
            lines.append(f"     [cyan]-> {escape(record.instructions)}[/cyan]")
    lines.append("")
    console.print(Panel(
        "\n".join(lines),
        title="[bold]blankfix — nuclear fallback[/bold]",
        border_style="red",
        padding=(0, 1),
    ))


def format_fix_record(record: FixRecord) -> str:
    location = escape(record.finding.location)
    if record.applied:
        return f"  [green]✅ {record.finding.kind}[/green]  {location}"
    if record.verification.verified:
        return f"  [yellow]ℹ {record.finding.kind}[/yellow]  {location}  [dim](dry run)[/dim]"
    return (
        f"  [dim]– {record.finding.kind}[/dim]  {location}  "
        f"[dim]{escape(record.verification.reason)}[/dim]"
    )


def print_repair_outcome(outcome: RepairOutcome) -> None:
    """Print the summary of a repair session."""
    if outcome.fallback is not None:
        print_fallback_report(outcome.fallback)
    elif outcome.scan is not None:
        print_scan_result(outcome.scan)

    console.print()
    for record in outcome.fix_records:
        console.print(format_fix_record(record))

    summary = outcome.verification.summary
    status_color = "green" if outcome.verification.all_passed else "yellow"
    console.print()
    console.print(f"  Fixes applied: {len(outcome.applied)}")
    console.print(
        f"  Verification: [{status_color}]{'PASS' if outcome.verification.all_passed else 'REVIEW'}"
        f"[/{status_color}] ({summary['passed']}/{summary['total']} checks)"
    )
    if outcome.manifest is not None:
        console.print(f"  Backup: {outcome.manifest.backup_id}")
    if outcome.plan is not None:
        console.print(f"  Rollback: [dim]{escape(outcome.plan.rollback_command)}[/dim]")
    console.print(f"  {escape(outcome.instructions)}")
    if not outcome.dry_run:
        console.print("  [dim]Run `blankfix undo` to revert this session.[/dim]")
    console.print()


def get_progress() -> Progress:
    """Create a progress instance for scanning."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    )
