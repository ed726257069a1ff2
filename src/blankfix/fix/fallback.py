"""Nuclear fallback — the terminal repair path once every retry is exhausted.

It looks only at a fixed set of well-known entry points and knows exactly
one defect (a stray ``Core Providers`` line). Whatever happens it returns a
:class:`FallbackReport`; it never raises.
"""

from __future__ import annotations

import logging
from pathlib import Path

from blankfix.core.models import (
    MANUAL_INTERVENTION,
    FallbackReport,
    Finding,
    FixKind,
    FixRecord,
    Severity,
    Verification,
)
from blankfix.fix.transaction import read_source, write_backup, write_source
from blankfix.fix.transforms import emergency_comment_stray_text

logger = logging.getLogger(__name__)

ENTRY_POINTS = (
    "src/main.jsx",
    "src/main.js",
    "main.jsx",
    "main.js",
    "src/index.jsx",
    "src/index.js",
    "index.jsx",
    "index.js",
)

KNOWN_BAD_PATTERN = "Core Providers"

MANUAL_INSTRUCTIONS = (
    "Automatic analysis failed. Open src/main.jsx (or your entry point) and look for "
    f'stray text such as "{KNOWN_BAD_PATTERN}" outside any expression; comment it out or '
    "remove it. Check .blankfix/cores/ for strategy diagnostics."
)


class NuclearFallback:
    """Last-resort, single-purpose repair."""

    def __init__(
        self,
        project_path: Path,
        entry_points: tuple[str, ...] = ENTRY_POINTS,
        dry_run: bool = False,
    ):
        self.project_path = project_path
        self.entry_points = entry_points
        self.dry_run = dry_run

    def run(self, last_error: BaseException | None = None) -> FallbackReport:
        logger.warning("Nuclear fallback activated")
        report = FallbackReport(
            project_root=self.project_path,
            last_error=str(last_error) if last_error else "Unknown error",
        )

        for entry in self.entry_points:
            try:
                self._process(entry, report)
            except Exception as e:
                logger.error("Fallback could not process %s: %s", entry, e)
                report.files.append({"file": entry, "error": str(e)})

        # A dry run reports the emergency edit as verified but not applied.
        if not any(r.verification.verified for r in report.fix_records):
            report.fix_records.append(FixRecord(
                finding=Finding(
                    kind="none",
                    file_path=Path(MANUAL_INTERVENTION),
                    severity=Severity.CRITICAL,
                    message="No automatic repair was possible",
                ),
                applied=False,
                verification=Verification.rejected("manual intervention required"),
                instructions=MANUAL_INSTRUCTIONS,
            ))
        return report

    def _process(self, entry: str, report: FallbackReport) -> None:
        file_path = self.project_path / entry
        if not file_path.is_file():
            return

        content = read_source(file_path)
        has_pattern = KNOWN_BAD_PATTERN in content
        report.files.append({"file": entry, "size": len(content), "has_stray_text": has_pattern})
        if not has_pattern:
            return

        finding = Finding(
            kind="stray_text",
            file_path=Path(entry),
            severity=Severity.HIGH,
            fix_kind=FixKind.COMMENT_LINE,
            message=f"Emergency fix for stray text '{KNOWN_BAD_PATTERN}'",
            snippet=KNOWN_BAD_PATTERN,
        )
        fixed = emergency_comment_stray_text(content)
        if fixed == content:
            report.fix_records.append(FixRecord(
                finding=finding,
                applied=False,
                verification=Verification.rejected("pattern is not on a line of its own"),
            ))
            return

        if self.dry_run:
            report.fix_records.append(FixRecord(
                finding=finding,
                applied=False,
                verification=Verification.ok(),
            ))
            return

        backup = write_backup(file_path, content)
        write_source(file_path, fixed)
        logger.info("Fallback commented out stray text in %s", entry)
        report.fix_records.append(FixRecord(
            finding=finding,
            applied=True,
            verification=Verification.ok(),
            backup_path=backup,
        ))
