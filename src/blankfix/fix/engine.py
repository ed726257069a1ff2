"""Repair engine — orchestrates one scan-and-repair session."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from blankfix.core.config import BlankfixConfig, load_config
from blankfix.core.models import FallbackReport, FixRecord, RepairOutcome, ScanResult
from blankfix.fix.backup import BackupManager
from blankfix.fix.transaction import SafeFixTransactionManager
from blankfix.fix.verification import verify_applied
from blankfix.fix.verifiers import Verifier
from blankfix.scanner.retry import RetryController, ensure_readable_root
from blankfix.scanner.strategies import Strategy

logger = logging.getLogger(__name__)


class RepairEngine:
    """Snapshot, scan, apply ultra-safe fixes, verify, write the recovery plan."""

    def __init__(
        self,
        project_path: Path | None = None,
        config: BlankfixConfig | None = None,
        strategies: list[Strategy] | None = None,
        verifier: Verifier | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.project_path = (project_path or Path.cwd()).resolve()
        self.config = config or load_config(self.project_path)
        self.strategies = strategies
        self.verifier = verifier
        self.sleep = sleep
        self.controller: RetryController | None = None

    def scan(self, dry_run: bool = False) -> ScanResult | FallbackReport:
        """Run only the retry controller."""
        self.controller = RetryController(
            self.project_path,
            self.config,
            strategies=self.strategies,
            sleep=self.sleep,
            dry_run=dry_run,
        )
        return self.controller.run()

    def repair(self, dry_run: bool | None = None) -> RepairOutcome:
        """Run a full repair session. Only ProjectRootError can escape.

        A dry run writes nothing: no snapshot, no sibling backups and no
        recovery plan, so the previous session's plan stays undoable.
        """
        if dry_run is None:
            dry_run = self.config.fix.dry_run
        started = time.monotonic()
        ensure_readable_root(self.project_path)

        backups = BackupManager(self.project_path)
        manifest = None
        if not dry_run:
            manifest = backups.create_snapshot(self.project_path, self.config.backup.critical_files)

        result = self.scan(dry_run=dry_run)

        records: list[FixRecord]
        if isinstance(result, FallbackReport):
            records = list(result.fix_records)
        else:
            manager = SafeFixTransactionManager(
                self.project_path,
                verifier=self.verifier,
                dry_run=dry_run,
            )
            records = manager.apply_all(result)

        verification = verify_applied(self.project_path, records)
        plan = None
        if manifest is not None:
            plan = backups.build_recovery_plan(manifest.backup_id, records, verification)

        outcome = RepairOutcome(
            mode=result.mode if isinstance(result, FallbackReport) else "repair",
            fix_records=records,
            verification=verification,
            manifest=manifest,
            plan=plan,
            scan=result if isinstance(result, ScanResult) else None,
            fallback=result if isinstance(result, FallbackReport) else None,
            duration=time.monotonic() - started,
            dry_run=dry_run,
        )
        logger.info(
            "Repair finished in %.1fs: %d applied, verification %s",
            outcome.duration,
            len(outcome.applied),
            "PASS" if verification.all_passed else "REVIEW",
        )
        return outcome
