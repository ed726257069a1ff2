"""Rollback support for repair sessions."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from blankfix.core.models import RecoveryPlan
from blankfix.fix.backup import BackupManager
from blankfix.fix.transaction import read_source, write_source


@dataclass
class RollbackResult:
    success: bool
    message: str
    file: str = ""


class RollbackManager:
    """Undoes a repair session from its recovery plan or snapshot."""

    def __init__(self, project_path: Path):
        self.project_path = project_path
        self.backups = BackupManager(project_path)

    def load_plan(self) -> RecoveryPlan | None:
        return self.backups.load_plan()

    def rollback(self, plan: RecoveryPlan | None = None) -> list[RollbackResult]:
        """Restore every applied step from its sibling backup.

        Steps are replayed newest first so that a file touched more than
        once ends up with its earliest (pre-session) content.
        """
        plan = plan or self.load_plan()
        if plan is None:
            return []

        results = []
        for step in reversed(plan.steps):
            if step.action == "skipped" or not step.backup_path:
                continue
            backup = Path(step.backup_path)
            if not backup.exists():
                results.append(RollbackResult(
                    success=False,
                    message=f"Backup file not found for {step.file}",
                    file=step.file,
                ))
                continue

            target = self.project_path / step.file
            write_source(target, read_source(backup))
            results.append(RollbackResult(
                success=True,
                message=f"Reverted {step.action} in {step.file}",
                file=step.file,
            ))
        return results

    def restore_snapshot(self, backup_id: str) -> list[RollbackResult]:
        """Copy every file of a snapshot back into the project."""
        manifest = self.backups.load_manifest(backup_id)
        files_dir = self.backups.backup_dir / backup_id / "files"

        results = []
        for rel in manifest.snapshot_files:
            source = files_dir / rel
            if not source.exists():
                results.append(RollbackResult(
                    success=False,
                    message=f"Snapshot copy missing for {rel}",
                    file=rel,
                ))
                continue
            target = self.project_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            results.append(RollbackResult(success=True, message=f"Restored {rel}", file=rel))
        return results
