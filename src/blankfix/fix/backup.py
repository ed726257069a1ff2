"""Snapshot backups and recovery plans for repair sessions."""

from __future__ import annotations

import json
import logging
import secrets
import shlex
import shutil
import time
from datetime import datetime
from pathlib import Path

from blankfix.core.config import get_state_dir
from blankfix.core.errors import UnknownBackupError
from blankfix.core.models import (
    BackupManifest,
    FixRecord,
    PostFixReport,
    RecoveryPlan,
    RecoveryStep,
)

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"
PLAN_NAME = "recovery_plan.json"


class BackupManager:
    """Creates snapshots of critical files and persists recovery plans.

    Invoked once per repair session, independently of how many scan
    attempts that session needed.
    """

    def __init__(self, project_path: Path):
        self.project_path = project_path
        self.state_dir = get_state_dir(project_path)
        self.backup_dir = self.state_dir / "backups"
        self.plan_path = self.state_dir / PLAN_NAME

    def create_snapshot(self, root: Path, critical_paths: list[str]) -> BackupManifest:
        """Copy the critical files that exist into a new backup directory."""
        backup_id = f"backup_{int(time.time() * 1000)}_{secrets.token_hex(4)}"
        session_dir = self.backup_dir / backup_id
        files_dir = session_dir / "files"
        files_dir.mkdir(parents=True)

        copied = []
        for rel in critical_paths:
            source = root / rel
            if not source.is_file():
                continue
            dest = files_dir / rel
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
            copied.append(rel)

        manifest = BackupManifest(
            backup_id=backup_id,
            timestamp=datetime.now().isoformat(),
            project_name=root.name,
            snapshot_files=tuple(copied),
        )
        (session_dir / MANIFEST_NAME).write_text(json.dumps(manifest.to_dict(), indent=2))
        logger.info("Created snapshot %s (%d files)", backup_id, len(copied))
        return manifest

    def load_manifest(self, backup_id: str) -> BackupManifest:
        manifest_file = self.backup_dir / backup_id / MANIFEST_NAME
        if not manifest_file.exists():
            raise UnknownBackupError(f"No manifest for backup {backup_id}")
        return BackupManifest.from_dict(json.loads(manifest_file.read_text()))

    def list_backups(self) -> list[BackupManifest]:
        """All snapshots, newest first."""
        manifests = []
        if not self.backup_dir.exists():
            return manifests
        for session_dir in sorted(self.backup_dir.iterdir(), reverse=True):
            manifest_file = session_dir / MANIFEST_NAME
            if manifest_file.exists():
                manifests.append(BackupManifest.from_dict(json.loads(manifest_file.read_text())))
        return manifests

    def build_recovery_plan(
        self,
        backup_id: str,
        fix_records: list[FixRecord],
        verification_results: PostFixReport,
    ) -> RecoveryPlan:
        """Assemble the undo plan for a session and persist it."""
        self.load_manifest(backup_id)
        snapshot_dir = self.backup_dir / backup_id

        steps = []
        for record in fix_records:
            file = record.file.as_posix()
            steps.append(RecoveryStep(
                file=file,
                action=record.finding.fix_kind.value if record.applied else "skipped",
                backup_path=str(record.backup_path) if record.backup_path else None,
                verified=record.applied and verification_results.passed_for(file),
            ))

        status = "success" if verification_results.all_passed else "partial"
        plan = RecoveryPlan(
            plan_id=f"recovery_{int(time.time() * 1000)}",
            backup_id=backup_id,
            created=datetime.now().isoformat(),
            status=status,
            backup_dir=str(snapshot_dir),
            rollback_command=(
                f"cp -r {shlex.quote(str(snapshot_dir / 'files'))}/. "
                f"{shlex.quote(str(self.project_path))}/"
            ),
            steps=steps,
        )
        self.plan_path.write_text(json.dumps(plan.to_dict(), indent=2))
        logger.info("Recovery plan %s written to %s", plan.plan_id, self.plan_path)
        return plan

    def load_plan(self) -> RecoveryPlan | None:
        if not self.plan_path.exists():
            return None
        return RecoveryPlan.from_dict(json.loads(self.plan_path.read_text()))
