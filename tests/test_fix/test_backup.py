"""Tests for session snapshots and recovery plans."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from blankfix.core.errors import UnknownBackupError
from blankfix.core.models import (
    Finding,
    FixKind,
    FixRecord,
    PostFixCheck,
    PostFixReport,
    Severity,
    Verification,
)
from blankfix.fix.backup import BackupManager


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.jsx").write_text("Core Providers\n")
    (tmp_path / "package.json").write_text('{"name": "demo"}\n')
    return tmp_path


@pytest.fixture
def backups(project: Path) -> BackupManager:
    return BackupManager(project)


def _record(applied: bool, fix_kind: FixKind | None = FixKind.COMMENT_LINE, backup: Path | None = None) -> FixRecord:
    return FixRecord(
        finding=Finding(
            kind="stray_text",
            file_path=Path("src/main.jsx"),
            severity=Severity.HIGH,
            line=1,
            fix_kind=fix_kind,
        ),
        applied=applied,
        verification=Verification.ok() if applied else Verification.rejected("not ultra-safe"),
        backup_path=backup,
    )


class TestSnapshot:
    def test_copies_existing_critical_files(self, backups: BackupManager, project: Path):
        manifest = backups.create_snapshot(project, ["src/main.jsx", "package.json", "src/App.jsx"])

        assert manifest.snapshot_files == ("src/main.jsx", "package.json")
        assert manifest.project_name == project.name
        files_dir = backups.backup_dir / manifest.backup_id / "files"
        assert (files_dir / "src" / "main.jsx").read_text() == "Core Providers\n"

    def test_manifest_on_disk(self, backups: BackupManager, project: Path):
        manifest = backups.create_snapshot(project, ["package.json"])

        data = json.loads((backups.backup_dir / manifest.backup_id / "manifest.json").read_text())
        assert data == {
            "id": manifest.backup_id,
            "timestamp": manifest.timestamp,
            "project": project.name,
            "files": ["package.json"],
        }
        assert backups.load_manifest(manifest.backup_id) == manifest

    def test_backup_ids_are_unique(self, backups: BackupManager, project: Path):
        ids = {backups.create_snapshot(project, ["package.json"]).backup_id for _ in range(3)}
        assert len(ids) == 3
        assert len(backups.list_backups()) == 3

    def test_unknown_backup(self, backups: BackupManager):
        with pytest.raises(UnknownBackupError):
            backups.load_manifest("backup_0_deadbeef")


class TestRecoveryPlan:
    def test_plan_json_shape(self, backups: BackupManager, project: Path):
        manifest = backups.create_snapshot(project, ["src/main.jsx"])
        sibling = project / "src" / "main.jsx.blankfix_backup"
        sibling.write_text("Core Providers\n")
        report = PostFixReport(checks=[PostFixCheck(file="src/main.jsx", check="basic_syntax", passed=True)])

        backups.build_recovery_plan(
            manifest.backup_id,
            [_record(True, backup=sibling), _record(False, fix_kind=None)],
            report,
        )

        data = json.loads((project / ".blankfix" / "recovery_plan.json").read_text())
        assert set(data) == {"id", "backupId", "created", "status", "steps", "rollback"}
        assert data["backupId"] == manifest.backup_id
        assert data["status"] == "success"
        assert data["steps"] == [
            {"file": "src/main.jsx", "action": "comment_line", "backup": str(sibling), "verified": True},
            {"file": "src/main.jsx", "action": "skipped", "backup": None, "verified": False},
        ]
        assert data["rollback"]["possible"] is True
        assert data["rollback"]["backupDir"] == str(backups.backup_dir / manifest.backup_id)
        assert data["rollback"]["command"].startswith("cp -r ")

    def test_partial_status_when_verification_fails(self, backups: BackupManager, project: Path):
        manifest = backups.create_snapshot(project, ["src/main.jsx"])
        report = PostFixReport(checks=[
            PostFixCheck(file="src/main.jsx", check="block_comments", passed=False),
        ])

        plan = backups.build_recovery_plan(manifest.backup_id, [_record(True)], report)

        assert plan.status == "partial"
        assert plan.steps[0].verified is False

    def test_plan_round_trips_through_disk(self, backups: BackupManager, project: Path):
        manifest = backups.create_snapshot(project, ["src/main.jsx"])
        plan = backups.build_recovery_plan(manifest.backup_id, [_record(True)], PostFixReport())
        assert backups.load_plan() == plan

    def test_plan_requires_known_backup(self, backups: BackupManager):
        with pytest.raises(UnknownBackupError):
            backups.build_recovery_plan("backup_missing", [], PostFixReport())

    def test_no_plan_yet(self, backups: BackupManager):
        assert backups.load_plan() is None
