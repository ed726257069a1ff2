"""Shared data models used across blankfix modules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

MANUAL_INTERVENTION = "manual_intervention_required"


class Severity(enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FixKind(enum.Enum):
    COMMENT_LINE = "comment_line"
    ADD_BACKTICKS = "add_backticks"


@dataclass(frozen=True)
class Finding:
    """A single structural defect reported by a strategy or detector."""

    kind: str
    file_path: Path
    severity: Severity
    line: int | None = None
    fix_kind: FixKind | None = None
    message: str = ""
    snippet: str = ""

    @property
    def is_auto_fixable(self) -> bool:
        return self.fix_kind is not None

    @property
    def location(self) -> str:
        if self.line:
            return f"{self.file_path}:{self.line}"
        return str(self.file_path)


@dataclass
class ScanResult:
    """Output of one successful strategy execution."""

    strategy_name: str
    findings: list[Finding] = field(default_factory=list)
    files_examined: int = 0
    files_failed: int = 0
    scanned_at: datetime = field(default_factory=datetime.now)

    mode = "scan"

    @property
    def auto_fixable_count(self) -> int:
        return sum(1 for f in self.findings if f.is_auto_fixable)

    def summary(self) -> dict:
        """Scalar summary suitable for the success log."""
        return {
            "strategy": self.strategy_name,
            "findings": len(self.findings),
            "auto_fixable": self.auto_fixable_count,
            "files_examined": self.files_examined,
            "files_failed": self.files_failed,
        }


@dataclass
class Attempt:
    """One pass of the strategy chain under the retry controller."""

    index: int
    strategy_used: str
    result: ScanResult | None = None
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class Verification:
    """Verified, or Rejected(reason)."""

    verified: bool
    reason: str = ""

    @classmethod
    def ok(cls) -> Verification:
        return cls(verified=True)

    @classmethod
    def rejected(cls, reason: str) -> Verification:
        return cls(verified=False, reason=reason)


@dataclass
class FixRecord:
    """What the transaction manager did (or refused to do) for one finding."""

    finding: Finding
    applied: bool
    verification: Verification
    backup_path: Path | None = None
    instructions: str = ""

    @property
    def file(self) -> Path:
        return self.finding.file_path


@dataclass(frozen=True)
class BackupManifest:
    """A full-project snapshot of the critical files."""

    backup_id: str
    timestamp: str
    project_name: str
    snapshot_files: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.backup_id,
            "timestamp": self.timestamp,
            "project": self.project_name,
            "files": list(self.snapshot_files),
        }

    @classmethod
    def from_dict(cls, data: dict) -> BackupManifest:
        return cls(
            backup_id=data["id"],
            timestamp=data["timestamp"],
            project_name=data.get("project", ""),
            snapshot_files=tuple(data.get("files", [])),
        )


@dataclass
class RecoveryStep:
    file: str
    action: str
    backup_path: str | None
    verified: bool

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "action": self.action,
            "backup": self.backup_path,
            "verified": self.verified,
        }


@dataclass
class RecoveryPlan:
    """Durable description of how to undo one repair session."""

    plan_id: str
    backup_id: str
    created: str
    status: str
    backup_dir: str
    rollback_command: str
    steps: list[RecoveryStep] = field(default_factory=list)
    rollback_possible: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.plan_id,
            "backupId": self.backup_id,
            "created": self.created,
            "status": self.status,
            "steps": [s.to_dict() for s in self.steps],
            "rollback": {
                "possible": self.rollback_possible,
                "backupDir": self.backup_dir,
                "command": self.rollback_command,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> RecoveryPlan:
        rollback = data.get("rollback", {})
        return cls(
            plan_id=data["id"],
            backup_id=data["backupId"],
            created=data.get("created", ""),
            status=data.get("status", ""),
            backup_dir=rollback.get("backupDir", ""),
            rollback_command=rollback.get("command", ""),
            rollback_possible=rollback.get("possible", True),
            steps=[
                RecoveryStep(
                    file=s["file"],
                    action=s["action"],
                    backup_path=s.get("backup"),
                    verified=s.get("verified", False),
                )
                for s in data.get("steps", [])
            ],
        )


@dataclass
class FallbackReport:
    """Terminal report of the nuclear fallback."""

    project_root: Path
    last_error: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    files: list[dict] = field(default_factory=list)
    fix_records: list[FixRecord] = field(default_factory=list)

    mode = "nuclear_fallback"

    @property
    def needs_manual_intervention(self) -> bool:
        return any(str(r.file) == MANUAL_INTERVENTION for r in self.fix_records)


@dataclass
class PostFixCheck:
    file: str
    check: str
    passed: bool
    detail: str = ""


@dataclass
class PostFixReport:
    checks: list[PostFixCheck] = field(default_factory=list)

    @property
    def all_passed(self) -> bool:
        return all(c.passed for c in self.checks)

    def passed_for(self, file: str) -> bool:
        relevant = [c for c in self.checks if c.file == file]
        return bool(relevant) and all(c.passed for c in relevant)

    @property
    def summary(self) -> dict:
        passed = sum(1 for c in self.checks if c.passed)
        return {
            "total": len(self.checks),
            "passed": passed,
            "failed": len(self.checks) - passed,
        }


@dataclass
class RepairOutcome:
    """The single terminal value of one repair session."""

    mode: str
    fix_records: list[FixRecord]
    verification: PostFixReport
    manifest: BackupManifest | None = None
    plan: RecoveryPlan | None = None
    scan: ScanResult | None = None
    fallback: FallbackReport | None = None
    duration: float = 0.0
    dry_run: bool = False

    @property
    def applied(self) -> list[FixRecord]:
        return [r for r in self.fix_records if r.applied]

    @property
    def instructions(self) -> str:
        if self.fallback is not None and self.fallback.needs_manual_intervention:
            return next(
                r.instructions for r in self.fallback.fix_records
                if str(r.file) == MANUAL_INTERVENTION
            )
        if self.dry_run:
            return "Dry run: no files were changed"
        if self.verification.all_passed:
            return "All ultra-safe fixes applied successfully"
        return "Some fixes may need manual verification"
