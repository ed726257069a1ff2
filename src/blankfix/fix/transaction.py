"""Safe-fix transaction manager: backup, mutate, verify, commit or roll back."""

from __future__ import annotations

import logging
from pathlib import Path

from blankfix.core.errors import TransformError, VerificationRejected
from blankfix.core.models import Finding, FixKind, FixRecord, ScanResult, Severity, Verification
from blankfix.fix.transforms import TRANSFORMS, Transform
from blankfix.fix.verifiers import Verifier, default_verifier

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".blankfix_backup"

# Closed allow-list. Extending it is a code change, not a config option.
ULTRA_SAFE_FIX_KINDS = frozenset({FixKind.COMMENT_LINE, FixKind.ADD_BACKTICKS})


def read_source(path: Path) -> str:
    """Read text without newline translation so backups stay byte-for-byte."""
    return path.read_bytes().decode("utf-8")


def write_source(path: Path, content: str) -> None:
    path.write_bytes(content.encode("utf-8"))


def backup_path_for(file_path: Path) -> Path:
    """First free sibling backup name: ``x.jsx.blankfix_backup``, then ``.1``, ``.2``..."""
    backup = file_path.with_name(file_path.name + BACKUP_SUFFIX)
    counter = 1
    while backup.exists():
        backup = file_path.with_name(f"{file_path.name}{BACKUP_SUFFIX}.{counter}")
        counter += 1
    return backup


def write_backup(file_path: Path, content: str) -> Path:
    backup = backup_path_for(file_path)
    write_source(backup, content)
    return backup


class SafeFixTransactionManager:
    """Applies ultra-safe fixes one file transaction at a time."""

    def __init__(
        self,
        project_path: Path,
        transforms: dict[FixKind, Transform] | None = None,
        verifier: Verifier | None = None,
        dry_run: bool = False,
    ):
        self.project_path = project_path
        self.transforms = transforms if transforms is not None else dict(TRANSFORMS)
        self.verifier = verifier or default_verifier()
        self.dry_run = dry_run

    def is_ultra_safe(self, finding: Finding) -> bool:
        return (
            finding.fix_kind in ULTRA_SAFE_FIX_KINDS
            and finding.severity == Severity.HIGH
            and finding.fix_kind in self.transforms
        )

    def apply_all(self, scan_result: ScanResult) -> list[FixRecord]:
        records = []
        for finding in scan_result.findings:
            if not self.is_ultra_safe(finding):
                records.append(FixRecord(
                    finding=finding,
                    applied=False,
                    verification=Verification.rejected("not ultra-safe"),
                ))
                continue
            records.append(self.apply(finding))
        return records

    def apply(self, finding: Finding) -> FixRecord:
        """Run one file transaction for *finding*."""
        file_path = self._resolve_file(finding.file_path)

        if not file_path.exists():
            return self._reject(finding, f"File not found: {finding.file_path}")

        try:
            content = read_source(file_path)
        except (OSError, UnicodeDecodeError) as e:
            return self._reject(finding, f"Cannot read {finding.file_path}: {e}")

        try:
            candidate = self.transforms[finding.fix_kind](content, finding)
        except TransformError as e:
            return self._reject(finding, str(e))

        if candidate == content:
            return self._reject(finding, "No change produced")

        try:
            self.verifier.verify(content, candidate)
        except VerificationRejected as e:
            return self._reject(finding, e.reason)

        if self.dry_run:
            return FixRecord(finding=finding, applied=False, verification=Verification.ok())

        try:
            backup = write_backup(file_path, content)
        except OSError as e:
            return self._reject(finding, f"Could not write backup: {e}")

        try:
            write_source(file_path, candidate)
        except OSError as e:
            return self._reject(finding, self._restore(file_path, backup, e), backup)

        logger.info("Fixed %s (%s) at %s", finding.kind, finding.fix_kind.value, finding.location)
        return FixRecord(
            finding=finding,
            applied=True,
            verification=Verification.ok(),
            backup_path=backup,
        )

    def _restore(self, file_path: Path, backup: Path, error: OSError) -> str:
        try:
            write_source(file_path, read_source(backup))
        except OSError:
            logger.error("Could not restore %s; original content is in %s", file_path, backup)
            return f"Write failed ({error}); restore failed, original kept in {backup.name}"
        return f"Write failed ({error}); original restored"

    def _reject(self, finding: Finding, reason: str, backup: Path | None = None) -> FixRecord:
        logger.warning("Rejected fix for %s: %s", finding.location, reason)
        return FixRecord(
            finding=finding,
            applied=False,
            verification=Verification.rejected(reason),
            backup_path=backup,
        )

    def _resolve_file(self, file: Path) -> Path:
        """Resolve a possibly relative file path."""
        if file.is_absolute():
            return file
        return self.project_path / file
