"""Tests for post-fix checks."""

from __future__ import annotations

from pathlib import Path

from blankfix.core.models import Finding, FixKind, FixRecord, Severity, Verification
from blankfix.fix.verification import verify_applied


def _applied(rel: str, backup: Path | None) -> FixRecord:
    return FixRecord(
        finding=Finding(
            kind="stray_text",
            file_path=Path(rel),
            severity=Severity.HIGH,
            line=1,
            fix_kind=FixKind.COMMENT_LINE,
        ),
        applied=True,
        verification=Verification.ok(),
        backup_path=backup,
    )


def _write(root: Path, rel: str, content: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def test_clean_file_passes(tmp_path: Path):
    _write(tmp_path, "src/main.jsx", "import React from 'react';\n// Core Providers\n")
    backup = _write(tmp_path, "src/main.jsx.blankfix_backup", "x")

    report = verify_applied(tmp_path, [_applied("src/main.jsx", backup)])

    assert report.all_passed
    assert [c.check for c in report.checks] == ["backup_exists", "basic_syntax"]
    assert report.passed_for("src/main.jsx")


def test_missing_backup_and_open_comment_fail(tmp_path: Path):
    _write(tmp_path, "src/App.jsx", "import React from 'react';\n/* open\n")

    report = verify_applied(tmp_path, [_applied("src/App.jsx", tmp_path / "gone")])

    assert not report.all_passed
    assert {c.check for c in report.checks if not c.passed} == {"backup_exists", "block_comments"}
    assert report.summary == {"total": 2, "passed": 0, "failed": 2}


def test_jsx_module_without_react_is_flagged(tmp_path: Path):
    _write(tmp_path, "src/Card.jsx", "export default () => <div />;\n")
    backup = _write(tmp_path, "src/Card.jsx.blankfix_backup", "x")

    report = verify_applied(tmp_path, [_applied("src/Card.jsx", backup)])

    assert [c.check for c in report.checks if not c.passed] == ["react_import"]


def test_unapplied_records_are_ignored(tmp_path: Path):
    record = _applied("src/main.jsx", None)
    record.applied = False
    assert verify_applied(tmp_path, [record]).checks == []
