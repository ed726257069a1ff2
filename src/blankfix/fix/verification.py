"""Post-fix checks over the files a session actually changed."""

from __future__ import annotations

from pathlib import Path

from blankfix.core.models import FixRecord, PostFixCheck, PostFixReport
from blankfix.fix.transaction import read_source
from blankfix.fix.verifiers import has_unterminated_block_comment


def verify_applied(project_path: Path, records: list[FixRecord]) -> PostFixReport:
    report = PostFixReport()
    for record in records:
        if not record.applied:
            continue
        file = record.file.as_posix()
        path = record.file if record.file.is_absolute() else project_path / record.file

        backup_ok = record.backup_path is not None and record.backup_path.exists()
        report.checks.append(PostFixCheck(
            file=file,
            check="backup_exists",
            passed=backup_ok,
            detail="" if backup_ok else "Backup file missing",
        ))

        try:
            content = read_source(path)
        except (OSError, UnicodeDecodeError) as e:
            report.checks.append(PostFixCheck(file=file, check="readable", passed=False, detail=str(e)))
            continue

        if has_unterminated_block_comment(content):
            report.checks.append(PostFixCheck(
                file=file, check="block_comments", passed=False, detail="Unclosed block comment",
            ))
        elif _is_module(content) and "<" in content and "React" not in content and path.suffix == ".jsx":
            report.checks.append(PostFixCheck(
                file=file, check="react_import", passed=False, detail="JSX without React import",
            ))
        else:
            report.checks.append(PostFixCheck(file=file, check="basic_syntax", passed=True))
    return report


def _is_module(content: str) -> bool:
    return "import " in content or "export " in content
