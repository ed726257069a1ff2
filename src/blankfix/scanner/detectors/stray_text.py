"""Stray text: a bare line of Capitalized Words left in a source file."""

from __future__ import annotations

import re
from pathlib import Path

from blankfix.core.models import Finding, FixKind, Severity
from blankfix.scanner.detectors.base import BaseDetector

STRAY_TEXT_RE = re.compile(r"^[A-Z][a-z]+(\s+[A-Z][a-z]+)*$")

_CODE_PREFIXES = (
    "//", "/*", "*", "import", "export", "function",
    "const", "let", "var", "class", "return",
)
_CODE_CHARS = set("={}()<>;")


def is_stray_text(line: str) -> bool:
    trimmed = line.strip()
    if not trimmed or not STRAY_TEXT_RE.match(trimmed):
        return False
    if trimmed.startswith(_CODE_PREFIXES):
        return False
    return not any(c in _CODE_CHARS for c in trimmed)


class StrayTextDetector(BaseDetector):
    """Detect plain text lines that are not code, e.g. ``Core Providers``."""

    kind = "stray_text"
    severity = Severity.HIGH
    fix_kind = FixKind.COMMENT_LINE
    description = "Stray text outside any expression"

    def detect(self, file_path: Path, content: str) -> list[Finding]:
        findings = []
        in_block_comment = False
        for index, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()
            if in_block_comment:
                if "*/" in stripped:
                    in_block_comment = False
                continue
            if stripped.startswith("/*") and "*/" not in stripped:
                in_block_comment = True
                continue
            if is_stray_text(line):
                findings.append(self._make_finding(
                    message=f"Stray text '{stripped}' breaks module evaluation",
                    file_path=file_path,
                    line=index,
                    snippet=stripped,
                ))
        return findings
