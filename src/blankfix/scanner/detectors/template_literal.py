"""Template literal: a ``${}`` interpolation inside a JSX expression without backticks."""

from __future__ import annotations

import re
from pathlib import Path

from blankfix.core.models import Finding, FixKind, Severity
from blankfix.scanner.detectors.base import BaseDetector

# className={foo ${bar} baz} on a single line; the body must not start with a backtick.
TEMPLATE_RE = re.compile(r"className=\{[ \t]*(?!`)([^{}`\n]*)\$\{([^{}\n]*)\}([^{}`\n]*)\}")


class TemplateLiteralDetector(BaseDetector):
    """Detect interpolations written without the surrounding backticks."""

    kind = "template_literal"
    severity = Severity.HIGH
    fix_kind = FixKind.ADD_BACKTICKS
    description = "Interpolation in JSX attribute is missing backticks"

    def detect(self, file_path: Path, content: str) -> list[Finding]:
        findings = []
        for match in TEMPLATE_RE.finditer(content):
            line = content.count("\n", 0, match.start()) + 1
            findings.append(self._make_finding(
                message="className interpolation without backticks renders a syntax error",
                file_path=file_path,
                line=line,
                snippet=match.group(0),
            ))
        return findings
