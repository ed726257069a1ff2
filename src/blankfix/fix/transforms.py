"""Pure fix transforms: ``(content, finding) -> new_content``."""

from __future__ import annotations

import re
from typing import Callable

from blankfix.core.errors import TransformError
from blankfix.core.models import Finding, FixKind
from blankfix.scanner.detectors.template_literal import TEMPLATE_RE

Transform = Callable[[str, Finding], str]

EMERGENCY_STRAY_RE = re.compile(r"^(\s*)([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*)([ \t]*\r?)$", re.MULTILINE)


def _split_line(content: str, finding: Finding) -> tuple[list[str], int]:
    lines = content.splitlines(keepends=True)
    if finding.line is None or not 1 <= finding.line <= len(lines):
        raise TransformError(f"Line {finding.line} is outside {finding.file_path}")
    return lines, finding.line - 1


def comment_line(content: str, finding: Finding) -> str:
    """Turn the stray line into a line comment, keeping indentation and text."""
    lines, idx = _split_line(content, finding)
    original = lines[idx]
    body = original.rstrip("\r\n")
    ending = original[len(body):]
    text = body.strip()

    if finding.snippet and text != finding.snippet:
        raise TransformError(
            f"Line {finding.line} no longer reads '{finding.snippet}'. Re-run `blankfix scan` first."
        )
    indent = body[: len(body) - len(body.lstrip())]
    lines[idx] = f"{indent}// {text}{ending}"
    return "".join(lines)


def add_backticks(content: str, finding: Finding) -> str:
    """Wrap ``className={a ${b} c}`` expressions on the target line in backticks."""
    lines, idx = _split_line(content, finding)
    fixed, count = TEMPLATE_RE.subn(r"className={`\1${\2}\3`}", lines[idx])
    if not count:
        raise TransformError(f"No unquoted interpolation found on line {finding.line}")
    lines[idx] = fixed
    return "".join(lines)


def emergency_comment_stray_text(content: str) -> str:
    """Comment out every line made only of Capitalized Words."""
    return EMERGENCY_STRAY_RE.sub(r"\1// \2\3", content)


TRANSFORMS: dict[FixKind, Transform] = {
    FixKind.COMMENT_LINE: comment_line,
    FixKind.ADD_BACKTICKS: add_backticks,
}
