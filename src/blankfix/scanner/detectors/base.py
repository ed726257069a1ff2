"""Base detector class for all issue detectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from blankfix.core.models import Finding, FixKind, Severity


class BaseDetector(ABC):
    """Abstract base class for all issue detectors.

    A detector receives a file's content and path and returns zero or more
    findings. It must not mutate files, and it returns an empty list rather
    than raising on parse noise.
    """

    kind: str = ""
    severity: Severity = Severity.MEDIUM
    fix_kind: FixKind | None = None
    description: str = ""

    @abstractmethod
    def detect(self, file_path: Path, content: str) -> list[Finding]:
        """Run the detector on a single file. Return list of findings."""
        ...

    def _make_finding(
        self,
        message: str,
        file_path: Path,
        line: int | None = None,
        snippet: str = "",
        severity: Severity | None = None,
    ) -> Finding:
        """Helper to create a Finding with this detector's defaults."""
        return Finding(
            kind=self.kind,
            file_path=file_path,
            severity=severity or self.severity,
            line=line,
            fix_kind=self.fix_kind,
            message=message,
            snippet=snippet,
        )
