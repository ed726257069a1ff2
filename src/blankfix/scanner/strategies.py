"""Analysis strategies, ordered from highest to lowest structural fidelity."""

from __future__ import annotations

import hashlib
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path

from blankfix.core.errors import StrategyError
from blankfix.core.models import Finding, ScanResult, Severity
from blankfix.scanner.context import ScanContext
from blankfix.scanner.detectors import default_detectors
from blankfix.scanner.detectors.base import BaseDetector
from blankfix.scanner.tokenizer import JSX_SUFFIXES, LexError, check_nesting, tokenize

logger = logging.getLogger(__name__)

ENTRY_POINT_NAMES = {"main.jsx", "main.js", "index.jsx", "index.js", "App.jsx", "App.js"}


class Strategy(ABC):
    """One analysis implementation of a given fidelity level."""

    name: str = ""
    supports_simple_mode: bool = True

    @abstractmethod
    def scan(self, project_path: Path, context: ScanContext) -> ScanResult:
        """Scan the project. Raise StrategyError if this strategy cannot run."""
        ...

    def collect_files(self, project_path: Path, context: ScanContext) -> list[Path]:
        """Collect source files, excluding configured patterns."""
        extensions = set(context.config.scan.extensions)
        files: list[Path] = []
        for path in project_path.rglob("*"):
            if path.suffix not in extensions or not path.is_file():
                continue
            rel = path.relative_to(project_path).as_posix()
            parts = rel.split("/")
            if any(excl.rstrip("/") in parts for excl in context.config.exclude):
                continue
            files.append(path)
        return sorted(files)


class ContentStrategy(Strategy):
    """Shared per-file loop for strategies that read file content."""

    def __init__(self, detectors: list[BaseDetector] | None = None):
        self.detectors = detectors if detectors is not None else default_detectors()

    def scan(self, project_path: Path, context: ScanContext) -> ScanResult:
        files = self.collect_files(project_path, context)
        limit = self.file_limit(context)
        if limit is not None and len(files) > limit:
            logger.info("%s: simple mode, examining first %d of %d files", self.name, limit, len(files))
            files = files[:limit]

        result = ScanResult(strategy_name=self.name)
        for file_path in files:
            rel = file_path.relative_to(project_path)
            result.files_examined += 1
            try:
                content = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                logger.debug("%s: cannot read %s", self.name, rel, exc_info=True)
                result.files_failed += 1
                continue

            file_ok = self.analyze_file(rel, content, result, context)
            if not file_ok:
                result.files_failed += 1
            result.findings.extend(self.run_detectors(rel, content))

        self.finish(result, context)
        logger.info(
            "%s: %d findings in %d files (%d failed)",
            self.name, len(result.findings), result.files_examined, result.files_failed,
        )
        return result

    def file_limit(self, context: ScanContext) -> int | None:
        return None

    def analyze_file(self, rel: Path, content: str, result: ScanResult, context: ScanContext) -> bool:
        """Strategy-specific analysis. Return False if the file failed to parse."""
        return True

    def finish(self, result: ScanResult, context: ScanContext) -> None:
        """Hook run after every file was examined."""

    def run_detectors(self, rel: Path, content: str) -> list[Finding]:
        findings: list[Finding] = []
        for detector in self.detectors:
            try:
                findings.extend(detector.detect(rel, content))
            except Exception:
                logger.debug("Detector %s failed on %s", detector.kind, rel, exc_info=True)
                continue  # Don't fail the strategy if one detector errors
        return findings


class StructuralParserStrategy(ContentStrategy):
    """Strict lexing plus delimiter nesting, with a digest-keyed cache."""

    name = "structural"
    supports_simple_mode = False

    def analyze_file(self, rel: Path, content: str, result: ScanResult, context: ScanContext) -> bool:
        jsx = rel.suffix in JSX_SUFFIXES
        digest = hashlib.sha256(content.encode("utf-8")).hexdigest()
        if jsx:
            digest += "-jsx"
        outcome = context.cached_outcome(digest)
        if outcome is None:
            outcome = self._parse(content, jsx)
            context.store_outcome(digest, outcome)

        if outcome["ok"]:
            return True

        result.findings.append(Finding(
            kind="parse_error",
            file_path=rel,
            severity=Severity.CRITICAL,
            line=outcome.get("line"),
            message=outcome.get("error", "Parse error"),
        ))
        return False

    def finish(self, result: ScanResult, context: ScanContext) -> None:
        if not result.files_examined:
            return
        ratio = result.files_failed / result.files_examined
        threshold = context.config.scan.parse_failure_threshold
        if ratio > threshold:
            raise StrategyError(
                self.name,
                f"{result.files_failed}/{result.files_examined} files failed to parse "
                f"(threshold {threshold:.0%})",
            )

    @staticmethod
    def _parse(content: str, jsx: bool) -> dict:
        try:
            check_nesting(tokenize(content, strict=True, jsx=jsx))
        except LexError as e:
            return {"ok": False, "error": str(e), "line": e.line}
        return {"ok": True}


class TokenizerStrategy(ContentStrategy):
    """Lenient lexing; reports net delimiter imbalance but never fails a file."""

    name = "tokenizer"

    def file_limit(self, context: ScanContext) -> int | None:
        if context.simple_mode:
            return context.config.scan.simple_mode_file_limit
        return None

    def analyze_file(self, rel: Path, content: str, result: ScanResult, context: ScanContext) -> bool:
        imbalance = tokenize(content, strict=False, jsx=rel.suffix in JSX_SUFFIXES).imbalance()
        if imbalance:
            detail = ", ".join(f"'{k}' {v:+d}" for k, v in sorted(imbalance.items()))
            result.findings.append(Finding(
                kind="delimiter_imbalance",
                file_path=rel,
                severity=Severity.MEDIUM,
                message=f"Unbalanced delimiters: {detail}",
            ))
        return True


class LinePatternStrategy(ContentStrategy):
    """Detectors only, on raw text."""

    name = "line_pattern"


class MetadataStrategy(Strategy):
    """Last resort: look at file metadata without reading content."""

    name = "metadata"

    def scan(self, project_path: Path, context: ScanContext) -> ScanResult:
        result = ScanResult(strategy_name=self.name)
        window = context.config.scan.recent_window_hours * 3600
        now = time.time()

        for file_path in self.collect_files(project_path, context):
            rel = file_path.relative_to(project_path)
            result.files_examined += 1
            try:
                stats = file_path.stat()
            except OSError:
                result.files_failed += 1
                continue

            if stats.st_size == 0 and file_path.name in ENTRY_POINT_NAMES:
                result.findings.append(Finding(
                    kind="empty_entry_point",
                    file_path=rel,
                    severity=Severity.HIGH,
                    message="Entry point file is empty",
                ))
            elif file_path.suffix == ".jsx" and now - stats.st_mtime < window:
                result.findings.append(Finding(
                    kind="recently_modified",
                    file_path=rel,
                    severity=Severity.LOW,
                    message="JSX file modified recently; review it first",
                ))

        logger.info("%s: analyzed %d files", self.name, result.files_examined)
        return result


def default_strategies() -> list[Strategy]:
    """The standard chain, highest fidelity first."""
    return [
        StructuralParserStrategy(),
        TokenizerStrategy(),
        LinePatternStrategy(),
        MetadataStrategy(),
    ]
