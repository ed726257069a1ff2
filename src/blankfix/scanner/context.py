"""Mutable scan state owned by the retry controller.

Everything the recovery actions are allowed to touch lives here and is
passed explicitly to the chain executor and its strategies.
"""

from __future__ import annotations

import enum
import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from blankfix.core.config import BlankfixConfig, get_state_dir

logger = logging.getLogger(__name__)


class ScanMode(enum.Enum):
    FULL = "full"
    SIMPLE = "simple"


@dataclass
class ParserState:
    """In-memory memo of parse outcomes keyed by content digest."""

    memo: dict[str, dict] = field(default_factory=dict)
    generation: int = 0

    def reset(self) -> None:
        self.memo = {}
        self.generation += 1


class ScanContext:
    """Cache directory, parser state and mode flag for one scan run."""

    def __init__(self, project_path: Path, config: BlankfixConfig):
        self.project_path = project_path
        self.config = config
        self.state_dir = get_state_dir(project_path)
        self.cache_dir = self.state_dir / "cache"
        self.cache_dir.mkdir(exist_ok=True)
        self.diagnostics_dir = self.state_dir / "cores"
        self.parser_state = ParserState()
        self.mode = ScanMode.FULL

    @property
    def simple_mode(self) -> bool:
        return self.mode is ScanMode.SIMPLE

    def purge_cache(self) -> None:
        """Delete the on-disk cache and recreate it empty."""
        if self.cache_dir.exists():
            shutil.rmtree(self.cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def cached_outcome(self, digest: str) -> dict | None:
        if digest in self.parser_state.memo:
            return self.parser_state.memo[digest]
        cache_file = self.cache_dir / f"{digest}.json"
        if not cache_file.exists():
            return None
        try:
            outcome = json.loads(cache_file.read_text())
        except (OSError, json.JSONDecodeError):
            logger.debug("Ignoring unreadable cache entry %s", cache_file)
            return None
        self.parser_state.memo[digest] = outcome
        return outcome

    def store_outcome(self, digest: str, outcome: dict) -> None:
        self.parser_state.memo[digest] = outcome
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            (self.cache_dir / f"{digest}.json").write_text(json.dumps(outcome))
        except OSError:
            logger.debug("Could not write cache entry for %s", digest, exc_info=True)
