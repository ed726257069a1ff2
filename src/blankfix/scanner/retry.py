"""Retry controller — bounded re-attempts of the strategy chain.

The controller walks ``IDLE -> RUNNING -> {SUCCEEDED, EXHAUSTED}``. After
each failed attempt it applies the next action of a fixed recovery policy
(whatever the error was) and tries again. When ``max_retries`` attempts
have failed it hands over to the nuclear fallback and returns that report
instead of raising.
"""

from __future__ import annotations

import enum
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from blankfix.core.config import BlankfixConfig, load_config
from blankfix.core.errors import ChainExhausted, ProjectRootError, RetriesExhausted
from blankfix.core.models import Attempt, FallbackReport, ScanResult
from blankfix.fix.fallback import NuclearFallback
from blankfix.scanner.chain import StrategyChainExecutor
from blankfix.scanner.context import ScanContext, ScanMode
from blankfix.scanner.strategies import Strategy

logger = logging.getLogger(__name__)


class ControllerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


class RecoveryAction:
    """One step of the recovery policy."""

    name: str = ""

    def apply(self, controller: RetryController, attempt_index: int) -> None:
        raise NotImplementedError


class PurgeCache(RecoveryAction):
    name = "purge_cache"

    def apply(self, controller: RetryController, attempt_index: int) -> None:
        controller.context.purge_cache()


class ReinitializeParser(RecoveryAction):
    name = "reinitialize_parser"

    def apply(self, controller: RetryController, attempt_index: int) -> None:
        controller.context.parser_state.reset()


class SwitchToSimpleMode(RecoveryAction):
    name = "simple_mode"

    def apply(self, controller: RetryController, attempt_index: int) -> None:
        controller.context.mode = ScanMode.SIMPLE


@dataclass
class Backoff(RecoveryAction):
    step_seconds: float = 2.0
    max_seconds: float = 30.0

    name = "backoff"

    def delay_for(self, attempt_index: int) -> float:
        return min(attempt_index * self.step_seconds, self.max_seconds)

    def apply(self, controller: RetryController, attempt_index: int) -> None:
        delay = self.delay_for(attempt_index)
        logger.info("Waiting %.0fs before retry", delay)
        controller.sleep(delay)


def default_policy(config: BlankfixConfig) -> tuple[RecoveryAction, ...]:
    return (
        PurgeCache(),
        ReinitializeParser(),
        SwitchToSimpleMode(),
        Backoff(
            step_seconds=config.engine.backoff_step_seconds,
            max_seconds=config.engine.max_backoff_seconds,
        ),
    )


def ensure_readable_root(project_path: Path) -> None:
    """Raise ProjectRootError if no strategy could possibly read the root."""
    if not project_path.is_dir():
        raise ProjectRootError(f"Project root is not a directory: {project_path}")
    try:
        next(project_path.iterdir(), None)
    except OSError as e:
        raise ProjectRootError(f"Cannot read project root {project_path}: {e}") from e


class RetryController:
    """Drives the strategy chain under a bounded, blunt recovery policy."""

    def __init__(
        self,
        project_path: Path | None = None,
        config: BlankfixConfig | None = None,
        strategies: list[Strategy] | None = None,
        policy: tuple[RecoveryAction, ...] | None = None,
        fallback: NuclearFallback | None = None,
        sleep: Callable[[float], None] = time.sleep,
        dry_run: bool = False,
    ):
        self.project_path = (project_path or Path.cwd()).resolve()
        self.config = config or load_config(self.project_path)
        self.max_retries = self.config.engine.max_retries
        self.policy = policy if policy is not None else default_policy(self.config)
        self.fallback = fallback or NuclearFallback(self.project_path, dry_run=dry_run)
        self.sleep = sleep
        self.state = ControllerState.IDLE
        self.attempts: list[Attempt] = []
        self._strategies = strategies
        self.context: ScanContext | None = None
        self.executor: StrategyChainExecutor | None = None

    def run(self) -> ScanResult | FallbackReport:
        """Scan until a strategy succeeds or the retries run out."""
        ensure_readable_root(self.project_path)
        self.context = ScanContext(self.project_path, self.config)
        self.executor = StrategyChainExecutor(self.project_path, self.context, self._strategies)
        self.attempts = []
        self.state = ControllerState.RUNNING
        last_error: BaseException | None = None

        for index in range(1, self.max_retries + 1):
            logger.info("Attempt %d/%d", index, self.max_retries)
            try:
                result = self.executor.execute()
            except ChainExhausted as e:
                last_error = e.last_error or e
                self.attempts.append(Attempt(index=index, strategy_used=e.last_strategy, error=last_error))
                logger.warning("Attempt %d failed: %s", index, last_error)
                if index < self.max_retries:
                    self._recover(index)
                continue

            self.attempts.append(Attempt(index=index, strategy_used=result.strategy_name, result=result))
            self._record_success("scan", result)
            self.state = ControllerState.SUCCEEDED
            return result

        self.state = ControllerState.EXHAUSTED
        exhausted = RetriesExhausted(len(self.attempts), last_error)
        logger.warning("%s; activating nuclear fallback", exhausted)
        return self.fallback.run(exhausted.last_error)

    def select_action(self, attempt_index: int) -> RecoveryAction:
        return self.policy[(attempt_index - 1) % len(self.policy)]

    def _recover(self, attempt_index: int) -> None:
        action = self.select_action(attempt_index)
        logger.info("Applying recovery action %s after attempt %d", action.name, attempt_index)
        action.apply(self, attempt_index)

    def _record_success(self, operation: str, result: ScanResult) -> None:
        """Append an entry to the success log (a JSON array on disk)."""
        success_file = self.context.state_dir / "success_log.json"
        entry = {
            "timestamp": datetime.now().isoformat(),
            "operation": operation,
            "result_summary": result.summary(),
        }
        try:
            log = self._load_success_log(success_file)
            log.append(entry)
            success_file.write_text(json.dumps(log, indent=2))
        except OSError as e:
            logger.warning("Could not update success log: %s", e)

    @staticmethod
    def _load_success_log(success_file: Path) -> list[dict]:
        if not success_file.exists():
            return []
        try:
            log = json.loads(success_file.read_text())
        except json.JSONDecodeError:
            log = None
        if isinstance(log, list):
            return log
        aside = success_file.with_name(f"success_log.{time.time_ns()}.corrupt.json")
        logger.warning("Success log is corrupt; moved to %s", aside.name)
        success_file.rename(aside)
        return []
