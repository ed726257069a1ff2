"""Strategy chain executor — degrade through strategies until one succeeds."""

from __future__ import annotations

import json
import logging
import time
import traceback
from datetime import datetime
from pathlib import Path

from blankfix.core.errors import ChainExhausted, ProjectRootError, StrategyError
from blankfix.core.models import ScanResult
from blankfix.scanner.context import ScanContext
from blankfix.scanner.strategies import Strategy, default_strategies

logger = logging.getLogger(__name__)


class StrategyChainExecutor:
    """Tries an ordered list of strategies, highest fidelity first."""

    def __init__(
        self,
        project_path: Path,
        context: ScanContext,
        strategies: list[Strategy] | None = None,
    ):
        self.project_path = project_path
        self.context = context
        self.strategies = strategies if strategies is not None else default_strategies()

    def execute(self) -> ScanResult:
        """Return the first successful ScanResult or raise ChainExhausted."""
        failures: list[tuple[str, BaseException]] = []
        last_error: BaseException | None = None

        for strategy in self.strategies:
            if self.context.simple_mode and not strategy.supports_simple_mode:
                logger.info("Skipping strategy %s in simple mode", strategy.name)
                continue

            logger.info("Trying strategy: %s", strategy.name)
            try:
                return strategy.scan(self.project_path, self.context)
            except ProjectRootError:
                raise
            except StrategyError as e:
                last_error = e
            except Exception as e:
                # Unexpected crashes inside a strategy degrade the same way.
                last_error = StrategyError(strategy.name, f"{type(e).__name__}: {e}")
                last_error.__cause__ = e

            logger.warning("Strategy %s failed: %s", strategy.name, last_error)
            failures.append((strategy.name, last_error))
            self._save_diagnostic(strategy.name, last_error)

        raise ChainExhausted(last_error, failures)

    def _save_diagnostic(self, strategy_name: str, error: BaseException) -> Path | None:
        """Write one diagnostic dump. Dumps are for operators and never read back."""
        original = error.__cause__ or error
        dump = {
            "timestamp": datetime.now().isoformat(),
            "strategy": strategy_name,
            "error": str(error),
            "stack": "".join(
                traceback.format_exception(type(original), original, original.__traceback__)
            ),
        }
        diagnostics_dir = self.context.diagnostics_dir
        try:
            diagnostics_dir.mkdir(parents=True, exist_ok=True)
            dump_file = diagnostics_dir / f"core_{time.time_ns()}_{strategy_name}.json"
            dump_file.write_text(json.dumps(dump, indent=2))
        except OSError:
            logger.warning("Could not write diagnostic dump for %s", strategy_name, exc_info=True)
            return None
        return dump_file
