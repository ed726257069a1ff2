"""Error taxonomy for the scan-and-repair engine."""

from __future__ import annotations


class BlankfixError(Exception):
    """Base class for all blankfix errors."""


class StrategyError(BlankfixError):
    """An analysis strategy could not produce a result.

    Recoverable: the chain executor falls through to the next strategy.
    """

    def __init__(self, strategy: str, message: str):
        super().__init__(message)
        self.strategy = strategy


class ChainExhausted(BlankfixError):
    """Every strategy in the chain failed during one attempt."""

    def __init__(self, last_error: BaseException | None, failures: list[tuple[str, BaseException]]):
        message = str(last_error) if last_error else "All scan strategies failed"
        super().__init__(message)
        self.last_error = last_error
        self.failures = failures

    @property
    def last_strategy(self) -> str:
        return self.failures[-1][0] if self.failures else ""


class VerificationRejected(BlankfixError):
    """A candidate edit failed verification; only that file is rolled back."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TransformError(BlankfixError):
    """A fix transform could not locate its target in the current content."""


class RetriesExhausted(BlankfixError):
    """Every retry attempt failed. Handled by the nuclear fallback."""

    def __init__(self, attempts: int, last_error: BaseException | None):
        super().__init__(f"All {attempts} scan attempts failed: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class ProjectRootError(BlankfixError, OSError):
    """The project root cannot be read at all. Fatal."""


class UnknownBackupError(BlankfixError):
    """A recovery plan referenced a backup id with no manifest on disk."""
