"""Pluggable verifiers for candidate edits.

These are cheap, syntax-agnostic checks, not a parse. A verifier raises
:class:`VerificationRejected` when a candidate must not be written.
"""

from __future__ import annotations

import re
from typing import Protocol

from blankfix.core.errors import VerificationRejected

_BLOCK_COMMENT_TOKEN_RE = re.compile(r"/\*|\*/")

DELIMITER_PAIRS = (("{", "}"), ("(", ")"), ("[", "]"))


class Verifier(Protocol):
    def verify(self, original: str, candidate: str) -> None:
        """Raise VerificationRejected if *candidate* is unsafe to write."""
        ...


def has_unterminated_block_comment(content: str) -> bool:
    open_comment = False
    for token in _BLOCK_COMMENT_TOKEN_RE.finditer(content):
        if token.group() == "/*":
            open_comment = True
        elif open_comment:
            open_comment = False
    return open_comment


class BlockCommentVerifier:
    """Reject candidates that introduce an unterminated ``/*`` comment."""

    def verify(self, original: str, candidate: str) -> None:
        if has_unterminated_block_comment(candidate) and not has_unterminated_block_comment(original):
            raise VerificationRejected("Unclosed block comment")


class DelimiterBalanceVerifier:
    """Reject candidates whose open/close delimiter counts differ from the original."""

    def verify(self, original: str, candidate: str) -> None:
        for opener, closer in DELIMITER_PAIRS:
            for char in (opener, closer):
                before = original.count(char)
                after = candidate.count(char)
                if before != after:
                    raise VerificationRejected(
                        f"'{char}' count changed ({before} -> {after})"
                    )


class CompositeVerifier:
    """Run verifiers in order; the first rejection wins."""

    def __init__(self, verifiers: list[Verifier]):
        self.verifiers = verifiers

    def verify(self, original: str, candidate: str) -> None:
        for verifier in self.verifiers:
            verifier.verify(original, candidate)


def default_verifier() -> CompositeVerifier:
    return CompositeVerifier([BlockCommentVerifier(), DelimiterBalanceVerifier()])
