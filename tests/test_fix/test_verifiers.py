"""Tests for candidate-edit verifiers."""

from __future__ import annotations

import pytest

from blankfix.core.errors import VerificationRejected
from blankfix.fix.verifiers import (
    BlockCommentVerifier,
    CompositeVerifier,
    DelimiterBalanceVerifier,
    default_verifier,
    has_unterminated_block_comment,
)


class RecordingVerifier:
    def __init__(self, reject: str = ""):
        self.reject = reject
        self.calls = 0

    def verify(self, original: str, candidate: str) -> None:
        self.calls += 1
        if self.reject:
            raise VerificationRejected(self.reject)


def test_unterminated_block_comment_detection():
    assert has_unterminated_block_comment("/* open")
    assert has_unterminated_block_comment("/* a */ b /* c")
    assert not has_unterminated_block_comment("/* a */ b")
    assert not has_unterminated_block_comment("a */ b")


class TestBlockCommentVerifier:
    def test_rejects_new_unclosed_comment(self):
        with pytest.raises(VerificationRejected, match="Unclosed block comment"):
            BlockCommentVerifier().verify("a\nb\n", "a\n/* b\n")

    def test_accepts_preexisting_unclosed_comment(self):
        BlockCommentVerifier().verify("/* a\nb\n", "/* a\n// b\n")


class TestDelimiterBalanceVerifier:
    def test_accepts_unchanged_counts(self):
        DelimiterBalanceVerifier().verify(
            "<div className={a ${b}}>",
            "<div className={`a ${b}`}>",
        )

    def test_rejects_changed_count(self):
        with pytest.raises(VerificationRejected) as exc:
            DelimiterBalanceVerifier().verify("f(a)\n", "f(a\n")
        assert exc.value.reason == "')' count changed (1 -> 0)"


class TestCompositeVerifier:
    def test_first_rejection_wins(self):
        first = RecordingVerifier(reject="first")
        second = RecordingVerifier(reject="second")
        with pytest.raises(VerificationRejected, match="first"):
            CompositeVerifier([first, second]).verify("a", "b")
        assert second.calls == 0

    def test_runs_all_when_passing(self):
        verifiers = [RecordingVerifier(), RecordingVerifier()]
        CompositeVerifier(verifiers).verify("a", "b")
        assert [v.calls for v in verifiers] == [1, 1]


def test_default_verifier_accepts_comment_fix():
    default_verifier().verify("Core Providers\n{x}\n", "// Core Providers\n{x}\n")
