"""Tests for the keyword signal classifier."""

from __future__ import annotations

from recapcanvas.agents.classifier import Signal, classify, matches_any


def test_decision_unit() -> None:
    assert classify("Decision draft: ship the list view first.") == {Signal.DECISION}


def test_open_question_unit() -> None:
    assert classify("Open question: how do we handle empty states?") == {Signal.QUESTION}


def test_multiple_signals_are_all_kept() -> None:
    signals = classify("Risk: this must pass legal review?")
    assert signals == {Signal.RISK, Signal.CONSTRAINT, Signal.QUESTION}


def test_audience_and_reference() -> None:
    assert Signal.AUDIENCE in classify("To be tested with kids and adults")
    assert classify("spec https://x") == {Signal.REFERENCE}


def test_matching_is_case_insensitive() -> None:
    assert classify("WE DECIDED to wait") == {Signal.DECISION}
    assert matches_any("Legal Review", ("legal",))


def test_plain_and_empty_text_carry_no_signal() -> None:
    assert classify("Light and movement in a small room.") == frozenset()
    assert classify("   ") == frozenset()
