"""
Signal classifier: tag a unit of text with semantic categories.

Categories are a fixed, closed set (:class:`Signal`). Matching is
case-insensitive substring search against :data:`SIGNAL_KEYWORDS`; a unit can
match none, one, or several categories at once. Notes routinely blend
concerns ("risky, and a legal constraint"), and the evidence trail depends on
keeping every tag rather than forcing a single label.

The keyword lists are plain data so they can be reviewed and tuned without
touching the summarizer.

Examples
--------
>>> sorted(classify("Decision draft: ship the list view first."))
[<Signal.DECISION: 'decision'>]
>>> sorted(classify("Risk: this must pass legal review?"))
[<Signal.CONSTRAINT: 'constraint'>, <Signal.QUESTION: 'question'>, <Signal.RISK: 'risk'>]
>>> classify("Light and movement in a small room.")
frozenset()
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import StrEnum


class Signal(StrEnum):
    """Semantic categories a unit of text can carry."""

    DECISION = "decision"
    CONSTRAINT = "constraint"
    RISK = "risk"
    QUESTION = "question"
    AUDIENCE = "audience"
    REFERENCE = "reference"


SIGNAL_KEYWORDS: Mapping[Signal, tuple[str, ...]] = {
    Signal.DECISION: (
        "decision",
        "decided",
        "we decided",
        "draft",
        "tentative",
        "agreed",
        "going with",
    ),
    Signal.CONSTRAINT: (
        "constraint",
        "must",
        "require",
        "cannot",
        "can't",
        "limit",
        "legal",
        "compliance",
    ),
    Signal.RISK: (
        "risk",
        "concern",
        "danger",
        "fragile",
        "safety",
        "worried",
    ),
    Signal.QUESTION: (
        "open question",
        "question",
        "uncertain",
        "not sure",
        "tbd",
        "tension",
        "tradeoff",
        "trade-off",
        "unresolved",
        "not resolved",
        "risk",
        "concern",
        "?",
    ),
    Signal.AUDIENCE: (
        "audience",
        "user",
        "participant",
        "visitor",
        "stakeholder",
        "customer",
        "persona",
        "kids",
        "children",
        "adults",
    ),
    Signal.REFERENCE: (
        "http://",
        "https://",
        "www.",
        "reference",
        "ref ",
        "inspired by",
        "see also",
    ),
}


def matches_any(text: str, keywords: Iterable[str]) -> bool:
    """Return True if any keyword occurs in ``text`` (case-insensitive)."""
    lowered = text.lower()
    return any(k in lowered for k in keywords)


def classify(text: str) -> frozenset[Signal]:
    """Return every :class:`Signal` whose keywords occur in ``text``."""
    if not text.strip():
        return frozenset()
    return frozenset(
        signal for signal, keywords in SIGNAL_KEYWORDS.items() if matches_any(text, keywords)
    )


__all__ = ["Signal", "SIGNAL_KEYWORDS", "classify", "matches_any"]
