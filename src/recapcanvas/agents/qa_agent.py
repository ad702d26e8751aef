"""
QA agent: answer follow-up questions from an existing summary.

The agent never writes new claims. Every answer line is a line (or the
matching part of a line) that already exists in the summary text, re-cited
against the caller's scope.

Flow
----
1. Empty question -> empty answer, no citations.
2. Rebuild the summary's lines from ``summary_text`` + ``spans``: each line's
   clean text, the heading it sits under, its evidence block IDs (via the
   citation table) and its merged-unit segments. Evidence outside the scope
   is dropped, along with the merged units it backs; a line left with no
   in-scope evidence is never used.
3. Route the question to the first matching intent in :data:`INTENTS`.
4. Select up to the intent's limit of lines, by section heading and/or
   keyword. If some but not all segments of a combined line match the
   keywords, only those segments are quoted and cited.
5. Number each answer line's evidence with a *fresh*
   :class:`~recapcanvas.core.citations.CitationRegistry`, so answer citations
   start at 1 regardless of the summary's numbering.

Fallbacks: no intent matched -> a capabilities line (cites at most one scope
block); nothing in the summary is in scope -> "not enough information in the
current scope to answer"; intent matched but no line qualified -> "not enough
information for this scope". The last two cite up to two scope blocks.

No answer ever cites a block ID outside ``scope_block_ids``, even when the
summary itself was built over a wider scope.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from recapcanvas.agents.classifier import matches_any
from recapcanvas.agents.summarizer_agent import (
    HEADING_ABOUT,
    HEADING_BEST,
    UNIT_SEPARATOR,
    truncate_words,
)
from recapcanvas.core.citations import CitationRegistry
from recapcanvas.core.contracts.qa import QAAnswer
from recapcanvas.core.contracts.summary import Citation, Span, Summary
from recapcanvas.core.settings import get_logger

logger = get_logger(__name__)

NOT_ENOUGH_FOR_SCOPE = "Not enough information for this scope."
NOT_ENOUGH_TO_ANSWER = "Not enough information in the current scope to answer."
CAPABILITIES = (
    "I can answer questions about the goal, what this is about, decisions, "
    "constraints and assumptions, where to start, and what is missing, "
    "or shorten or expand the summary."
)

_BULLET_PREFIX = re.compile(r"^\s*[•\-*]\s*")
_CITATION_SUFFIX = re.compile(r"\s*\[\d+\]\s*$")


@dataclass(frozen=True, slots=True)
class Intent:
    """How one kind of question picks lines from a summary.

    A line qualifies when it sits under one of ``headings`` or its text
    matches one of ``keywords``. ``first_per_section`` takes only the first
    qualifying line under each heading; ``all_lines`` makes every line qualify.
    """

    name: str
    triggers: tuple[str, ...]
    keywords: tuple[str, ...] = ()
    headings: tuple[str, ...] = ()
    limit: int = 3
    max_words: int | None = None
    first_per_section: bool = False
    all_lines: bool = False


INTENTS: tuple[Intent, ...] = (
    Intent(
        name="goal",
        triggers=("goal", "purpose", "objective", "aim", "trying to achieve", "intent"),
        keywords=("goal", "purpose", "aim", "objective", "concept", "idea", "should", "want"),
        headings=(HEADING_ABOUT,),
    ),
    Intent(
        name="about",
        triggers=(
            "what is this about",
            "what's this about",
            "what is it about",
            "overview",
            "gist",
            "what is this",
            "topic",
        ),
        headings=(HEADING_ABOUT,),
    ),
    Intent(
        name="decisions",
        triggers=("decision", "decide", "agreed", "settled", "chose", "choice"),
        keywords=("decision", "decided", "tentative", "draft", "agreed", "going with", "tension"),
    ),
    Intent(
        name="constraints",
        triggers=("constraint", "assumption", "assume", "requirement", "require", "limit", "must"),
        keywords=(
            "constraint",
            "must",
            "require",
            "cannot",
            "can't",
            "limit",
            "legal",
            "compliance",
            "assum",
        ),
        limit=4,
    ),
    Intent(
        name="start",
        triggers=(
            "where to start",
            "where should i start",
            "start",
            "begin",
            "which block",
            "read first",
            "read next",
        ),
        headings=(HEADING_BEST,),
    ),
    Intent(
        name="gaps",
        triggers=("missing", "gap", "unclear", "unknown", "unanswered", "unresolved", "what else"),
        keywords=(
            "open question",
            "question",
            "not sure",
            "uncertain",
            "unknown",
            "unresolved",
            "not resolved",
            "no decision",
            "tbd",
            "?",
        ),
        limit=4,
    ),
    Intent(
        name="shorten",
        triggers=(
            "shorten",
            "shorter",
            "condense",
            "tl;dr",
            "tldr",
            "brief",
            "concise",
            "one line",
        ),
        first_per_section=True,
        max_words=12,
    ),
    Intent(
        name="expand",
        triggers=("expand", "elaborate", "rephrase", "reword", "more detail", "in other words"),
        all_lines=True,
        limit=6,
    ),
)


@dataclass(frozen=True, slots=True)
class SummaryLine:
    """One bullet line of a summary, restricted to a scope."""

    heading: str | None
    text: str
    block_ids: tuple[str, ...]
    segments: tuple[tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(slots=True)
class _AnswerLine:
    text: str
    block_ids: tuple[str, ...]


# --------------------------------------------------------------------------- #
# Reconstruction
# --------------------------------------------------------------------------- #


def _clean_line(raw: str) -> str:
    return _CITATION_SUFFIX.sub("", _BULLET_PREFIX.sub("", raw)).strip()


def _heading_starts(summary_text: str, spans: Sequence[Span]) -> list[tuple[int, str]]:
    """Return ``(offset, text)`` for every non-empty line not covered by a span."""
    headings: list[tuple[int, str]] = []
    pos = 0
    for raw in summary_text.split("\n"):
        start, pos = pos, pos + len(raw) + 1
        if not raw.strip():
            continue
        if any(s.start <= start < s.end for s in spans):
            continue
        headings.append((start, raw.strip()))
    return headings


def reconstruct_lines(
    summary_text: str,
    spans: Sequence[Span],
    citation_table: Sequence[Citation],
    scope_block_ids: Sequence[str],
) -> list[SummaryLine]:
    """Rebuild the summary's cited lines, keeping only in-scope evidence."""
    scope = set(scope_block_ids)
    cited = {c.n: c.block_ids for c in citation_table}
    headings = _heading_starts(summary_text, spans)

    lines: list[SummaryLine] = []
    for span in sorted(spans, key=lambda s: s.start):
        text = _clean_line(summary_text[span.start : span.end])
        block_ids = sorted(
            {bid for n in span.citation_ns for bid in cited.get(n, []) if bid in scope}
        )
        if not text or not block_ids:
            continue
        segments = tuple(
            (summary_text[seg.start : seg.end].strip(), seg.block_id)
            for seg in span.segments
            if seg.block_id in scope and summary_text[seg.start : seg.end].strip()
        )
        if span.segments and len(segments) < len(span.segments):
            # Quote only the units whose blocks are in scope.
            if not segments:
                continue
            text = UNIT_SEPARATOR.join(t for t, _ in segments)
        heading = None
        for offset, label in headings:
            if offset >= span.start:
                break
            heading = label
        lines.append(
            SummaryLine(
                heading=heading,
                text=text,
                block_ids=tuple(block_ids),
                segments=segments,
            )
        )
    return lines


# --------------------------------------------------------------------------- #
# Intent routing & selection
# --------------------------------------------------------------------------- #


def _mentions(question: str, phrases: Sequence[str]) -> bool:
    """Match phrases at a word start, so "decision" hits "decisions" but "aim" misses "claim"."""
    lowered = question.lower()
    return any(re.search(r"(?<![a-z0-9])" + re.escape(p), lowered) for p in phrases)


def classify_intent(question: str) -> Intent | None:
    """Return the first intent whose triggers appear in ``question``."""
    for intent in INTENTS:
        if _mentions(question, intent.triggers):
            return intent
    return None


def _qualifies(line: SummaryLine, intent: Intent) -> bool:
    if intent.all_lines or intent.first_per_section:
        return True
    if intent.headings and line.heading in intent.headings:
        return True
    if not intent.keywords:
        return False
    if line.segments:
        return any(matches_any(t, intent.keywords) for t, _ in line.segments)
    return matches_any(line.text, intent.keywords)


def _narrow(line: SummaryLine, intent: Intent) -> _AnswerLine:
    """Quote only the matching segments of a combined line, when that is more precise."""
    if intent.keywords and len(line.segments) > 1:
        matched = [(t, b) for t, b in line.segments if matches_any(t, intent.keywords)]
        if matched and len(matched) < len(line.segments):
            return _AnswerLine(
                text=UNIT_SEPARATOR.join(t for t, _ in matched),
                block_ids=tuple(sorted({b for _, b in matched})),
            )
    return _AnswerLine(text=line.text, block_ids=line.block_ids)


def _select(lines: Sequence[SummaryLine], intent: Intent) -> list[_AnswerLine]:
    picked: list[_AnswerLine] = []
    seen_text: set[str] = set()
    seen_headings: set[str | None] = set()
    for line in lines:
        if len(picked) >= intent.limit:
            break
        if not _qualifies(line, intent):
            continue
        if intent.first_per_section:
            if line.heading in seen_headings:
                continue
            seen_headings.add(line.heading)
        candidate = _narrow(line, intent)
        if intent.max_words is not None:
            candidate.text = truncate_words(candidate.text, intent.max_words)
        if candidate.text in seen_text:
            continue
        seen_text.add(candidate.text)
        picked.append(candidate)
    return picked


def _scope_fallback(text: str, scope_ids: Sequence[str], count: int) -> _AnswerLine:
    return _AnswerLine(text=text, block_ids=tuple(scope_ids[:count]))


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #


def _render(lines: Sequence[_AnswerLine]) -> QAAnswer:
    registry = CitationRegistry()
    rendered: list[str] = []
    for line in lines:
        if line.block_ids:
            rendered.append(f"• {line.text} [{registry.ensure_number(line.block_ids)}]")
        else:
            rendered.append(f"• {line.text}")
    return QAAnswer(answer="\n".join(rendered), citations=registry.citations())


def answer(
    question: str,
    scope_block_ids: Sequence[str],
    summary_text: str,
    spans: Sequence[Span],
    citation_table: Sequence[Citation],
) -> QAAnswer:
    """Answer ``question`` using only lines of an existing summary.

    Parameters
    ----------
    question:
        Free-text question. Empty or whitespace-only yields an empty answer.
    scope_block_ids:
        Blocks the answer may cite. Citations outside this set are dropped.
    summary_text, spans, citation_table:
        The summary's rendered text, its line spans and its citation table.

    Returns
    -------
    QAAnswer
        Bullet lines with trailing ``[n]`` markers, and a citation table
        numbered from 1 for this answer alone.
    """
    if not question.strip():
        return QAAnswer()

    scope_ids = list(dict.fromkeys(scope_block_ids))
    lines = reconstruct_lines(summary_text, spans, citation_table, scope_ids)
    intent = classify_intent(question)

    if intent is None:
        selected = [_scope_fallback(CAPABILITIES, scope_ids, 1)]
    elif not lines:
        # Nothing in the summary survives the scope filter.
        selected = [_scope_fallback(NOT_ENOUGH_TO_ANSWER, scope_ids, 2)]
    else:
        selected = _select(lines, intent) or [
            _scope_fallback(NOT_ENOUGH_FOR_SCOPE, scope_ids, 2)
        ]

    result = _render(selected)
    logger.info(
        "qa: intent=%s lines=%d citations=%d",
        intent.name if intent else "capabilities",
        len(selected),
        len(result.citations),
    )
    return result


def answer_summary(
    question: str,
    summary: Summary,
    scope_block_ids: Sequence[str] | None = None,
) -> QAAnswer:
    """Answer ``question`` against ``summary``, defaulting to the summary's own scope."""
    scope = summary.scope.block_ids if scope_block_ids is None else scope_block_ids
    return answer(question, scope, summary.summary_text, summary.spans, summary.citations)


__all__ = [
    "Intent",
    "INTENTS",
    "SummaryLine",
    "answer",
    "answer_summary",
    "classify_intent",
    "reconstruct_lines",
    "CAPABILITIES",
    "NOT_ENOUGH_FOR_SCOPE",
    "NOT_ENOUGH_TO_ANSWER",
]
