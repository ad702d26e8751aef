"""
Summarizer agent: turn an unordered set of blocks into a cited synthesis.

Pipeline
--------
1. **Units.** Each block's content is split into candidate units
   (:func:`recapcanvas.agents.extractor.split_units`).
2. **Signals.** Every unit is classified
   (:func:`recapcanvas.agents.classifier.classify`) and keeps its source block ID.
3. **Sections.** Units are grouped into fixed, ordered sections. A unit may
   land in more than one section; inside one section duplicates (same
   normalized text) are dropped, earliest first.

   ============================== =============================================
   What this seems to be about    untagged units and reference units
   Key tensions / open questions  decision / risk / constraint / question units,
                                  merged with ``"; "`` into combined lines
   Secondary considerations       audience units, and constraint units that did
                                  not fit into the tensions section
   Best blocks to read next       distinct text/link blocks, most signals first
   ============================== =============================================

4. **Render.** Non-empty sections are emitted as a heading line followed by
   ``"• <text> [n]"`` bullet lines, sections separated by a blank line. Each
   line's evidence set is numbered through a fresh
   :class:`~recapcanvas.core.citations.CitationRegistry`, and its character
   range (plus the ranges of its merged units) is recorded as a span.

If no section has any content, a single fallback line is emitted instead,
cited to the first input block (or ``"unknown"`` for an empty input).

Caps
----
The per-section caps below are tunables, not contracts. They are kept fixed
so that the same input always yields the same summary.

The agent performs no I/O and does not raise for well-typed input.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from recapcanvas.agents.classifier import Signal, classify
from recapcanvas.agents.extractor import extract, split_units
from recapcanvas.core.citations import CitationRegistry
from recapcanvas.core.contracts.block import Block, LinkBlock, TextBlock
from recapcanvas.core.contracts.summary import (
    Scope,
    Span,
    SpanSegment,
    Summary,
    SummarySection,
)
from recapcanvas.core.settings import get_logger

logger = get_logger(__name__)

HEADING_ABOUT = "What this seems to be about"
HEADING_TENSIONS = "Key tensions / open questions"
HEADING_SECONDARY = "Secondary considerations"
HEADING_BEST = "Best blocks to read next"
SECTION_HEADINGS: tuple[str, ...] = (
    HEADING_ABOUT,
    HEADING_TENSIONS,
    HEADING_SECONDARY,
    HEADING_BEST,
)

FALLBACK_LINE = "Not enough information from the selected artifacts."
UNKNOWN_BLOCK_ID = "unknown"

BULLET = "•"
ELLIPSIS = "…"
UNIT_SEPARATOR = "; "

MAX_LINE_WORDS = 28
PREVIEW_WORDS = 12
ABOUT_MAX_LINES = 2
TENSION_UNITS_PER_LINE = 4
TENSION_MAX_LINES = 2
SECONDARY_MAX_LINES = 4
BEST_MAX_BLOCKS = 3

_TENSION_SIGNALS = frozenset(
    {Signal.DECISION, Signal.RISK, Signal.CONSTRAINT, Signal.QUESTION}
)
_NORMALIZE_WS = re.compile(r"\s+")
_TERMINAL_PUNCT = ".;,: "


@dataclass(frozen=True, slots=True)
class _Unit:
    """A classified piece of block content."""

    block_id: str
    text: str
    signals: frozenset[Signal]
    order: int

    @property
    def key(self) -> str:
        return _normalize(self.text)


@dataclass(slots=True)
class _Line:
    """A section line before rendering: one or more (text, block_id) pieces."""

    pieces: list[tuple[str, str]] = field(default_factory=list)

    @property
    def block_ids(self) -> list[str]:
        return [block_id for _, block_id in self.pieces]

    def word_count(self) -> int:
        return sum(len(text.split()) for text, _ in self.pieces)


# --------------------------------------------------------------------------- #
# Text helpers
# --------------------------------------------------------------------------- #


def _normalize(text: str) -> str:
    """Normalization key used for de-duplication inside a section."""
    return _NORMALIZE_WS.sub(" ", text).strip().rstrip(_TERMINAL_PUNCT).casefold()


def _trim_terminal(text: str) -> str:
    """Drop trailing periods/semicolons so merged units read cleanly."""
    return text.rstrip(_TERMINAL_PUNCT) or text


def truncate_words(text: str, max_words: int) -> str:
    """Cut ``text`` to at most ``max_words`` whole words, marking the cut with ``…``.

    >>> truncate_words("one two three", 2)
    'one two…'
    >>> truncate_words("one two", 2)
    'one two'
    """
    words = text.split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + ELLIPSIS


def summary_title(count: int) -> str:
    """Return the deterministic title for a summary over ``count`` blocks."""
    return f"Summary of {count} artifact{'' if count == 1 else 's'}"


# --------------------------------------------------------------------------- #
# Step 1-2: units
# --------------------------------------------------------------------------- #


def _collect_units(blocks: Sequence[Block]) -> list[_Unit]:
    units: list[_Unit] = []
    for block in blocks:
        for text in split_units(block):
            units.append(
                _Unit(block_id=block.id, text=text, signals=classify(text), order=len(units))
            )
    return units


def _dedupe(units: Sequence[_Unit]) -> list[_Unit]:
    seen: set[str] = set()
    out: list[_Unit] = []
    for unit in units:
        if unit.key in seen:
            continue
        seen.add(unit.key)
        out.append(unit)
    return out


# --------------------------------------------------------------------------- #
# Step 3: sections
# --------------------------------------------------------------------------- #


def _about_lines(units: Sequence[_Unit]) -> list[_Line]:
    picked = _dedupe(
        [u for u in units if not u.signals or Signal.REFERENCE in u.signals]
    )[:ABOUT_MAX_LINES]
    return [_Line(pieces=[(u.text, u.block_id)]) for u in picked]


def _tension_lines(units: Sequence[_Unit]) -> tuple[list[_Line], set[str]]:
    """Pack tension units into combined lines; return lines and the placed keys.

    A line takes units while it has fewer than ``TENSION_UNITS_PER_LINE`` of
    them and the total stays within ``MAX_LINE_WORDS``. A single unit longer
    than the budget gets a line of its own and is truncated at render time.
    """
    candidates = _dedupe([u for u in units if u.signals & _TENSION_SIGNALS])
    lines: list[_Line] = []
    placed: set[str] = set()
    current = _Line()
    for unit in candidates:
        text = _trim_terminal(unit.text)
        words = len(text.split())
        full = len(current.pieces) >= TENSION_UNITS_PER_LINE
        if current.pieces and (full or current.word_count() + words > MAX_LINE_WORDS):
            lines.append(current)
            current = _Line()
            if len(lines) >= TENSION_MAX_LINES:
                break
        current.pieces.append((text, unit.block_id))
        placed.add(unit.key)
    else:
        if current.pieces:
            lines.append(current)
    return lines, placed


def _secondary_lines(units: Sequence[_Unit], placed: set[str]) -> list[_Line]:
    picked = _dedupe(
        [
            u
            for u in units
            if Signal.AUDIENCE in u.signals
            or (Signal.CONSTRAINT in u.signals and u.key not in placed)
        ]
    )[:SECONDARY_MAX_LINES]
    return [_Line(pieces=[(u.text, u.block_id)]) for u in picked]


def _best_lines(blocks: Sequence[Block], units: Sequence[_Unit]) -> list[_Line]:
    """Rank text/link blocks by how many signal-carrying units they contributed."""
    signal_counts: dict[str, int] = {}
    for unit in units:
        if unit.signals:
            signal_counts[unit.block_id] = signal_counts.get(unit.block_id, 0) + 1

    candidates: list[tuple[int, int, Block]] = []
    seen: set[str] = set()
    for position, block in enumerate(blocks):
        if not isinstance(block, TextBlock | LinkBlock) or block.id in seen:
            continue
        if not extract(block).strip():
            continue
        seen.add(block.id)
        candidates.append((-signal_counts.get(block.id, 0), position, block))

    candidates.sort(key=lambda item: (item[0], item[1]))
    lines: list[_Line] = []
    for _, _, block in candidates[:BEST_MAX_BLOCKS]:
        preview = truncate_words(extract(block), PREVIEW_WORDS)
        lines.append(_Line(pieces=[(f"{block.id}: {preview}", block.id)]))
    return lines


def _build_sections(blocks: Sequence[Block]) -> list[tuple[str, list[_Line]]]:
    units = _collect_units(blocks)
    tensions, placed = _tension_lines(units)
    sections = [
        (HEADING_ABOUT, _about_lines(units)),
        (HEADING_TENSIONS, tensions),
        (HEADING_SECONDARY, _secondary_lines(units, placed)),
        (HEADING_BEST, _best_lines(blocks, units)),
    ]
    logger.debug(
        "summarizer: %d units from %d blocks -> %s",
        len(units),
        len(blocks),
        {heading: len(lines) for heading, lines in sections},
    )
    return [(heading, lines) for heading, lines in sections if lines]


# --------------------------------------------------------------------------- #
# Step 4-7: rendering
# --------------------------------------------------------------------------- #


class _Renderer:
    """Accumulates summary text while tracking spans and citations."""

    def __init__(self) -> None:
        self.registry = CitationRegistry()
        self.spans: list[Span] = []
        self._chunks: list[str] = []
        self._cursor = 0

    def _append(self, text: str) -> int:
        if self._chunks:
            self._chunks.append("\n")
            self._cursor += 1
        start = self._cursor
        self._chunks.append(text)
        self._cursor += len(text)
        return start

    def heading(self, text: str) -> None:
        self._append(text)

    def blank(self) -> None:
        self._append("")

    def bullet(self, line: _Line) -> str:
        """Render one bullet line; return its visible text (no markers)."""
        content_parts: list[str] = []
        offsets: list[tuple[int, int, str]] = []
        pos = 0
        for index, (text, block_id) in enumerate(line.pieces):
            if index:
                content_parts.append(UNIT_SEPARATOR)
                pos += len(UNIT_SEPARATOR)
            content_parts.append(text)
            offsets.append((pos, pos + len(text), block_id))
            pos += len(text)
        content = "".join(content_parts)
        visible = len(content)
        if len(content.split()) > MAX_LINE_WORDS:
            content = truncate_words(content, MAX_LINE_WORDS)
            visible = len(content) - len(ELLIPSIS)

        number = self.registry.ensure_number(line.block_ids)
        prefix = f"{BULLET} "
        rendered = f"{prefix}{content} [{number}]"
        start = self._append(rendered)

        segments: list[SpanSegment] = []
        base = start + len(prefix)
        for seg_start, seg_end, block_id in offsets:
            clipped_end = min(seg_end, visible)
            if seg_start >= clipped_end:
                continue
            segments.append(
                SpanSegment(start=base + seg_start, end=base + clipped_end, block_id=block_id)
            )
        self.spans.append(
            Span(start=start, end=start + len(rendered), citation_ns=[number], segments=segments)
        )
        return content

    def text(self) -> str:
        return "".join(self._chunks)


def summarize(blocks: Sequence[Block], scope: Scope | None = None) -> Summary:
    """Produce a cited :class:`Summary` of ``blocks``.

    Parameters
    ----------
    blocks:
        Input blocks in caller order (typically canvas order of the selection).
        Every block ID ends up in ``evidence_block_ids``, quotable or not.
    scope:
        Which blocks the summary is computed over. Defaults to a selection
        scope over the input IDs.

    Returns
    -------
    Summary
        Never raises for well-typed input; degenerate input yields the
        fallback line.
    """
    evidence = [block.id for block in blocks]
    if scope is None:
        scope = Scope(kind="selection", block_ids=list(evidence))

    renderer = _Renderer()
    sections: list[SummarySection] = []
    for heading, lines in _build_sections(blocks):
        if sections:
            renderer.blank()
        renderer.heading(heading)
        rendered = [renderer.bullet(line) for line in lines]
        sections.append(SummarySection(heading=heading, lines=rendered))

    if not sections:
        fallback_id = evidence[0] if evidence else UNKNOWN_BLOCK_ID
        renderer.bullet(_Line(pieces=[(FALLBACK_LINE, fallback_id)]))

    summary = Summary(
        title=summary_title(len(blocks)),
        sections=sections,
        summary_text=renderer.text(),
        citations=renderer.registry.citations(),
        spans=renderer.spans,
        evidence_block_ids=evidence,
        scope=scope,
    )
    logger.info(
        "summarizer: %s -> %d sections, %d citations",
        summary.title,
        len(sections),
        len(summary.citations),
    )
    return summary


__all__ = [
    "summarize",
    "summary_title",
    "truncate_words",
    "SECTION_HEADINGS",
    "HEADING_ABOUT",
    "HEADING_TENSIONS",
    "HEADING_SECONDARY",
    "HEADING_BEST",
    "FALLBACK_LINE",
    "UNKNOWN_BLOCK_ID",
    "BULLET",
]
