"""
Tests for the rule-based summarizer.

Scope
-----
1.  **Scenario**: a decision note, an open question and a link produce a
    combined tensions line citing both notes and a line citing the link.
2.  **Invariants** over several boards: evidence mirrors the input, every
    span citation resolves, every cited block is evidence, numbering is
    contiguous from 1, spans and segments stay inside the text.
3.  **Determinism**: same input, same summary.
4.  **Degenerate input**: empty lists, empty images, duplicates, long text.
"""

from __future__ import annotations

import pytest

from recapcanvas.agents.summarizer_agent import (
    FALLBACK_LINE,
    HEADING_ABOUT,
    HEADING_BEST,
    HEADING_SECONDARY,
    HEADING_TENSIONS,
    MAX_LINE_WORDS,
    SECTION_HEADINGS,
    UNKNOWN_BLOCK_ID,
    summarize,
    summary_title,
    truncate_words,
)
from recapcanvas.core.contracts.block import Block, ImageBlock, LinkBlock, SummaryBlock, TextBlock
from recapcanvas.core.contracts.summary import Scope, Summary
from recapcanvas.core.store.seed import seed_blocks

EXPECTED_TRIO_TEXT = "\n".join(
    [
        HEADING_ABOUT,
        "• spec https://x [1]",
        "",
        HEADING_TENSIONS,
        "• Decision draft: ship the list view first; "
        "Open question: how do we handle empty states? [2]",
        "",
        HEADING_BEST,
        "• T1: Decision draft: ship the list view first. [3]",
        "• T2: Open question: how do we handle empty states? [4]",
        "• L1: spec https://x [1]",
    ]
)


def _boards() -> list[list[Block]]:
    return [
        seed_blocks(),
        [TextBlock(id="A", text="Just some plain words about a lamp.")],
        [
            TextBlock(id="A", text="We must ship by May. Risk: legal review is slow."),
            TextBlock(id="B", text="Audience: kids and adults. Must be quiet."),
            ImageBlock(id="I", caption="sketch of the room"),
            LinkBlock(id="L", label="reference board", url="https://example.com"),
        ],
    ]


def _line_for(summary: Summary, start: int, end: int) -> str:
    return summary.summary_text[start:end]


# --------------------------------------------------------------------------- #
# Scenario
# --------------------------------------------------------------------------- #


def test_trio_renders_expected_text(trio: list[Block]) -> None:
    summary = summarize(trio)

    assert summary.summary_text == EXPECTED_TRIO_TEXT
    assert summary.title == "Summary of 3 artifacts"
    assert [s.heading for s in summary.sections] == [HEADING_ABOUT, HEADING_TENSIONS, HEADING_BEST]


def test_trio_tension_line_cites_both_notes_under_one_number(trio: list[Block]) -> None:
    summary = summarize(trio)
    table = summary.citation_map()

    tensions = next(s for s in summary.sections if s.heading == HEADING_TENSIONS)
    assert len(tensions.lines) == 1
    tension_span = next(
        span
        for span in summary.spans
        if _line_for(summary, span.start, span.end).startswith("• Decision draft")
    )
    assert len(tension_span.citation_ns) == 1
    assert table[tension_span.citation_ns[0]] == ["T1", "T2"]
    assert [seg.block_id for seg in tension_span.segments] == ["T1", "T2"]


def test_trio_link_is_cited_and_reused(trio: list[Block]) -> None:
    summary = summarize(trio)
    table = summary.citation_map()

    link_numbers = [n for n, ids in table.items() if ids == ["L1"]]
    assert link_numbers == [1]
    assert summary.summary_text.count("[1]") == 2


def test_default_scope_is_the_selection(trio: list[Block]) -> None:
    summary = summarize(trio)
    assert summary.scope == Scope(kind="selection", block_ids=["T1", "T2", "L1"])

    canvas = summarize(trio, scope=Scope(kind="canvas", block_ids=["T1", "T2", "L1"]))
    assert canvas.scope.kind == "canvas"


# --------------------------------------------------------------------------- #
# Invariants
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize("blocks", _boards())
def test_evidence_mirrors_input(blocks: list[Block]) -> None:
    summary = summarize(blocks)
    assert sorted(summary.evidence_block_ids) == sorted(b.id for b in blocks)


@pytest.mark.parametrize("blocks", _boards())
def test_citations_resolve_and_stay_within_evidence(blocks: list[Block]) -> None:
    summary = summarize(blocks)
    numbers = [c.n for c in summary.citations]

    assert numbers == list(range(1, len(numbers) + 1))
    for span in summary.spans:
        for n in span.citation_ns:
            assert numbers.count(n) == 1
    evidence = set(summary.evidence_block_ids)
    for citation in summary.citations:
        assert citation.block_ids
        assert set(citation.block_ids) <= evidence
        assert citation.block_ids == sorted(set(citation.block_ids))


@pytest.mark.parametrize("blocks", _boards())
def test_spans_and_segments_sit_inside_the_text(blocks: list[Block]) -> None:
    summary = summarize(blocks)
    text = summary.summary_text

    assert summary.spans
    for span in summary.spans:
        assert 0 <= span.start < span.end <= len(text)
        line = text[span.start : span.end]
        assert line.startswith("• ")
        assert line.endswith(f"[{span.citation_ns[0]}]")
        for seg in span.segments:
            assert span.start <= seg.start < seg.end <= span.end
            assert text[seg.start : seg.end].strip()


@pytest.mark.parametrize("blocks", _boards())
def test_sections_follow_fixed_order(blocks: list[Block]) -> None:
    summary = summarize(blocks)
    headings = [s.heading for s in summary.sections]
    assert headings == [h for h in SECTION_HEADINGS if h in headings]


@pytest.mark.parametrize("blocks", _boards())
def test_summarize_is_deterministic(blocks: list[Block]) -> None:
    first = summarize(blocks)
    second = summarize(blocks)
    assert first.citations == second.citations
    assert first.sections == second.sections
    assert first.summary_text == second.summary_text


@pytest.mark.parametrize("blocks", _boards())
def test_lines_stay_within_word_budget(blocks: list[Block]) -> None:
    summary = summarize(blocks)
    for section in summary.sections:
        for line in section.lines:
            assert len(line.split()) <= MAX_LINE_WORDS


# --------------------------------------------------------------------------- #
# Degenerate input
# --------------------------------------------------------------------------- #


def test_empty_input_yields_fallback_with_sentinel() -> None:
    summary = summarize([])

    assert summary.evidence_block_ids == []
    assert summary.sections == []
    assert summary.summary_text == f"• {FALLBACK_LINE} [1]"
    assert [(c.n, c.block_ids) for c in summary.citations] == [(1, [UNKNOWN_BLOCK_ID])]
    assert summary.title == summary_title(0)


def test_contentless_blocks_fall_back_to_first_block() -> None:
    blocks: list[Block] = [ImageBlock(id="IMG-1"), TextBlock(id="T-9", text="   ")]
    summary = summarize(blocks)

    assert summary.summary_text == f"• {FALLBACK_LINE} [1]"
    assert summary.citations[0].block_ids == ["IMG-1"]
    assert summary.evidence_block_ids == ["IMG-1", "T-9"]


def test_image_caption_is_summarized() -> None:
    summary = summarize([ImageBlock(id="IMG-1", caption="Mirrored floor sketch")])
    about = summary.sections[0]
    assert about.heading == HEADING_ABOUT
    assert about.lines == ["Mirrored floor sketch"]


def test_duplicate_units_are_dropped_within_a_section() -> None:
    blocks: list[Block] = [
        TextBlock(id="A", text="Risk: people leave early."),
        TextBlock(id="B", text="risk: people leave early"),
    ]
    summary = summarize(blocks)
    tensions = next(s for s in summary.sections if s.heading == HEADING_TENSIONS)

    assert tensions.lines == ["Risk: people leave early"]
    assert summary.citation_map()[1] == ["A"]


def test_constraints_not_placed_in_tensions_go_to_secondary() -> None:
    notes = " ".join(f"Risk {i}: the sensors might fail in room {i}." for i in range(8))
    blocks: list[Block] = [TextBlock(id="A", text=notes + " Exits must stay visible.")]
    summary = summarize(blocks)
    secondary = next(s for s in summary.sections if s.heading == HEADING_SECONDARY)

    assert secondary.lines == ["Exits must stay visible."]


def test_overlong_unit_is_truncated_with_ellipsis() -> None:
    long_text = "Risk: " + " ".join(f"word{i}" for i in range(40))
    summary = summarize([TextBlock(id="A", text=long_text)])
    tensions = next(s for s in summary.sections if s.heading == HEADING_TENSIONS)

    assert tensions.lines[0] == truncate_words(long_text, MAX_LINE_WORDS)
    assert tensions.lines[0].endswith("…")


def test_summary_blocks_can_be_summarized_again(trio: list[Block]) -> None:
    nested = SummaryBlock(id="S1", summary=summarize(trio))
    summary = summarize([nested])

    assert summary.evidence_block_ids == ["S1"]
    assert {bid for c in summary.citations for bid in c.block_ids} == {"S1"}
