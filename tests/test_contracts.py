"""Contract tests: camelCase wire format, the block union and ID generation."""

from __future__ import annotations

import re

import pytest
from pydantic import TypeAdapter, ValidationError

from recapcanvas.core.contracts import (
    Block,
    Citation,
    ImageBlock,
    LinkBlock,
    QAExchange,
    Scope,
    Summary,
    SummaryBlock,
    TextBlock,
    create_block_id,
)

_BLOCKS = TypeAdapter(list[Block])


def test_wire_form_uses_camel_case() -> None:
    summary = Summary(
        title="Summary of 1 artifact",
        summary_text="• x [1]",
        citations=[Citation(n=1, block_ids=["T1"])],
        evidence_block_ids=["T1"],
        scope=Scope(kind="canvas", block_ids=["T1"]),
    )
    wire = summary.to_wire()

    assert wire["summaryText"] == "• x [1]"
    assert wire["evidenceBlockIds"] == ["T1"]
    assert wire["citations"] == [{"n": 1, "blockIds": ["T1"]}]
    assert wire["scope"] == {"kind": "canvas", "blockIds": ["T1"]}


def test_models_accept_both_spellings() -> None:
    a = ImageBlock.model_validate({"id": "IMG-1", "aspectRatio": 1.5})
    b = ImageBlock(id="IMG-1", aspect_ratio=1.5)
    assert a.aspect_ratio == b.aspect_ratio == 1.5


def test_block_union_dispatches_on_type() -> None:
    raw = [
        {"type": "text", "id": "T1", "text": "hello"},
        {"type": "image", "id": "I1", "src": "a.png", "caption": "a cat"},
        {"type": "link", "id": "L1", "label": "spec", "url": "https://x"},
        {"type": "summary", "id": "S1", "summary": {"title": "Summary of 0 artifacts"}},
    ]
    blocks = _BLOCKS.validate_python(raw)

    assert [type(b) for b in blocks] == [TextBlock, ImageBlock, LinkBlock, SummaryBlock]
    summary_block = blocks[3]
    assert isinstance(summary_block, SummaryBlock)
    assert summary_block.title == "Summary of 0 artifacts"
    assert summary_block.messages == []


def test_unknown_block_type_is_rejected() -> None:
    with pytest.raises(ValidationError):
        _BLOCKS.validate_python([{"type": "video", "id": "V1"}])


def test_block_requires_non_empty_id() -> None:
    with pytest.raises(ValidationError):
        TextBlock(id="", text="x")


def test_citation_numbers_start_at_one() -> None:
    with pytest.raises(ValidationError):
        Citation(n=0, block_ids=["T1"])


def test_qa_exchange_defaults() -> None:
    exchange = QAExchange(question="q?", answer="• a [1]")
    assert exchange.citations == []
    assert exchange.scope.block_ids == []
    assert exchange.asked_at.tzinfo is not None


def test_create_block_id_shape_and_uniqueness() -> None:
    ids = {create_block_id("SUM") for _ in range(50)}
    assert len(ids) == 50
    for block_id in ids:
        assert re.fullmatch(r"SUM-[0-9a-z]+-[0-9a-f]{4}", block_id)


def test_summary_citation_map() -> None:
    summary = Summary(
        title="t",
        citations=[Citation(n=1, block_ids=["L1"]), Citation(n=2, block_ids=["T1", "T2"])],
    )
    assert summary.citation_map() == {1: ["L1"], 2: ["T1", "T2"]}
