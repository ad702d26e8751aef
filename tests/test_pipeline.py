"""Tests for the canvas recap pipeline (board in, summary blocks and answers out)."""

from __future__ import annotations

import re

import pytest

from recapcanvas.core.contracts.block import Block, ImageBlock, SummaryBlock
from recapcanvas.core.store.board import Board
from recapcanvas.core.store.seed import seed_blocks
from recapcanvas.pipelines import (
    ask_summary,
    summarize_canvas,
    summarize_selection,
    summary_to_plain_text,
)
from recapcanvas.pipelines.canvas_recap import SUMMARY_HEIGHT, SUMMARY_WIDTH


def test_summarize_selection_stores_a_placed_summary_block(trio: list[Block]) -> None:
    board = Board(trio)

    block = summarize_selection(board, ["L1", "T1", "T2", "ghost"])

    assert re.fullmatch(r"SUM-[0-9a-z]+-[0-9a-f]{4}", block.id)
    assert board.get(block.id) == block
    # Resolved in board order, unknown IDs dropped.
    assert block.summary.scope.block_ids == ["T1", "T2", "L1"]
    assert block.summary.scope.kind == "selection"
    # Selection spans x 0..760 and starts at y 0; the summary sits 40 to the right.
    assert (block.x, block.y) == (800, 0)
    assert (block.width, block.height) == (SUMMARY_WIDTH, SUMMARY_HEIGHT)


def test_summarize_selection_rejects_unknown_ids(trio: list[Block]) -> None:
    with pytest.raises(ValueError):
        summarize_selection(Board(trio), ["ghost"])


def test_summarize_canvas_skips_existing_summaries(trio: list[Block]) -> None:
    board = Board(trio)
    first = summarize_selection(board, ["T1", "T2"])

    canvas = summarize_canvas(board)

    assert canvas.summary.scope.kind == "canvas"
    assert first.id not in canvas.summary.evidence_block_ids
    assert sorted(canvas.summary.evidence_block_ids) == ["L1", "T1", "T2"]


def test_ask_summary_logs_the_exchange(trio: list[Block]) -> None:
    board = Board(trio)
    block = summarize_selection(board, ["T1", "T2", "L1"])

    exchange = ask_summary(board, block.id, "  what decisions have been made?  ")

    stored = board.get(block.id)
    assert isinstance(stored, SummaryBlock)
    assert stored.messages == [exchange]
    assert exchange.question == "what decisions have been made?"
    assert {bid for c in exchange.citations for bid in c.block_ids} == {"T1"}
    assert exchange.scope.block_ids == ["T1", "T2", "L1"]

    ask_summary(board, block.id, "banana", ["L1"])
    stored = board.get(block.id)
    assert isinstance(stored, SummaryBlock)
    assert len(stored.messages) == 2
    assert stored.messages[1].scope.block_ids == ["L1"]


def test_ask_summary_errors(trio: list[Block]) -> None:
    board = Board(trio)
    block = summarize_selection(board, ["T1"])

    with pytest.raises(ValueError, match="Question required"):
        ask_summary(board, block.id, "  ")
    with pytest.raises(ValueError, match="Unknown block"):
        ask_summary(board, "ghost", "why?")
    with pytest.raises(ValueError, match="not a summary"):
        ask_summary(board, "T1", "why?")


def test_summary_to_plain_text(trio: list[Block]) -> None:
    block = summarize_selection(Board(trio), ["T1", "T2", "L1"])
    text = summary_to_plain_text(block.summary)

    lines = text.splitlines()
    assert lines[0] == "Summary of 3 artifacts"
    assert lines[1] == ""
    assert block.summary.summary_text in text
    assert lines[-2:] == ["Evidence", "block:T1, block:T2, block:L1"]


def test_seed_board_end_to_end() -> None:
    board = Board(seed_blocks())
    block = summarize_canvas(board)

    assert block.summary.evidence_block_ids == ["T-301", "T-302", "IMG-82", "L-22", "T-304"]
    assert "IMG-82" not in {bid for c in block.summary.citations for bid in c.block_ids}
    exchange = ask_summary(board, block.id, "Where should I start?")
    assert exchange.answer.startswith("• T-304:")


def test_image_only_selection_still_summarizes() -> None:
    board = Board([ImageBlock(id="IMG-1", x=10, y=20, width=100, aspect_ratio=0.5)])
    block = summarize_selection(board, ["IMG-1"])

    assert block.summary.citations[0].block_ids == ["IMG-1"]
    assert (block.x, block.y) == (150, 20)
