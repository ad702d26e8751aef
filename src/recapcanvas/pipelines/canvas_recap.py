"""
Canvas recap pipeline: board in, summary blocks and answers out.

This module is the control flow around the two rule-based agents:

1. **Summarize a selection** - resolve the requested IDs against the board
   (board order, unknown IDs ignored), run the summarizer, and store the
   result as a new summary block placed to the right of the selection.
2. **Summarize the canvas** - the same over every non-summary block, with a
   ``"canvas"`` scope.
3. **Ask** - answer a follow-up question against a stored summary block and
   append the exchange to that block's message log.
4. **Export** - render a summary as clipboard-style plain text.

The pipeline owns placement and persistence concerns; the agents only ever
see blocks and return contracts.
"""

from __future__ import annotations

from collections.abc import Sequence

from recapcanvas.agents.qa_agent import answer_summary
from recapcanvas.agents.summarizer_agent import summarize
from recapcanvas.core.contracts.block import Block, SummaryBlock, create_block_id
from recapcanvas.core.contracts.qa import QAExchange
from recapcanvas.core.contracts.summary import Scope, ScopeKind, Summary
from recapcanvas.core.settings import get_logger
from recapcanvas.core.store.board import Board

logger = get_logger(__name__)

SUMMARY_WIDTH = 360.0
SUMMARY_HEIGHT = 260.0
# Horizontal gap between the selection's right edge and the new summary.
PLACEMENT_GAP = 40.0


def _place_summary(board: Board, block_ids: Sequence[str]) -> tuple[float, float]:
    bounds = board.bounds(block_ids)
    if bounds is None:
        return 0.0, 0.0
    _, min_y, max_x, _ = bounds
    return max_x + PLACEMENT_GAP, max(min_y, 0.0)


def summarize_selection(
    board: Board,
    block_ids: Sequence[str],
    *,
    kind: ScopeKind = "selection",
) -> SummaryBlock:
    """Summarize the given blocks and store the result on ``board``.

    Parameters
    ----------
    board:
        The block store; the new summary block is appended to it.
    block_ids:
        Requested IDs. They are resolved in board order; unknown IDs are
        ignored.
    kind:
        Scope kind recorded on the summary.

    Raises
    ------
    ValueError
        If none of ``block_ids`` exists on the board.
    """
    blocks = board.select(block_ids)
    if not blocks:
        raise ValueError("No known blocks to summarize")

    resolved = [b.id for b in blocks]
    summary = summarize(blocks, scope=Scope(kind=kind, block_ids=resolved))
    x, y = _place_summary(board, resolved)
    block = SummaryBlock(
        id=create_block_id("SUM"),
        x=x,
        y=y,
        width=SUMMARY_WIDTH,
        height=SUMMARY_HEIGHT,
        summary=summary,
    )
    board.put(block)
    logger.info("pipeline: stored %s over %d block(s) (%s)", block.id, len(resolved), kind)
    return block


def summarize_canvas(board: Board) -> SummaryBlock:
    """Summarize every non-summary block on the board."""
    ids = [b.id for b in board.blocks() if not isinstance(b, SummaryBlock)]
    return summarize_selection(board, ids, kind="canvas")


def _summary_block(board: Board, summary_id: str) -> SummaryBlock:
    block: Block | None = board.get(summary_id)
    if block is None:
        raise ValueError(f"Unknown block: {summary_id}")
    if not isinstance(block, SummaryBlock):
        raise ValueError(f"Block {summary_id} is not a summary")
    return block


def ask_summary(
    board: Board,
    summary_id: str,
    question: str,
    scope_block_ids: Sequence[str] | None = None,
) -> QAExchange:
    """Answer ``question`` from a stored summary and log the exchange on it.

    ``scope_block_ids`` defaults to the summary's own scope. Empty questions
    are rejected rather than logged.

    Raises
    ------
    ValueError
        If the question is empty or ``summary_id`` is not a summary block.
    """
    if not question.strip():
        raise ValueError("Question required")
    block = _summary_block(board, summary_id)
    scope_ids = list(block.summary.scope.block_ids if scope_block_ids is None else scope_block_ids)

    result = answer_summary(question, block.summary, scope_ids)
    exchange = QAExchange(
        question=question.strip(),
        answer=result.answer,
        citations=result.citations,
        scope=Scope(kind=block.summary.scope.kind, block_ids=scope_ids),
    )
    board.update(summary_id, messages=[*block.messages, exchange])
    return exchange


def summary_to_plain_text(summary: Summary) -> str:
    """Render a summary for the clipboard: title, body, then the evidence list."""
    parts = [summary.title, "", summary.summary_text]
    if summary.evidence_block_ids:
        parts.extend(
            ["", "Evidence", ", ".join(f"block:{bid}" for bid in summary.evidence_block_ids)]
        )
    return "\n".join(parts)


__all__ = [
    "SUMMARY_HEIGHT",
    "SUMMARY_WIDTH",
    "ask_summary",
    "summarize_canvas",
    "summarize_selection",
    "summary_to_plain_text",
]
