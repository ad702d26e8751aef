"""
API routes for the rule-based summarizer and QA agent.

Endpoints
---------
- ``POST /summaries``: summarize the posted blocks (a selection, or the whole
  canvas with ``mode="canvas"``) and return the new summary block.
- ``POST /answers``: answer a follow-up question from a posted summary.

Both are stateless: the client owns the board and sends the blocks it wants
summarized. No block content ever leaves the process.
"""

from __future__ import annotations

from fastapi import APIRouter

from recapcanvas.agents.qa_agent import answer_summary
from recapcanvas.api.schemas import AskRequest, SummarizeRequest, SummarizeResponse
from recapcanvas.core.contracts.qa import QAAnswer
from recapcanvas.core.store.board import Board
from recapcanvas.pipelines.canvas_recap import summarize_canvas, summarize_selection

router = APIRouter(tags=["Summaries"])


@router.post("/summaries", response_model=SummarizeResponse, summary="Summarize blocks")
def create_summary(request: SummarizeRequest) -> SummarizeResponse:
    """
    Summarize the requested blocks with citations.

    ``blockIds`` defaults to every posted block. Unknown IDs are ignored; a
    request that resolves to no blocks at all is a 400.
    """
    board = Board(request.blocks)
    if request.mode == "canvas":
        block = summarize_canvas(board)
    else:
        ids = request.block_ids if request.block_ids is not None else [b.id for b in request.blocks]
        block = summarize_selection(board, ids)
    return SummarizeResponse(summary_block=block)


@router.post("/answers", response_model=QAAnswer, summary="Answer a question from a summary")
def create_answer(request: AskRequest) -> QAAnswer:
    """
    Answer a question using only lines of the posted summary.

    Citations in the answer are renumbered from 1 and never reference blocks
    outside ``scopeBlockIds`` (default: the summary's own scope).
    """
    return answer_summary(request.question, request.summary, request.scope_block_ids)


__all__ = ["router"]
