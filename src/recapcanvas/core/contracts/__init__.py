"""Pydantic contracts shared by the summarizer, the QA layer and the API."""

from __future__ import annotations

from .block import (
    Block,
    BlockBase,
    ImageBlock,
    LinkBlock,
    SummaryBlock,
    TextBlock,
    create_block_id,
)
from .qa import QAAnswer, QAExchange
from .summary import Citation, Scope, Span, SpanSegment, Summary, SummarySection

__all__ = [
    "Block",
    "BlockBase",
    "TextBlock",
    "ImageBlock",
    "LinkBlock",
    "SummaryBlock",
    "create_block_id",
    "Citation",
    "Scope",
    "Span",
    "SpanSegment",
    "Summary",
    "SummarySection",
    "QAAnswer",
    "QAExchange",
]
