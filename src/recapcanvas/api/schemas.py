"""
Request and response bodies for the HTTP API.

All bodies use the same camelCase wire format as the contracts
(``blockIds``, ``scopeBlockIds``, ``summaryText``); snake_case field names
are accepted on input too.

The hosted-model bodies are deliberately loose (``Any``): their validation
happens in :mod:`recapcanvas.agents.remote_agent`, which reports refusals as
machine-readable reason codes instead of FastAPI's generic 422.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from recapcanvas.core.contracts.base import ContractModel
from recapcanvas.core.contracts.block import Block, SummaryBlock
from recapcanvas.core.contracts.summary import Summary


class SummarizeRequest(ContractModel):
    """Summarize a selection of ``blocks`` (or all of them with ``mode="canvas"``)."""

    blocks: list[Block] = Field(default_factory=list)
    block_ids: list[str] | None = None
    mode: Literal["selection", "canvas"] = "selection"


class SummarizeResponse(ContractModel):
    """The stored summary block, ready to be placed on the client's canvas."""

    summary_block: SummaryBlock


class AskRequest(ContractModel):
    """Ask ``question`` against ``summary``; scope defaults to the summary's own."""

    question: str
    summary: Summary
    scope_block_ids: list[str] | None = None


class RemoteSummarizeRequest(ContractModel):
    mode: Any = None
    blocks: Any = None
    user_prompt: str | None = None


class RemoteAskRequest(ContractModel):
    question: Any = None
    blocks: Any = None


class RemoteSummaryResponse(ContractModel):
    summary_text: str


class RemoteAnswerResponse(ContractModel):
    answer_text: str


class ErrorResponse(ContractModel):
    """Uniform error body: ``{"error": <reason code>, "detail": <message>}``."""

    error: str
    detail: str


__all__ = [
    "AskRequest",
    "ErrorResponse",
    "RemoteAnswerResponse",
    "RemoteAskRequest",
    "RemoteSummarizeRequest",
    "RemoteSummaryResponse",
    "SummarizeRequest",
    "SummarizeResponse",
]
