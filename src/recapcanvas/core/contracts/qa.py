"""QA contracts: a question asked against a summary, and its cited answer."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import ContractModel, utc_now
from .summary import Citation, Scope


class QAAnswer(ContractModel):
    """Answer text (bullet lines with trailing ``[n]``) plus its own citation table.

    Citation numbers restart at 1 for every answer and only ever reference
    block IDs inside the scope the question was asked in.
    """

    answer: str = ""
    citations: list[Citation] = Field(default_factory=list)


class QAExchange(ContractModel):
    """One entry in a summary's message log."""

    question: str
    answer: str
    citations: list[Citation] = Field(default_factory=list)
    scope: Scope = Field(default_factory=Scope)
    asked_at: datetime = Field(default_factory=utc_now)


__all__ = ["QAAnswer", "QAExchange"]
