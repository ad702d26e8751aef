"""Summary contracts: the cited synthesis produced from a set of blocks.

A :class:`Summary` is immutable evidence-wise once produced: its citation
table and spans are never rewritten, only read (by the QA layer, the API and
the clipboard export).

Offsets
-------
``Span.start``/``Span.end`` are ``[start, end)`` character offsets into
``Summary.summary_text`` covering one whole bullet line (bullet marker through
trailing citation marker). ``SpanSegment`` ranges sit inside their span and
mark each merged source unit of a combined line.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import ContractModel

ScopeKind = Literal["selection", "canvas"]


class Citation(ContractModel):
    """A numbered reference to the block IDs that justify a statement."""

    n: int = Field(ge=1, description="Citation number, assigned in first-use order.")
    block_ids: list[str] = Field(
        default_factory=list, description="Sorted, de-duplicated evidence block IDs."
    )


class SpanSegment(ContractModel):
    """Character range of one merged source unit inside a rendered line."""

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    block_id: str


class Span(ContractModel):
    """Character range of one rendered bullet line and the citations that apply."""

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    citation_ns: list[int] = Field(default_factory=list)
    segments: list[SpanSegment] = Field(default_factory=list)


class Scope(ContractModel):
    """The blocks a summary was computed over, or a question may draw on."""

    kind: ScopeKind = "selection"
    block_ids: list[str] = Field(default_factory=list)


class SummarySection(ContractModel):
    """One emitted section: its heading and the bullet texts under it."""

    heading: str
    lines: list[str] = Field(default_factory=list)


class Summary(ContractModel):
    """Structured, cited synthesis of a set of blocks."""

    title: str
    sections: list[SummarySection] = Field(default_factory=list)
    summary_text: str = ""
    citations: list[Citation] = Field(default_factory=list)
    spans: list[Span] = Field(default_factory=list)
    evidence_block_ids: list[str] = Field(default_factory=list)
    scope: Scope = Field(default_factory=Scope)

    def citation_map(self) -> dict[int, list[str]]:
        """Return ``{n: block_ids}`` for quick lookup."""
        return {c.n: list(c.block_ids) for c in self.citations}


__all__ = [
    "Citation",
    "Scope",
    "ScopeKind",
    "Span",
    "SpanSegment",
    "Summary",
    "SummarySection",
]
