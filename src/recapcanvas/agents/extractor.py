"""
Content extractor: the plain-text semantic content of a block.

Dispatch is exhaustive over the closed block union. Adding a variant to
:data:`recapcanvas.core.contracts.block.Block` without handling it here is a
type-check failure (``assert_never``) rather than a silent empty string.

- text     -> the raw text
- image    -> the caption, or ``""`` when absent
- link     -> ``"label url"``
- summary  -> title, then each section heading and its lines

Results that are empty or whitespace-only mean "no content" and are skipped
downstream. Everything here is pure.

Examples
--------
>>> from recapcanvas.core.contracts.block import LinkBlock, TextBlock
>>> extract(LinkBlock(id="L1", label="spec", url="https://x"))
'spec https://x'
>>> split_units(TextBlock(id="T1", text="Ship it. Or not?\\nMaybe; later"))
['Ship it.', 'Or not?', 'Maybe', 'later']
"""

from __future__ import annotations

import re
from typing import assert_never

from recapcanvas.core.contracts.block import (
    Block,
    ImageBlock,
    LinkBlock,
    SummaryBlock,
    TextBlock,
)

# Split after sentence-ending punctuation followed by whitespace, or on
# semicolons / newlines. Punctuation stays on the unit so "?" remains visible
# to the classifier.
_UNIT_BOUNDARY = re.compile(r"(?<=[.!?])\s+|;|\n+")
_WHITESPACE = re.compile(r"\s+")


def _join(parts: list[str | None]) -> str:
    return " ".join(p.strip() for p in parts if p and p.strip())


def extract(block: Block) -> str:
    """Return the plain-text content of ``block``."""
    if isinstance(block, TextBlock):
        return block.text or ""
    if isinstance(block, ImageBlock):
        return block.caption or ""
    if isinstance(block, LinkBlock):
        return _join([block.label, block.url])
    if isinstance(block, SummaryBlock):
        parts: list[str | None] = [block.summary.title]
        for section in block.summary.sections:
            parts.append(section.heading)
            parts.extend(section.lines)
        return _join(parts)
    assert_never(block)


def has_content(block: Block) -> bool:
    """Return True when ``block`` has non-whitespace content."""
    return bool(extract(block).strip())


def split_units(block: Block) -> list[str]:
    """Split a block's content into candidate units for classification.

    Text blocks are split into sentences/clauses; every other variant is a
    single unit. Units are whitespace-collapsed and empty units are dropped.
    """
    content = extract(block)
    if isinstance(block, TextBlock):
        raw = _UNIT_BOUNDARY.split(content)
    else:
        raw = [content]
    units: list[str] = []
    for piece in raw:
        cleaned = _WHITESPACE.sub(" ", piece).strip()
        if cleaned:
            units.append(cleaned)
    return units


__all__ = ["extract", "has_content", "split_units"]
