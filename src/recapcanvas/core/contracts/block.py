"""
Block contracts: the atomic, independently positioned units on a canvas.

Variants form a closed union discriminated by ``type``:

- ``text``    free-form text.
- ``image``   a source reference plus an optional caption; only the caption
              is ever read as content, pixels are never interpreted.
- ``link``    a label and a URL; both count as content.
- ``summary`` a previously generated :class:`Summary` placed back on the
              canvas, which can itself be summarized again.

A block's ``id`` is the unit of evidence reference throughout the system and
never changes after creation.
"""

from __future__ import annotations

import secrets
import string
import time
from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field

from .base import ContractModel, utc_now
from .qa import QAExchange
from .summary import Summary

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def create_block_id(prefix: str = "BLK") -> str:
    """Return a new block ID such as ``'SUM-m1x2k9q0-3fa1'``.

    The middle part is the creation time in milliseconds (base 36), the tail
    is four random hex characters.
    """
    stamp = _to_base36(int(time.time() * 1000))
    return f"{prefix}-{stamp}-{secrets.token_hex(2)}"


class BlockBase(ContractModel):
    """Attributes shared by every block variant."""

    id: str = Field(..., min_length=1, description="Stable unique identifier, e.g. 'T-301'.")
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=360.0, gt=0)
    height: float | None = Field(default=None, gt=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TextBlock(BlockBase):
    """Free-form note."""

    type: Literal["text"] = "text"
    text: str = ""


class ImageBlock(BlockBase):
    """Image reference; the caption is the only summarizable content."""

    type: Literal["image"] = "image"
    src: str = ""
    caption: str | None = None
    aspect_ratio: float | None = Field(default=None, gt=0)


class LinkBlock(BlockBase):
    """Labelled hyperlink."""

    type: Literal["link"] = "link"
    label: str = ""
    url: str = ""


class SummaryBlock(BlockBase):
    """A summary dropped onto the canvas, with its QA message log."""

    type: Literal["summary"] = "summary"
    summary: Summary
    messages: list[QAExchange] = Field(default_factory=list)

    @property
    def title(self) -> str:
        return self.summary.title


Block = Annotated[
    TextBlock | ImageBlock | LinkBlock | SummaryBlock,
    Field(discriminator="type"),
]


__all__ = [
    "Block",
    "BlockBase",
    "TextBlock",
    "ImageBlock",
    "LinkBlock",
    "SummaryBlock",
    "create_block_id",
]
