"""
In-memory board: the current set of blocks, keyed by ID, with a revision counter.

The board is the hosting application's block store. The summarizer and QA
agents never touch it; the pipeline reads blocks from it and writes summary
blocks back.

API
---
- ``put(block)``: insert or replace a block and bump the revision.
- ``update(block_id, **changes)``: copy-on-write edit that refreshes
  ``updated_at``. Changing ``id`` is refused: a block's ID is its evidence
  identity for its whole lifetime.
- ``delete(ids)``: remove blocks, returning the IDs actually removed.
- ``get(id)`` / ``select(ids)`` / ``blocks()``: reads, in insertion order.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from recapcanvas.core.contracts.base import utc_now
from recapcanvas.core.contracts.block import Block, ImageBlock

_DEFAULT_HEIGHT = 120.0
_DEFAULT_IMAGE_RATIO = 0.75


def block_height(block: Block) -> float:
    """Return the on-canvas height of ``block``.

    Images derive it from their aspect ratio; other blocks fall back to a
    default when no explicit height is stored.
    """
    if isinstance(block, ImageBlock):
        if block.aspect_ratio is not None:
            return block.width * block.aspect_ratio
        if block.height is not None:
            return block.height
        return block.width * _DEFAULT_IMAGE_RATIO
    return block.height if block.height is not None else _DEFAULT_HEIGHT


class Board:
    """Ordered, revisioned block store.

    Attributes
    ----------
    _blocks : dict[str, Block]
        Blocks keyed by ID; dict order is canvas (insertion) order.
    _rev : int
        Monotonically increasing revision counter, bumped on every mutation.
    """

    __slots__ = ("_blocks", "_rev")

    def __init__(self, blocks: Iterable[Block] = ()) -> None:
        self._blocks: dict[str, Block] = {}
        self._rev: int = 0
        for block in blocks:
            self.put(block)

    # ------------------------------- Writes ---------------------------------

    def put(self, block: Block) -> Block:
        """Insert ``block`` (or replace the block with the same ID)."""
        self._blocks[block.id] = block
        self._rev += 1
        return block

    def update(self, block_id: str, **changes: Any) -> Block | None:
        """Apply ``changes`` to a copy of the block and store it.

        Returns the updated block, or ``None`` if ``block_id`` is unknown.

        Raises
        ------
        ValueError
            If ``changes`` tries to alter the block's ``id`` or ``type``.
        """
        current = self._blocks.get(block_id)
        if current is None:
            return None
        for frozen in ("id", "type"):
            if frozen in changes and changes[frozen] != getattr(current, frozen):
                raise ValueError(f"Block {frozen} cannot change (block {block_id!r})")
        updated = current.model_copy(update={**changes, "updated_at": utc_now()})
        self._blocks[block_id] = updated
        self._rev += 1
        return updated

    def delete(self, block_ids: Iterable[str]) -> list[str]:
        """Remove the given blocks; return the IDs that were present."""
        removed = [
            bid for bid in dict.fromkeys(block_ids) if self._blocks.pop(bid, None) is not None
        ]
        if removed:
            self._rev += 1
        return removed

    # ------------------------------- Reads ----------------------------------

    def get(self, block_id: str) -> Block | None:
        """Return the block with ``block_id``, or ``None``."""
        return self._blocks.get(block_id)

    def select(self, block_ids: Iterable[str]) -> list[Block]:
        """Return the known blocks among ``block_ids``, in board order."""
        wanted = set(block_ids)
        return [b for b in self._blocks.values() if b.id in wanted]

    def blocks(self) -> tuple[Block, ...]:
        """Return every block in board order."""
        return tuple(self._blocks.values())

    def bounds(self, block_ids: Iterable[str]) -> tuple[float, float, float, float] | None:
        """Return ``(min_x, min_y, max_x, max_y)`` around the given blocks."""
        chosen = self.select(block_ids)
        if not chosen:
            return None
        return (
            min(b.x for b in chosen),
            min(b.y for b in chosen),
            max(b.x + b.width for b in chosen),
            max(b.y + block_height(b) for b in chosen),
        )

    @property
    def revision(self) -> int:
        return self._rev

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._blocks)


__all__ = ["Board", "block_height"]
