"""Block store: the in-memory board and its best-effort on-disk snapshot."""

from __future__ import annotations

from .board import Board, block_height
from .seed import seed_blocks
from .snapshot import SCHEMA_VERSION, STORAGE_KEY, BoardSnapshot, SnapshotStore

__all__ = [
    "Board",
    "block_height",
    "BoardSnapshot",
    "SnapshotStore",
    "SCHEMA_VERSION",
    "STORAGE_KEY",
    "seed_blocks",
]
