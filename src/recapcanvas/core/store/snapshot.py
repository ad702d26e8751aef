"""Best-effort on-disk snapshot of the board.

- Default directory: ``RECAP_DATA_DIR`` (see :mod:`recapcanvas.core.settings`),
  falling back to ``artifacts/canvas/``.
- The board lives under the fixed key ``recap-canvas:v1`` (file
  ``recap-canvas_v1.json``).
- Content: ``{"schemaVersion": 1, "savedAt": "...Z", "blocks": [...]}``.

Loading never raises. A missing file, unparsable JSON, a different
``schemaVersion`` or malformed blocks all come back as ``Err(reason)``, and the
caller treats every one of them as "no saved state". Saving is best effort:
filesystem errors are logged and reported as ``None``.

Usage
-----
>>> store = SnapshotStore()
>>> store.save(board.blocks())
>>> blocks = store.load().get_or([])
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from recapcanvas.core.contracts.block import Block
from recapcanvas.core.result import Result, err, ok
from recapcanvas.core.settings import get_logger, load_settings

STORAGE_KEY = "recap-canvas:v1"
SCHEMA_VERSION = 1

_BLOCKS = TypeAdapter(list[Block])
logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Immutable record of the board as written to disk.

    Attributes
    ----------
    schema_version : int
        Compatibility gate; anything but :data:`SCHEMA_VERSION` reads as absent.
    saved_at : str
        ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix.
    blocks : list[dict[str, Any]]
        Blocks in their camelCase wire form.
    """

    schema_version: int
    saved_at: str
    blocks: list[dict[str, Any]] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "savedAt": self.saved_at,
            "blocks": self.blocks,
        }


def _key_filename(key: str) -> str:
    return key.replace(":", "_") + ".json"


def _timestamp() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class SnapshotStore:
    """Persist and restore board snapshots as JSON files."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir: Path = base_dir if base_dir is not None else load_settings().data_dir

    def path_for(self, key: str) -> Path:
        """Return the file backing ``key``."""
        return self.base_dir / _key_filename(key)

    # ------------------------------- Blocks ---------------------------------

    def snapshot(self, blocks: Iterable[Block]) -> BoardSnapshot:
        """Capture ``blocks`` as an in-memory :class:`BoardSnapshot`."""
        return BoardSnapshot(
            schema_version=SCHEMA_VERSION,
            saved_at=_timestamp(),
            blocks=[b.to_wire() for b in blocks],
        )

    def save(self, blocks: Iterable[Block]) -> Path | None:
        """Write the board; return the file path, or ``None`` if the write failed."""
        snap = self.snapshot(blocks)
        path = self.path_for(STORAGE_KEY)
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(snap.to_payload(), f, ensure_ascii=False, indent=2)
                f.write("\n")
        except OSError as exc:
            logger.warning("Failed to save canvas state to %s: %s", path, exc)
            return None
        logger.debug("Saved %d blocks to %s", len(snap.blocks), path)
        return path

    def load(self) -> Result[list[Block], str]:
        """Read the board back, or explain why there is no usable saved state."""
        path = self.path_for(STORAGE_KEY)
        if not path.exists():
            return err(f"No saved state at {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                payload: Any = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to load canvas state from %s: %s", path, exc)
            return err(f"Unreadable snapshot: {exc}")

        if not isinstance(payload, dict):
            return err("Snapshot root must be a JSON object")
        if payload.get("schemaVersion") != SCHEMA_VERSION:
            return err(
                f"Snapshot schemaVersion {payload.get('schemaVersion')!r} != {SCHEMA_VERSION}"
            )
        raw_blocks = payload.get("blocks")
        if not isinstance(raw_blocks, list):
            return err("Snapshot 'blocks' must be a list")

        try:
            blocks = _BLOCKS.validate_python(raw_blocks)
        except ValidationError as exc:
            logger.warning("Discarding malformed canvas state at %s: %s", path, exc)
            return err(f"Malformed blocks: {exc.error_count()} validation error(s)")
        return ok(blocks)


__all__ = ["BoardSnapshot", "SnapshotStore", "STORAGE_KEY", "SCHEMA_VERSION"]
