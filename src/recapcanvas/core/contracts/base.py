"""Shared base for every Recap Canvas contract.

Conventions
-----------
- Python attributes are snake_case; the JSON wire form is camelCase
  (``summaryText``, ``evidenceBlockIds``, ``blockIds``, ``citationNs``) so
  snapshots and HTTP payloads line up with what the canvas client stores.
- Models accept either spelling on input (``populate_by_name``).
- Timestamps are timezone-aware UTC.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Return the current UTC time (default factory for timestamps)."""
    return datetime.now(UTC)


class ContractModel(BaseModel):
    """Base model with camelCase aliases and lenient name population."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump to a JSON-safe dict using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["ContractModel", "utc_now"]
