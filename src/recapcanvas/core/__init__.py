"""Core package for Recap Canvas: contracts, citation numbering, settings, storage."""

from __future__ import annotations

__all__ = ["__doc__"]
