"""Recap Canvas: evidence-grounded summaries for spatial content boards.

Blocks placed on a canvas are summarized into a cited, sectioned synthesis;
follow-up questions are answered from that synthesis without inventing claims.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
