"""Pipeline entry points for Recap Canvas.

Currently exposed:

- :func:`summarize_selection` / :func:`summarize_canvas`: summarize blocks on
  a :class:`~recapcanvas.core.store.board.Board` and store the summary block.
- :func:`ask_summary`: answer a question from a stored summary block.
- :func:`summary_to_plain_text`: clipboard export.
"""

from __future__ import annotations

from .canvas_recap import ask_summary, summarize_canvas, summarize_selection, summary_to_plain_text

__all__ = ["ask_summary", "summarize_canvas", "summarize_selection", "summary_to_plain_text"]
