# src/recapcanvas/cli.py
"""
Recap Canvas command line interface.

A terminal stand-in for the canvas: the board lives in the snapshot file
(``RECAP_DATA_DIR``, or ``--data-dir``), and every command loads it, acts on
it, and saves it back. When there is no usable saved state the demo board is
used instead.

Commands
--------
- ``demo``: write the demo board to the snapshot (``--force`` to overwrite).
- ``blocks``: list the blocks on the board.
- ``summarize``: summarize ``--id`` blocks (repeatable) or ``--canvas``.
- ``ask``: ask a follow-up question against a summary block.
- ``export``: print (or ``--output``) a summary as plain text.

Usage
-----
    $ recap demo
    $ recap summarize --id T-301 --id T-302 --id L-22
    $ recap ask SUM-m1x2k9q0-3fa1 "What was decided?"
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from recapcanvas.agents.extractor import extract
from recapcanvas.agents.summarizer_agent import truncate_words
from recapcanvas.core.contracts.block import SummaryBlock
from recapcanvas.core.contracts.summary import Citation
from recapcanvas.core.settings import get_logger
from recapcanvas.core.store.board import Board
from recapcanvas.core.store.seed import seed_blocks
from recapcanvas.core.store.snapshot import SnapshotStore
from recapcanvas.pipelines.canvas_recap import (
    ask_summary,
    summarize_canvas,
    summarize_selection,
    summary_to_plain_text,
)

# Ensure env vars (like RECAP_DATA_DIR) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="Recap Canvas: cited summaries of canvas blocks.",
    rich_markup_mode="markdown",
    no_args_is_help=True,
)
console = Console()
logger = get_logger(__name__)

DataDirOption = Annotated[
    Path | None,
    typer.Option(
        "--data-dir",
        "-d",
        file_okay=False,
        help="Directory holding the board snapshot (default: RECAP_DATA_DIR).",
    ),
]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _open_board(data_dir: Path | None) -> tuple[SnapshotStore, Board]:
    """Load the saved board, or the demo board when nothing usable is saved."""
    store = SnapshotStore(data_dir)
    loaded = store.load()
    if loaded.is_err():
        logger.info("Using demo board: %s", loaded.unwrap_err())
        return store, Board(seed_blocks())
    return store, Board(loaded.unwrap())


def _save(store: SnapshotStore, board: Board) -> None:
    if store.save(board.blocks()) is None:
        console.print("[yellow]Warning: could not save the board; changes are not kept.[/yellow]")


def _citation_table(citations: list[Citation]) -> Table:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("#", justify="right")
    table.add_column("Blocks")
    for c in citations:
        table.add_row(str(c.n), ", ".join(c.block_ids))
    return table


def _render_summary(block: SummaryBlock) -> None:
    summary = block.summary
    console.rule(f"[bold]{escape(summary.title)}[/bold]")
    console.print(f"[dim]{block.id} · scope: {summary.scope.kind}[/dim]\n")
    console.print(escape(summary.summary_text))
    console.print()
    console.print(_citation_table(summary.citations))


def _fail(exc: Exception) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def demo(
    data_dir: DataDirOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing saved board."),
    ] = False,
) -> None:
    """Write the demo board to the snapshot."""
    store = SnapshotStore(data_dir)
    if store.load().is_ok() and not force:
        console.print("A saved board already exists; use [bold]--force[/bold] to replace it.")
        raise typer.Exit(code=1)
    board = Board(seed_blocks())
    _save(store, board)
    console.print(f"[green]Demo board saved[/green] ({len(board)} blocks).")


@app.command()  # type: ignore[misc]
def blocks(data_dir: DataDirOption = None) -> None:
    """List the blocks on the board."""
    _, board = _open_board(data_dir)
    table = Table(title="Blocks", header_style="bold")
    table.add_column("ID", no_wrap=True)
    table.add_column("Type")
    table.add_column("Content")
    for block in board.blocks():
        preview = truncate_words(extract(block), 12) or "-"
        table.add_row(block.id, block.type, escape(preview))
    console.print(table)


@app.command()  # type: ignore[misc]
def summarize(
    ids: Annotated[
        list[str] | None,
        typer.Option("--id", "-i", help="Block ID to include (repeatable)."),
    ] = None,
    canvas: Annotated[
        bool,
        typer.Option("--canvas", help="Summarize every non-summary block."),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Summarize selected blocks (or the whole canvas) and store the summary."""
    if not ids and not canvas:
        console.print("Pass at least one [bold]--id[/bold], or [bold]--canvas[/bold].")
        raise typer.Exit(code=2)

    store, board = _open_board(data_dir)
    try:
        block = summarize_canvas(board) if canvas else summarize_selection(board, ids or [])
    except ValueError as exc:
        raise _fail(exc) from exc
    _save(store, board)
    _render_summary(block)


@app.command()  # type: ignore[misc]
def ask(
    summary_id: Annotated[str, typer.Argument(help="ID of the summary block.")],
    question: Annotated[str, typer.Argument(help="Follow-up question.")],
    scope: Annotated[
        list[str] | None,
        typer.Option("--scope", "-s", help="Restrict citations to these block IDs."),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Answer a follow-up question from a stored summary."""
    store, board = _open_board(data_dir)
    try:
        exchange = ask_summary(board, summary_id, question, scope or None)
    except ValueError as exc:
        raise _fail(exc) from exc
    _save(store, board)
    console.print(Panel(escape(exchange.answer), title=escape(exchange.question)))
    if exchange.citations:
        console.print(_citation_table(exchange.citations))


@app.command()  # type: ignore[misc]
def export(
    summary_id: Annotated[str, typer.Argument(help="ID of the summary block.")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", dir_okay=False, help="Write to this file instead."),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Print a summary as plain text (title, body, evidence)."""
    _, board = _open_board(data_dir)
    block = board.get(summary_id)
    if not isinstance(block, SummaryBlock):
        raise _fail(ValueError(f"No summary block {summary_id!r}"))

    text = summary_to_plain_text(block.summary)
    if output is None:
        typer.echo(text)
        return
    try:
        output.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        raise _fail(exc) from exc
    console.print(f"[dim]Exported to {output}[/dim]")


if __name__ == "__main__":
    app()
