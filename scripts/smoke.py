# scripts/smoke.py
"""
Smoke test script for the Recap Canvas pipeline.

Usage
-----
1. Rule-based summary + a few follow-up questions over the demo board:
    $ python scripts/smoke.py

2. Also call the hosted summarizer (needs OPENAI_API_KEY in .env):
    $ python scripts/smoke.py --remote
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from recapcanvas.agents.remote_agent import run_remote_summary
from recapcanvas.core.store.board import Board
from recapcanvas.core.store.seed import seed_blocks
from recapcanvas.pipelines.canvas_recap import ask_summary, summarize_canvas

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

QUESTIONS = (
    "What is this about?",
    "What decisions have been made?",
    "What are the constraints?",
    "Where should I start?",
    "banana",
)


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run Recap Canvas smoke test")
    parser.add_argument("--remote", action="store_true", help="Also call the hosted summarizer")
    args = parser.parse_args()

    board = Board(seed_blocks())

    # 1. Rule-based summary
    try:
        block = summarize_canvas(board)
    except Exception as exc:
        print(f"\n❌ Summarizer crashed: {exc}")
        traceback.print_exc()
        return

    summary = block.summary
    print("\n" + "=" * 60)
    print(f"✅ {summary.title} ({block.id})")
    print("=" * 60)
    print(summary.summary_text)
    print("\n📌 Citations:")
    for citation in summary.citations:
        print(f"  [{citation.n}] {', '.join(citation.block_ids)}")

    # 2. Follow-up questions
    for question in QUESTIONS:
        exchange = ask_summary(board, block.id, question)
        print(f"\n❓ {question}")
        print(exchange.answer)

    # 3. Hosted variant
    if args.remote:
        raw = [b.to_wire() for b in seed_blocks()]
        result = run_remote_summary("project", raw)
        if result.is_err():
            error = result.unwrap_err()
            print(f"\n❌ Hosted summary refused: {error.reason} ({error.message})")
        else:
            print("\n🛰  Hosted summary:\n" + result.unwrap())


if __name__ == "__main__":
    main()
