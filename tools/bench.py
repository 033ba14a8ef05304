#!/usr/bin/env python3
"""
Benchmark: nodes searched and time per move for each searching tier.

Runs the search in-process over a fixed set of positions at the
intermediate and difficult tiers. Node counts show how much alpha-beta
pruning saves; the difficult column shows which positions hit the deadline.

Usage: python3 tools/bench.py
"""
import os
import sys
import time

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO not in sys.path:
    sys.path.insert(0, REPO)

import chess

from opponent.difficulty import TIERS, Difficulty
from opponent.search import search

# Fixed positions spanning opening, middlegame, and endgame.
POSITIONS = [
    ("Start",        chess.STARTING_FEN),
    ("After 1.e4",   "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"),
    ("Italian",      "r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R b KQkq - 3 3"),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Complex mid",  "r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w - - 0 8"),
    ("Pawn ending",  "6k1/ppp2ppp/8/3p4/3P4/8/PPP2PPP/6K1 w - - 0 1"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
    ("Mate in one",  "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"),
]

TIERS_TO_RUN = (Difficulty.INTERMEDIATE, Difficulty.DIFFICULT)


def run_position(label: str, fen: str, difficulty: Difficulty) -> dict:
    """Search one position at one tier and return its metrics."""
    tier = TIERS[difficulty]
    board = chess.Board(fen)
    start = time.monotonic()
    result = search(board, tier.depth, tier.time_limit_ms)
    elapsed_ms = max(1, int((time.monotonic() - start) * 1000))
    return {
        "label": label,
        "tier": difficulty.value,
        "move": result.move.uci() if result.move else "(none)",
        "score": result.score,
        "nodes": result.nodes,
        "time_ms": elapsed_ms,
        "timeout": "yes" if result.timed_out else "",
    }


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    print(f"Chess AI opponent benchmark: {sys.executable}")
    print()
    print(
        f"{'Position':<14} {'Tier':<13} {'Move':<7} {'Score':>6} "
        f"{'Nodes':>9} {'Time(ms)':>9} {'Timeout':>8}"
    )
    print("-" * 72)

    for difficulty in TIERS_TO_RUN:
        for label, fen in POSITIONS:
            r = run_position(label, fen, difficulty)
            print(
                f"{r['label']:<14} {r['tier']:<13} {r['move']:<7} {r['score']:>6} "
                f"{r['nodes']:>9,} {r['time_ms']:>9,} {r['timeout']:>8}"
            )
        print("-" * 72)


if __name__ == "__main__":
    main()
