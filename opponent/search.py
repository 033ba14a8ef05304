"""
Search: fixed-depth negamax with alpha-beta pruning and an optional deadline.

This module is the algorithmic core of the opponent. search() explores every
legal move at the root, scores each one with a recursive negamax call one ply
below, and keeps the move with the strictly greatest score. Ties keep the
move that python-chess enumerated first, so results are reproducible.

There is no move ordering, no transposition table and no quiescence
search: moves are visited in the order board.legal_moves yields them, and
leaves are scored by material alone.

Time model:
    A deadline is computed once when the search begins and stored in
    SearchState. Every negamax call and every iteration of the root loop
    polls it. A node that finds the deadline passed returns its static score
    as if depth had reached zero; the root loop stops enumerating further
    candidates. There is no background timer: a call already in flight always
    completes before the next poll.

Board discipline:
    The search mutates the caller's board with push()/pop(). Every push is
    paired with a pop in a finally block, so the board is restored on every
    exit path, including a timeout in the middle of a subtree.
"""

import logging
import time
from dataclasses import dataclass, field

import chess

from opponent.constants import CHECKMATE_SCORE, INFINITY
from opponent.evaluate import evaluate

_log = logging.getLogger(__name__)


@dataclass
class SearchState:
    """
    Per-search bookkeeping threaded through every negamax call.

    Attributes:
        start_time: Monotonic clock timestamp when the search began.
        deadline:   Monotonic timestamp after which the search must wind down,
                    or None for an unbounded search.
        node_count: Number of negamax calls made so far.
        timed_out:  Latched to True the first time a poll finds the deadline
                    passed.
    """

    start_time: float = field(default_factory=time.monotonic)
    deadline: float | None = None
    node_count: int = 0
    timed_out: bool = False

    @classmethod
    def begin(cls, time_limit_ms: int | None) -> "SearchState":
        """Start the clock, with a deadline time_limit_ms from now (None = no deadline)."""
        start = time.monotonic()
        deadline = None if time_limit_ms is None else start + time_limit_ms / 1000
        return cls(start_time=start, deadline=deadline)

    def out_of_time(self) -> bool:
        """Poll the clock against the deadline."""
        if self.timed_out:
            return True
        if self.deadline is not None and time.monotonic() >= self.deadline:
            self.timed_out = True
        return self.timed_out

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.start_time) * 1000)


@dataclass
class SearchResult:
    """
    Outcome of one root search.

    Attributes:
        move:      Best move found, or None if no root move was scored (no legal
                   moves, or the deadline passed before the first candidate).
        score:     Score of move from the side-to-move's perspective, in pawns
                   (or a mate score). 0 when move is None.
        depth:     Nominal search depth in plies.
        nodes:     Number of negamax calls made.
        timed_out: True if the deadline cut the search short.
    """

    move: chess.Move | None
    score: int
    depth: int
    nodes: int
    timed_out: bool = False


def negamax(
    board: chess.Board,
    depth: int,
    alpha: int,
    beta: int,
    color: int,
    ply: int,
    state: SearchState,
) -> int:
    """
    Negamax search with alpha-beta pruning.

    Args:
        board: Current position. Modified in place via push/pop and always
               restored before returning.
        depth: Remaining depth in plies.
        alpha: Lower bound of the search window.
        beta:  Upper bound of the search window.
        color: +1 if White is to move at this node, -1 if Black is. Multiplies
               the absolute material score into this node's perspective and
               flips on every recursive call.
        ply:   Distance from the root, used to prefer nearer checkmates.
        state: Shared deadline and node counter.

    Returns:
        Score from the perspective of the side to move at this node.
    """
    state.node_count += 1

    if board.is_game_over():
        if board.is_checkmate():
            # The side to move is mated.
            return -(CHECKMATE_SCORE - ply)
        return color * evaluate(board)

    # Out of time: behave as if depth had run out.
    if state.out_of_time() or depth <= 0:
        return color * evaluate(board)

    best_score = -INFINITY
    for move in board.legal_moves:
        board.push(move)
        try:
            score = -negamax(board, depth - 1, -beta, -alpha, -color, ply + 1, state)
        finally:
            board.pop()

        if score > best_score:
            best_score = score
        if best_score > alpha:
            alpha = best_score
        if beta <= alpha:
            break

    return best_score


def search(
    board: chess.Board,
    depth: int,
    time_limit_ms: int | None = None,
) -> SearchResult:
    """
    Pick the best move at a fixed depth, optionally under a wall-clock budget.

    The root is not itself a negamax call: each root move is played and
    scored by negamax one ply below with a full window, and the strictly
    greatest score wins. The first move in enumeration order wins ties.

    Args:
        board:         The position to search. Restored before returning.
        depth:         Search depth in plies, counting the root move.
        time_limit_ms: Wall-clock budget, or None for no deadline. A budget of
                       0 expires before the first root move.

    Returns:
        A SearchResult. Its move is None if the position has no legal moves
        or if the deadline passed before any root move was scored.
    """
    state = SearchState.begin(time_limit_ms)
    color = 1 if board.turn == chess.WHITE else -1

    best_move: chess.Move | None = None
    best_score = -INFINITY

    for move in board.legal_moves:
        if state.out_of_time():
            break
        board.push(move)
        try:
            score = -negamax(board, depth - 1, -INFINITY, INFINITY, -color, 1, state)
        finally:
            board.pop()

        if score > best_score:
            best_score = score
            best_move = move

    _log.debug(
        "search depth=%d move=%s score=%d nodes=%d time=%dms timed_out=%s",
        depth,
        best_move.uci() if best_move else None,
        best_score if best_move else 0,
        state.node_count,
        state.elapsed_ms(),
        state.timed_out,
    )

    return SearchResult(
        move=best_move,
        score=best_score if best_move is not None else 0,
        depth=depth,
        nodes=state.node_count,
        timed_out=state.timed_out,
    )
