"""
Difficulty tiers and the public move-selection entry point.

Three qualitatively different strategies share one entry point,
select_move(). The tier is a plain enum; dispatch happens on the strategy
recorded in the fixed TIERS table:

    easy          uniform random legal move
    intermediate  alpha-beta search, 2 plies, no deadline
    difficult     alpha-beta search, 4 plies, 10 s deadline

select_move() never raises for game conditions. A position without legal
moves yields None; a time-starved search falls back to a random legal move,
which the caller cannot tell apart from the easy tier.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum

import chess

from opponent.constants import (
    DIFFICULT_DEPTH,
    DIFFICULT_TIME_LIMIT_MS,
    INTERMEDIATE_DEPTH,
)
from opponent.search import SearchResult, search

_log = logging.getLogger(__name__)

RANDOM = "random"
ALPHABETA = "alphabeta"


class _TierDefault(Enum):
    """Marker for "use the tier's own budget" (None already means "no deadline")."""

    BUDGET = "budget"


_TIER_DEFAULT = _TierDefault.BUDGET


class Difficulty(str, Enum):
    EASY = "easy"
    INTERMEDIATE = "intermediate"
    DIFFICULT = "difficult"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        """
        Accept a Difficulty or its name in any case.

        Raises:
            ValueError: If value names no tier.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(d.value for d in cls)
            raise ValueError(f"unknown difficulty {value!r} (expected one of: {names})") from None


@dataclass(frozen=True)
class TierConfig:
    strategy: str
    depth: int
    time_limit_ms: int | None


TIERS: dict[Difficulty, TierConfig] = {
    Difficulty.EASY: TierConfig(strategy=RANDOM, depth=0, time_limit_ms=None),
    Difficulty.INTERMEDIATE: TierConfig(strategy=ALPHABETA, depth=INTERMEDIATE_DEPTH, time_limit_ms=None),
    Difficulty.DIFFICULT: TierConfig(
        strategy=ALPHABETA, depth=DIFFICULT_DEPTH, time_limit_ms=DIFFICULT_TIME_LIMIT_MS
    ),
}


def random_move(board: chess.Board, rng: random.Random | None = None) -> chess.Move | None:
    """Return a uniformly random legal move, or None if there is none."""
    legal_moves = list(board.legal_moves)
    if not legal_moves:
        return None
    return (rng or random).choice(legal_moves)


def choose_move(
    board: chess.Board,
    difficulty: Difficulty | str,
    *,
    rng: random.Random | None = None,
    time_limit_ms: int | None | _TierDefault = _TIER_DEFAULT,
) -> SearchResult:
    """
    Run the tier's strategy and return the full result.

    Same arguments as select_move(). Random choices (the easy tier and the
    timeout fallback) report score 0 at depth 0.
    """
    tier = TIERS[Difficulty.parse(difficulty)]

    if tier.strategy == RANDOM:
        return SearchResult(move=random_move(board, rng), score=0, depth=0, nodes=0)

    budget = tier.time_limit_ms if time_limit_ms is _TIER_DEFAULT else time_limit_ms
    result = search(board, tier.depth, budget)
    if result.move is not None or not result.timed_out:
        return result

    _log.debug("search ran out of time before scoring a move; playing a random move")
    return SearchResult(
        move=random_move(board, rng), score=0, depth=0, nodes=result.nodes, timed_out=True
    )


def select_move(
    board: chess.Board,
    difficulty: Difficulty | str,
    *,
    rng: random.Random | None = None,
    time_limit_ms: int | None | _TierDefault = _TIER_DEFAULT,
) -> chess.Move | None:
    """
    Choose a move for the side to move at the given difficulty.

    Args:
        board:         The current position. Searched in place and restored
                       before returning; the caller must not touch it meanwhile.
        difficulty:    A Difficulty or its name.
        rng:           Random source for the easy tier and the timeout
                       fallback. The module-level generator when omitted.
        time_limit_ms: Override of the tier's wall-clock budget (None for no
                       deadline). Intended for tests and tooling.

    Returns:
        A legal move, or None if the position has none.

    Raises:
        ValueError: If difficulty names no tier.
    """
    return choose_move(board, difficulty, rng=rng, time_limit_ms=time_limit_ms).move


class ChessAI:
    """
    A computer opponent bound to one difficulty for its lifetime.

    Each instance owns its random generator, so two opponents created with
    the same seed play identically.
    """

    def __init__(self, difficulty: Difficulty | str = Difficulty.EASY, *, seed: int | None = None) -> None:
        self._difficulty = Difficulty.parse(difficulty)
        self._rng = random.Random(seed)

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    def get_best_move(self, board: chess.Board) -> chess.Move | None:
        return select_move(board, self._difficulty, rng=self._rng)
