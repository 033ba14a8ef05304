"""Shared positions and a controllable clock for the opponent tests."""

import chess
import pytest

import opponent.search as search_module

# White rook on d1 takes the undefended black queen on d5. Any other move
# leaves the rook to Qxd1+.
ROOK_TAKES_QUEEN_WHITE = "6k1/8/8/3q4/8/8/8/3R2K1 w - - 0 1"
# Mirror image with Black to move: Rxd4 or lose the rook to Qxd8+.
ROOK_TAKES_QUEEN_BLACK = "3r2k1/8/8/8/3Q4/8/8/6K1 b - - 0 1"

# Back-rank mates in one: Ra8# for White, Ra1# for Black.
MATE_IN_ONE_WHITE = "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1"
MATE_IN_ONE_BLACK = "r5k1/5ppp/8/8/8/8/5PPP/6K1 b - - 0 1"

# Fool's mate: White to move and checkmated.
CHECKMATED = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
# Black to move, no legal moves, not in check.
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"


class FakeClock:
    """Stands in for the time module; every monotonic() call advances 1 ms."""

    def __init__(self, start: float = 1000.0, step: float = 0.001) -> None:
        self.now = start
        self.step = step
        self.calls = 0

    def monotonic(self) -> float:
        self.calls += 1
        self.now += self.step
        return self.now


@pytest.fixture
def fake_clock(monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(search_module, "time", clock)
    return clock


@pytest.fixture
def start_board():
    return chess.Board()


def snapshot(board: chess.Board) -> tuple:
    """Everything push/pop can touch: the position and the move history."""
    return board.fen(), list(board.move_stack)
