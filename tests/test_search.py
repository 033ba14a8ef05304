"""Tests for the negamax / alpha-beta search."""

import chess
import pytest

from opponent.constants import CHECKMATE_SCORE, INFINITY
from opponent.evaluate import evaluate
from opponent.search import SearchState, negamax, search

from conftest import (
    CHECKMATED,
    MATE_IN_ONE_BLACK,
    MATE_IN_ONE_WHITE,
    ROOK_TAKES_QUEEN_BLACK,
    ROOK_TAKES_QUEEN_WHITE,
    STALEMATE,
    snapshot,
)


def full_width(board: chess.Board, depth: int, color: int, ply: int, counter: list[int]) -> int:
    """Plain negamax without pruning, scored by the same leaf rules as the search."""
    counter[0] += 1
    if board.is_game_over():
        if board.is_checkmate():
            return -(CHECKMATE_SCORE - ply)
        return color * evaluate(board)
    if depth <= 0:
        return color * evaluate(board)

    best = -INFINITY
    for move in board.legal_moves:
        board.push(move)
        best = max(best, -full_width(board, depth - 1, -color, ply + 1, counter))
        board.pop()
    return best


def full_width_root(board: chess.Board, depth: int) -> tuple[chess.Move | None, int, int]:
    """Root loop of the search, minus pruning and deadline. Returns (move, score, nodes)."""
    counter = [0]
    color = 1 if board.turn == chess.WHITE else -1
    best_move, best_score = None, -INFINITY
    for move in board.legal_moves:
        board.push(move)
        score = -full_width(board, depth - 1, -color, 1, counter)
        board.pop()
        if score > best_score:
            best_move, best_score = move, score
    return best_move, best_score, counter[0]


class TestSearch:
    def test_returns_legal_move_from_start(self, start_board):
        result = search(start_board, 2)

        assert result.move in start_board.legal_moves
        assert result.depth == 2
        assert result.nodes > 0
        assert not result.timed_out

    def test_no_legal_moves_when_checkmated(self):
        result = search(chess.Board(CHECKMATED), 2)
        assert result.move is None
        assert result.score == 0

    def test_no_legal_moves_when_stalemated(self):
        result = search(chess.Board(STALEMATE), 4)
        assert result.move is None

    @pytest.mark.parametrize("depth", [2, 4])
    @pytest.mark.parametrize(
        "fen, expected",
        [(ROOK_TAKES_QUEEN_WHITE, "d1d5"), (ROOK_TAKES_QUEEN_BLACK, "d8d4")],
    )
    def test_takes_undefended_queen(self, fen, expected, depth):
        result = search(chess.Board(fen), depth)

        assert result.move == chess.Move.from_uci(expected)
        assert result.score == 5

    @pytest.mark.parametrize("depth", [2, 4])
    @pytest.mark.parametrize(
        "fen, expected",
        [(MATE_IN_ONE_WHITE, "a1a8"), (MATE_IN_ONE_BLACK, "a8a1")],
    )
    def test_delivers_mate_in_one(self, fen, expected, depth):
        board = chess.Board(fen)
        result = search(board, depth)

        assert result.move == chess.Move.from_uci(expected)
        assert result.score == CHECKMATE_SCORE - 1
        board.push(result.move)
        assert board.is_checkmate()

    def test_ties_keep_first_enumerated_move(self):
        # Bare kings: every move scores 0, so the first legal move wins.
        board = chess.Board("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        result = search(board, 2)
        assert result.move == next(iter(board.legal_moves))

    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_board_restored(self, start_board, depth):
        start_board.push_uci("e2e4")
        before = snapshot(start_board)

        search(start_board, depth)

        assert snapshot(start_board) == before


class TestAlphaBetaMatchesFullWidth:
    @pytest.mark.parametrize(
        "fen",
        [
            chess.STARTING_FEN,
            ROOK_TAKES_QUEEN_WHITE,
            ROOK_TAKES_QUEEN_BLACK,
            MATE_IN_ONE_WHITE,
            "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4",
        ],
    )
    def test_depth_two(self, fen):
        board = chess.Board(fen)
        ref_move, ref_score, _ = full_width_root(board, 2)

        result = search(board, 2)

        assert result.score == ref_score
        assert result.move == ref_move

    @pytest.mark.parametrize(
        "fen",
        [
            "8/8/8/4k3/8/8/4P3/4K3 w - - 0 1",
            "8/8/3k4/8/8/2N5/4P3/4K3 b - - 0 1",
            "7k/6p1/8/8/8/8/1P6/K7 w - - 0 1",
        ],
    )
    def test_depth_four(self, fen):
        board = chess.Board(fen)
        ref_move, ref_score, _ = full_width_root(board, 4)

        result = search(board, 4)

        assert result.score == ref_score
        assert result.move == ref_move

    def test_pruning_visits_fewer_nodes(self):
        # Equal material everywhere: alpha-beta cuts off below the first
        # reply of every ply-2 node.
        board = chess.Board("7k/6p1/8/8/8/8/1P6/K7 w - - 0 1")
        _, _, full_width_nodes = full_width_root(board, 3)

        result = search(board, 3)

        assert result.nodes < full_width_nodes


class TestDeadline:
    def test_zero_budget_scores_nothing(self, fake_clock, start_board):
        before = snapshot(start_board)

        result = search(start_board, 4, time_limit_ms=0)

        assert result.move is None
        assert result.timed_out
        assert result.nodes == 0
        assert snapshot(start_board) == before

    def test_timeout_mid_search_restores_board(self, fake_clock, start_board):
        start_board.push_uci("d2d4")
        before = snapshot(start_board)

        result = search(start_board, 4, time_limit_ms=40)

        assert result.timed_out
        assert result.move in start_board.legal_moves
        assert snapshot(start_board) == before

    def test_expired_node_returns_static_score(self, fake_clock):
        board = chess.Board(ROOK_TAKES_QUEEN_BLACK)
        state = SearchState.begin(0)

        # Black to move: color -1, White is up 4 pawns, so Black sees -4.
        score = negamax(board, 3, -INFINITY, INFINITY, -1, 0, state)

        assert score == -4
        assert state.timed_out
        assert state.node_count == 1

    def test_expired_node_still_scores_checkmate(self, fake_clock):
        board = chess.Board(MATE_IN_ONE_WHITE)
        board.push_uci("a1a8")
        state = SearchState.begin(0)

        score = negamax(board, 3, -INFINITY, INFINITY, -1, 1, state)

        assert score == -(CHECKMATE_SCORE - 1)
        assert state.node_count == 1

    def test_unbounded_search_never_times_out(self, fake_clock):
        state = SearchState.begin(None)
        assert state.deadline is None
        assert not state.out_of_time()

    def test_timeout_latches(self, fake_clock):
        state = SearchState.begin(5)
        while not state.out_of_time():
            pass
        fake_clock.now -= 1.0
        assert state.out_of_time()
