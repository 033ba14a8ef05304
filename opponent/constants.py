"""
Engine constants: piece values, special scores, and difficulty tier settings.

All numeric constants used by the opponent are defined here so that the
evaluator, the search and the difficulty table never carry their own magic
numbers.

Piece values use whole-pawn units (1 pawn = 1). The front ends multiply by
CENTIPAWNS_PER_PAWN when they need to report a UCI "score cp" value.
"""

import chess

# ---------------------------------------------------------------------------
# Piece values (pawns)
# ---------------------------------------------------------------------------
# Classical textbook values. Kings count for nothing.

PAWN_VALUE: int = 1
KNIGHT_VALUE: int = 3
BISHOP_VALUE: int = 3
ROOK_VALUE: int = 5
QUEEN_VALUE: int = 9
KING_VALUE: int = 0

PIECE_VALUES: dict[int, int] = {
    chess.PAWN:   PAWN_VALUE,
    chess.KNIGHT: KNIGHT_VALUE,
    chess.BISHOP: BISHOP_VALUE,
    chess.ROOK:   ROOK_VALUE,
    chess.QUEEN:  QUEEN_VALUE,
    chess.KING:   KING_VALUE,
}

CENTIPAWNS_PER_PAWN: int = 100

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# Total material on a legal board is at most 103 pawns per side, so a mate
# score of 10 000 can never be confused with a material balance.
# INFINITY bounds the root alpha-beta window and must exceed CHECKMATE_SCORE.

CHECKMATE_SCORE: int = 10_000
INFINITY: int = 1_000_000

# ---------------------------------------------------------------------------
# Difficulty tiers
# ---------------------------------------------------------------------------
# Fixed per tier; not user-tunable at call time.

INTERMEDIATE_DEPTH: int = 2
DIFFICULT_DEPTH: int = 4
DIFFICULT_TIME_LIMIT_MS: int = 10_000
