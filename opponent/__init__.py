"""
Computer opponent package.

Picks a move for the side to move in a python-chess position, at one of three
fixed difficulty tiers.

Modules:
    constants : Piece values, special scores, and tier depths/budgets
    evaluate  : Static material evaluation (absolute, White-positive)
    search    : Fixed-depth negamax with alpha-beta pruning and a deadline
    difficulty: Difficulty enum, tier table, select_move() and ChessAI
"""

from opponent.difficulty import ChessAI, Difficulty, select_move

__all__ = ["ChessAI", "Difficulty", "select_move"]
