"""
Material evaluation: the only static knowledge the opponent has.

Each piece on the board contributes its value from PIECE_VALUES, added for
White and subtracted for Black. There is no positional, mobility or
king-safety term.

The score returned by evaluate() is absolute: positive always favours White,
whichever side is to move. The search works in the negamax convention (every
node maximises its own score), so it multiplies each leaf value by the
colour to move (+1 White, -1 Black). Getting this pair backwards makes one
colour play for its opponent.
"""

import chess

from opponent.constants import PIECE_VALUES


def evaluate(board: chess.Board) -> int:
    """
    Material balance of the position, White minus Black.

    Args:
        board: The position to score. Not modified.

    Returns:
        Signed material in pawns. Positive favours White.

    Example:
        >>> import chess
        >>> evaluate(chess.Board())
        0
    """
    score = 0
    for piece in board.piece_map().values():
        value = PIECE_VALUES[piece.piece_type]
        if piece.color == chess.WHITE:
            score += value
        else:
            score -= value
    return score
