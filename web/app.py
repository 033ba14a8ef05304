"""
FastAPI web application for the chess opponent.

Exposes POST /api/move, which accepts a FEN position and a difficulty, asks
the opponent for a move, and returns the move with the resulting position.
GET /api/difficulties lists the tiers so a front end can build its menu.

Architecture notes:
- Sync endpoint (not async): FastAPI runs sync handlers in a thread pool,
  which is the correct pattern for CPU-bound blocking calls like a search.
- Stateless per request: the client sends the full FEN each time; no server-
  side board state is maintained between requests. Each request builds its
  own chess.Board, so concurrent searches never share a game state.
"""

import logging

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from opponent.difficulty import TIERS, Difficulty, choose_move

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="Chess AI", version="1.0.0")


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class MoveRequest(BaseModel):
    """
    Client request to the opponent.

    Fields:
        fen: Full FEN string representing the current board position.
        difficulty: One of "easy", "intermediate", "difficult". Anything else
                    is rejected by validation with HTTP 422.
    """

    fen: str
    difficulty: Difficulty = Difficulty.INTERMEDIATE


class MoveResponse(BaseModel):
    """
    The opponent's reply.

    Fields:
        move: Chosen move in UCI notation (e.g. "e2e4", "e7e8q").
        san: The same move in standard algebraic notation.
        fen: Board FEN after the move is applied.
        difficulty: Tier that produced the move.
    """

    move: str
    san: str
    fen: str
    difficulty: Difficulty


class TierInfo(BaseModel):
    name: Difficulty
    depth: int
    time_limit_ms: int | None


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Compute the opponent's move for the given position.

    Raises:
        HTTPException 400: Malformed FEN or game already over.
        HTTPException 500: The opponent failed or returned no move.
    """
    try:
        board = chess.Board(request.fen)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc}") from exc

    if board.is_game_over():
        raise HTTPException(
            status_code=400,
            detail=f"Game is already over: {board.result()}",
        )

    try:
        result = choose_move(board, request.difficulty)
    except Exception as exc:
        _log.exception("Move selection failed for FEN=%s", request.fen)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if result.move is None:
        raise HTTPException(status_code=500, detail="Engine returned no move")

    _log.info(
        "difficulty=%s move=%s score=%d nodes=%d fen=%s",
        request.difficulty.value,
        result.move.uci(),
        result.score,
        result.nodes,
        request.fen[:40],
    )

    san = board.san(result.move)
    board.push(result.move)
    return MoveResponse(
        move=result.move.uci(),
        san=san,
        fen=board.fen(),
        difficulty=request.difficulty,
    )


@app.get("/api/difficulties", response_model=list[TierInfo])
def api_difficulties() -> list[TierInfo]:
    """List the difficulty tiers with their search depth and time budget."""
    return [
        TierInfo(name=difficulty, depth=tier.depth, time_limit_ms=tier.time_limit_ms)
        for difficulty, tier in TIERS.items()
    ]
