"""
UCI (Universal Chess Interface) protocol handler.

UCI is the standard text-based protocol that allows chess GUIs and testing
tools (like cutechess-cli) to communicate with chess engines. The engine
reads commands from stdin and writes responses to stdout. All output lines
must be flushed immediately; GUI programs won't block waiting for a newline.

Protocol overview:
    GUI → Engine: uci, isready, ucinewgame, setoption, position, go, stop, quit
    Engine → GUI: id name, id author, option, uciok, readyok, info, bestmove

The opponent's strength is chosen with the "Difficulty" option:
    setoption name Difficulty value intermediate

Threading model:
    The UCI loop runs on the main thread and must never block on the search.
    When the GUI sends "go", we spawn a daemon thread to run the search on a
    copy of the board. The search has no stop signal; it ends at its own
    depth or deadline, so "stop" simply waits for the thread to reply.

Critical rule: NEVER print to stdout except for valid UCI responses.
Debug output must go to stderr.
"""

import sys
import os
import threading
import time

# ---------------------------------------------------------------------------
# Path setup: make 'opponent' importable when this script is run directly
# as `python interface/uci.py` from the repo root.
# ---------------------------------------------------------------------------
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import chess
from opponent.constants import CENTIPAWNS_PER_PAWN, CHECKMATE_SCORE
from opponent.difficulty import TIERS, Difficulty, choose_move
from opponent.search import SearchResult

# Scores this close to CHECKMATE_SCORE are mate scores (distance in plies).
_MATE_THRESHOLD = CHECKMATE_SCORE - 1_000


def _send(line: str) -> None:
    """
    Write a line to stdout and flush immediately.

    UCI requires every output line to be flushed right away. GUIs read
    line-by-line; if the buffer is not flushed, the GUI will hang waiting
    for output that is already in the buffer.
    """
    print(line, flush=True)


def _log(message: str) -> None:
    """Write a diagnostic message to stderr; stdout is reserved for the protocol."""
    print(message, file=sys.stderr, flush=True)


def format_score(score: int) -> str:
    """
    Render a search score as a UCI score token.

    Material scores become "cp <centipawns>". Mate scores become
    "mate <moves>", positive when the side to move delivers mate.
    """
    if abs(score) >= _MATE_THRESHOLD:
        plies = CHECKMATE_SCORE - abs(score)
        moves = (plies + 1) // 2
        return f"mate {moves if score > 0 else -moves}"
    return f"cp {score * CENTIPAWNS_PER_PAWN}"


class UciHandler:
    """
    Stateful handler for the UCI protocol.

    Holds the current board position, the configured difficulty, and the
    search thread lifecycle. The main UCI loop creates one instance and
    dispatches commands to it.

    Attributes:
        board:         The current board position, updated by "position" commands.
        difficulty:    Tier used for every "go". Changed with setoption.
        search_thread: The active search thread, or None if no search is running.
    """

    def __init__(self, difficulty: Difficulty = Difficulty.INTERMEDIATE) -> None:
        self.board: chess.Board = chess.Board()
        self.difficulty: Difficulty = difficulty
        self.search_thread: threading.Thread | None = None

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        """
        Respond to the "uci" command with our identity and options.

        Difficulty is advertised as a combo option listing every tier.
        """
        _send("id name ChessAI")
        _send("id author Chess AI Project")
        choices = " ".join(f"var {d.value}" for d in Difficulty)
        _send(f"option name Difficulty type combo default {self.difficulty.value} {choices}")
        _send("uciok")

    def handle_isready(self) -> None:
        _send("readyok")

    def handle_ucinewgame(self) -> None:
        """Wait for any running search and reset the board."""
        self._wait_for_search()
        self.board = chess.Board()

    def handle_setoption(self, tokens: list[str]) -> None:
        """
        Parse "setoption name <id> [value <x>]".

        Only Difficulty is recognised. An unknown tier is logged and the
        previous difficulty kept.
        """
        if "name" not in tokens:
            _log("uci: setoption without name")
            return
        name_idx = tokens.index("name")
        if "value" in tokens:
            value_idx = tokens.index("value")
            name = " ".join(tokens[name_idx + 1:value_idx])
            value = " ".join(tokens[value_idx + 1:])
        else:
            name = " ".join(tokens[name_idx + 1:])
            value = ""

        if name.lower() != "difficulty":
            _log(f"uci: ignoring unknown option: {name!r}")
            return
        try:
            self.difficulty = Difficulty.parse(value)
        except ValueError as e:
            _log(f"uci: {e}")

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse and apply a "position" command.

        Command formats:
            position startpos
            position startpos moves e2e4 e7e5 ...
            position fen <FEN>
            position fen <FEN> moves e2e4 e7e5 ...

        Args:
            tokens: The command tokens with "position" already stripped.
        """
        try:
            if not tokens:
                return

            if tokens[0] == "startpos":
                board = chess.Board()
                move_tokens = tokens[2:] if len(tokens) > 1 and tokens[1] == "moves" else []
            elif tokens[0] == "fen":
                if "moves" in tokens:
                    moves_idx = tokens.index("moves")
                    fen = " ".join(tokens[1:moves_idx])
                    move_tokens = tokens[moves_idx + 1:]
                else:
                    fen = " ".join(tokens[1:])
                    move_tokens = []
                board = chess.Board(fen)
            else:
                _log(f"uci: unknown position type: {tokens[0]}")
                return

            for uci_move in move_tokens:
                move = chess.Move.from_uci(uci_move)
                if move in board.legal_moves:
                    board.push(move)
                else:
                    _log(f"uci: illegal move in position command: {uci_move}")
                    break

            self.board = board

        except ValueError as e:
            _log(f"uci: error in position command: {e}")

    def handle_go(self, tokens: list[str]) -> None:
        """
        Start a search at the configured difficulty in a background thread.

        The tier's own budget governs the search. A time control from the GUI
        (movetime, or wtime/btime) can only shorten the difficult tier's
        budget, never lengthen it or add one to a tier that has none.

        Args:
            tokens: The command tokens with "go" already stripped.
        """
        self._wait_for_search()

        time_limit_ms = self._tier_time_limit(self._parse_go_time(tokens))
        board_copy = self.board.copy()
        difficulty = self.difficulty

        def search_and_reply() -> None:
            """Run the search and emit the UCI info + bestmove lines."""
            try:
                start = time.monotonic()
                result = choose_move(board_copy, difficulty, time_limit_ms=time_limit_ms)
                elapsed_ms = max(1, int((time.monotonic() - start) * 1000))
                self._reply(result, elapsed_ms)
            except Exception as e:
                _log(f"search error: {e}")
                _send("bestmove (none)")

        self.search_thread = threading.Thread(target=search_and_reply, daemon=True)
        self.search_thread.start()

    def handle_stop(self) -> None:
        """The search cannot be interrupted; wait for its bestmove."""
        self._wait_for_search()

    def handle_quit(self) -> None:
        self._wait_for_search()
        sys.exit(0)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _reply(self, result: SearchResult, elapsed_ms: int) -> None:
        if result.move is None:
            # No legal moves: the game is over. UCI still requires a bestmove.
            _send("bestmove (none)")
            return
        if result.nodes:
            nps = max(1, result.nodes * 1000 // elapsed_ms)
            _send(
                f"info depth {result.depth} score {format_score(result.score)} "
                f"nodes {result.nodes} nps {nps} time {elapsed_ms}"
            )
        _send(f"bestmove {result.move.uci()}")

    def _wait_for_search(self) -> None:
        if self.search_thread is not None and self.search_thread.is_alive():
            self.search_thread.join()
        self.search_thread = None

    def _tier_time_limit(self, go_time_ms: int | None) -> int | None:
        tier_limit = TIERS[self.difficulty].time_limit_ms
        if tier_limit is None or go_time_ms is None:
            return tier_limit
        return min(tier_limit, go_time_ms)

    def _parse_go_time(self, tokens: list[str]) -> int | None:
        """
        Extract the GUI's time budget in milliseconds from "go" tokens.

        Supports:
            movetime <ms>       use exactly this many milliseconds
            wtime <ms> btime <ms> [winc <ms> binc <ms>]
                                use 1/40 of remaining time + increment

        Returns None for "go infinite", "go depth N" and other forms without
        a clock.
        """
        params: dict[str, int] = {}
        i = 0
        while i < len(tokens) - 1:
            key = tokens[i]
            try:
                params[key] = int(tokens[i + 1])
                i += 2
            except ValueError:
                i += 1

        if "movetime" in params:
            return params["movetime"]

        color = self.board.turn
        time_key = "wtime" if color == chess.WHITE else "btime"
        inc_key = "winc" if color == chess.WHITE else "binc"

        if time_key in params:
            time_left = params[time_key]
            increment = params.get(inc_key, 0)
            return max(1, time_left // 40 + increment)

        return None


def run_uci_loop() -> None:
    """
    Main UCI protocol loop.

    Reads lines from stdin and dispatches each command to the UciHandler.
    Runs until the "quit" command is received or stdin is closed. A failing
    command is logged to stderr and the loop continues.
    """
    handler = UciHandler()

    for raw_line in sys.stdin:
        line = raw_line.strip()
        if not line:
            continue

        tokens = line.split()
        command = tokens[0]
        args = tokens[1:]

        try:
            if command == "uci":
                handler.handle_uci()
            elif command == "isready":
                handler.handle_isready()
            elif command == "ucinewgame":
                handler.handle_ucinewgame()
            elif command == "setoption":
                handler.handle_setoption(args)
            elif command == "position":
                handler.handle_position(args)
            elif command == "go":
                handler.handle_go(args)
            elif command == "stop":
                handler.handle_stop()
            elif command == "quit":
                handler.handle_quit()
            else:
                _log(f"uci: ignoring unknown command: {command!r}")

        except Exception as e:
            _log(f"uci: unhandled error for command {command!r}: {e}")


if __name__ == "__main__":
    run_uci_loop()
