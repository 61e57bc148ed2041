"""Round/heart match state machine.

The controller is the single owner of the current board and match state. The
human plays side A, the engine plays side B. Each round is one game on a fresh
board; the loser of a round gives up a heart, and the match ends when a side
has no hearts left.

Phases::

    awaiting_human_move -> ai_thinking -> awaiting_human_move | round_over
    round_over -> awaiting_human_move (fresh board) | match_over
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from checkers_duel.config import CONFIG, MatchConfig
from checkers_duel.core.board import Board, Coord, Move, Side, empty_board, in_bounds
from checkers_duel.core.movegen import has_legal_moves, legal_moves, piece_moves
from checkers_duel.core.search import Difficulty, SearchEngine

logger = logging.getLogger(__name__)

RoundEndListener = Callable[[Side, int], None]
MatchEndListener = Callable[[Side], None]


class MatchStatus(Enum):
    IN_ROUND = "in_round"
    ROUND_OVER = "round_over"
    MATCH_OVER = "match_over"


class Phase(Enum):
    AWAITING_HUMAN_MOVE = "awaiting_human_move"
    AI_THINKING = "ai_thinking"
    ROUND_OVER = "round_over"
    MATCH_OVER = "match_over"


@dataclass
class MatchState:
    hearts_a: int = 3
    hearts_b: int = 3
    side_to_move: Side = Side.A
    status: MatchStatus = MatchStatus.IN_ROUND
    round_number: int = 1
    last_round_winner: Optional[Side] = None
    match_winner: Optional[Side] = None

    def hearts(self, side: Side) -> int:
        return self.hearts_a if side is Side.A else self.hearts_b


class MatchController:
    def __init__(self, difficulty: Union[str, Difficulty, None] = None,
                 engine: Optional[SearchEngine] = None,
                 cfg: Optional[MatchConfig] = None,
                 on_round_end: Optional[RoundEndListener] = None,
                 on_match_end: Optional[MatchEndListener] = None):
        self.cfg = cfg or CONFIG.match
        self.engine = engine or SearchEngine()
        self.difficulty = Difficulty.parse(difficulty or self.engine.cfg.default_difficulty)

        self._round_listeners: List[RoundEndListener] = []
        self._match_listeners: List[MatchEndListener] = []
        if on_round_end:
            self._round_listeners.append(on_round_end)
        if on_match_end:
            self._match_listeners.append(on_match_end)

        self._lock = threading.RLock()
        self._thinking = False
        self._turn = 0
        self._board: Board
        self._state: MatchState
        self._history: List[Move]
        self.new_match()

    # --- subscriptions ---

    def add_round_end_listener(self, listener: RoundEndListener):
        self._round_listeners.append(listener)

    def add_match_end_listener(self, listener: MatchEndListener):
        self._match_listeners.append(listener)

    # --- read-only views ---

    @property
    def board(self) -> Board:
        return self._board

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def history(self) -> Tuple[Move, ...]:
        """Moves played in the current round."""
        return tuple(self._history)

    @property
    def thinking(self) -> bool:
        return self._thinking

    @property
    def phase(self) -> Phase:
        status = self._state.status
        if status is MatchStatus.MATCH_OVER:
            return Phase.MATCH_OVER
        if status is MatchStatus.ROUND_OVER:
            return Phase.ROUND_OVER
        if self._thinking or self._state.side_to_move is Side.B:
            return Phase.AI_THINKING
        return Phase.AWAITING_HUMAN_MOVE

    def snapshot(self) -> Tuple[Board, MatchState, Phase]:
        """Board, a copy of the state and the phase, read together."""
        with self._lock:
            return self._board, replace(self._state), self.phase

    # --- lifecycle ---

    def new_match(self, difficulty: Union[str, Difficulty, None] = None):
        """Reset hearts and start round one. An in-flight AI result is discarded."""
        with self._lock:
            if difficulty is not None:
                self.difficulty = Difficulty.parse(difficulty)
            self._state = MatchState(hearts_a=self.cfg.hearts, hearts_b=self.cfg.hearts)
            self._board = empty_board()
            self._history = []
            self._thinking = False
            logger.info("new match, difficulty %s", self.difficulty.value)

    def set_position(self, board: Board, side_to_move: Side = Side.A):
        """Continue the current round from `board`. Round end is checked on the next move."""
        with self._lock:
            self._board = board
            self._history = []
            self._thinking = False
            self._state.side_to_move = side_to_move
            if self._state.status is MatchStatus.ROUND_OVER:
                self._state.status = MatchStatus.IN_ROUND

    def start_next_round(self) -> bool:
        with self._lock:
            if self._state.status is not MatchStatus.ROUND_OVER:
                return False
            self._board = empty_board()
            self._history = []
            self._state.side_to_move = Side.A
            self._state.status = MatchStatus.IN_ROUND
            self._state.round_number += 1
            return True

    # --- human side ---

    def _accepting_human(self) -> bool:
        return (not self._thinking
                and self._state.status is MatchStatus.IN_ROUND
                and self._state.side_to_move is Side.A)

    def submit_human_move(self, move: Move) -> bool:
        """Play `move` for A. Anything but a current legal move is ignored."""
        with self._lock:
            if not self._accepting_human():
                logger.debug("ignoring human move %s in phase %s", move, self.phase.value)
                return False
            if move not in legal_moves(self._board, Side.A):
                logger.debug("ignoring illegal human move %s", move)
                return False
            self._play(move)
            return True

    def submit_human_squares(self, from_square: Tuple[int, int], to_square: Tuple[int, int]) -> bool:
        """Resolve a pair of clicked squares to A's legal move and play it."""
        with self._lock:
            if not self._accepting_human() or not in_bounds(from_square):
                return False
            for move in piece_moves(self._board, from_square, Side.A):
                if move.to_square == tuple(to_square):
                    return self.submit_human_move(move)
            logger.debug("no legal move %s -> %s", from_square, to_square)
            return False

    def selectable_targets(self, coord: Tuple[int, int]) -> List[Coord]:
        """Landing squares for A's piece on `coord`, for move highlighting."""
        with self._lock:
            if not self._accepting_human() or not in_bounds(coord):
                return []
            return [m.to_square for m in piece_moves(self._board, coord, Side.A)]

    # --- AI side ---

    def _ai_turn(self) -> bool:
        return (self._state.status is MatchStatus.IN_ROUND
                and self._state.side_to_move is Side.B)

    def step(self) -> Optional[Move]:
        """Play B's turn synchronously. No-op unless B is to move."""
        with self._lock:
            if self._thinking or not self._ai_turn():
                return None
            move = self.engine.choose_move(self._board, self.difficulty)
            return self._apply_ai_move(move)

    def step_async(self, on_done: Optional[Callable[[Optional[Move]], None]] = None,
                   delay_ms: Optional[int] = None) -> bool:
        """Play B's turn on the engine's worker thread after the thinking delay.

        Human moves are ignored until the result has been applied. `on_done`
        receives the move played, or None if B could not move or the match was
        reset meanwhile.
        """
        with self._lock:
            if self._thinking or not self._ai_turn():
                return False
            self._thinking = True
            self._turn += 1
            turn = self._turn
            board = self._board

            def done(move: Optional[Move]):
                with self._lock:
                    if not self._thinking or self._turn != turn or self._board is not board:
                        logger.debug("discarding stale AI result %s", move)
                        played = None
                    else:
                        self._thinking = False
                        played = self._apply_ai_move(move)
                if on_done:
                    on_done(played)

            # A search still running here belongs to a discarded turn.
            if not self.engine.start_search(board, self.difficulty, callback=done,
                                            delay_ms=delay_ms, queue=True):
                self._thinking = False
                return False
            return True

    def wait_for_ai(self, timeout: Optional[float] = None) -> bool:
        return self.engine.wait(timeout)

    def _apply_ai_move(self, move: Optional[Move]) -> Optional[Move]:
        if move is None:
            logger.info("B has no legal moves")
            self._end_round(Side.A)
            return None
        self._play(move)
        return move

    # --- shared ---

    def _play(self, move: Move):
        self._board = self._board.apply_move(move)
        self._history.append(move)
        self._state.side_to_move = self._state.side_to_move.opponent
        self._check_round_end()

    def _check_round_end(self) -> bool:
        # A is checked first: a stuck A always loses on the same tick.
        for loser in (Side.A, Side.B):
            if self._board.count(loser) == 0 or not has_legal_moves(self._board, loser):
                self._end_round(loser.opponent)
                return True
        return False

    def _end_round(self, winner: Side):
        loser = winner.opponent
        state = self._state
        if loser is Side.A:
            state.hearts_a = max(state.hearts_a - 1, 0)
        else:
            state.hearts_b = max(state.hearts_b - 1, 0)
        remaining = state.hearts(loser)
        state.last_round_winner = winner
        state.status = MatchStatus.ROUND_OVER
        if remaining == 0:
            state.status = MatchStatus.MATCH_OVER
            state.match_winner = winner

        logger.info("round %d won by %s after %d moves; %s has %d heart(s) left",
                    state.round_number, winner.value, len(self._history), loser.value, remaining)
        try:
            for listener in self._round_listeners:
                listener(winner, remaining)
            if state.status is MatchStatus.MATCH_OVER:
                logger.info("match won by %s", winner.value)
                for listener in self._match_listeners:
                    listener(winner)
        finally:
            if state.status is MatchStatus.ROUND_OVER and self.cfg.auto_next_round:
                self.start_next_round()
