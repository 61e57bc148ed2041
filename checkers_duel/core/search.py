import logging
import random
import threading
import time
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from checkers_duel.config import CONFIG, SearchConfig
from checkers_duel.core.board import Board, Move, Side
from checkers_duel.core.evaluator import Evaluator
from checkers_duel.core.movegen import legal_moves
from checkers_duel.core.utils import format_info

logger = logging.getLogger(__name__)

INF = 1000000

# nodes between wall-clock checks
TIME_CHECK_NODES = 1024


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union[str, "Difficulty"]) -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"unknown difficulty {value!r}, expected one of "
                             f"{[d.value for d in cls]}") from None


class SearchEngine:
    """Minimax with alpha-beta pruning. B maximizes, A minimizes."""

    def __init__(self, evaluator: Optional[Evaluator] = None,
                 cfg: Optional[SearchConfig] = None, seed: Optional[int] = None):
        self.evaluator = evaluator or Evaluator()
        self.cfg = cfg or CONFIG.search
        self.rng = random.Random(seed if seed is not None else self.cfg.seed)
        self.nodes = 0

        self._deadline: Optional[float] = None
        self._exhausted = False
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    def reseed(self, seed: Optional[int] = None):
        """Reset the jitter generator; None draws fresh OS entropy."""
        self.rng.seed(seed)

    def depth_for(self, difficulty: Union[str, Difficulty]) -> int:
        return self.cfg.depths[Difficulty.parse(difficulty).value]

    def jitter_for(self, difficulty: Union[str, Difficulty]) -> float:
        return self.cfg.jitter.get(Difficulty.parse(difficulty).value, 0.0)

    def minimax(self, board: Board, depth: int, maximizing: bool,
                alpha: int = -INF, beta: int = INF) -> int:
        self.nodes += 1
        if depth == 0 or self._out_of_budget():
            return self.evaluator.evaluate(board)

        player = Side.B if maximizing else Side.A
        moves = legal_moves(board, player)
        if not moves:
            sentinel = self.evaluator.cfg.no_moves_score
            return -sentinel if maximizing else sentinel

        if maximizing:
            max_eval = -INF
            for move in moves:
                score = self.minimax(board.apply_move(move), depth - 1, False, alpha, beta)
                max_eval = max(max_eval, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return max_eval

        min_eval = INF
        for move in moves:
            score = self.minimax(board.apply_move(move), depth - 1, True, alpha, beta)
            min_eval = min(min_eval, score)
            beta = min(beta, score)
            if beta <= alpha:
                break
        return min_eval

    def _out_of_budget(self) -> bool:
        if self._exhausted:
            return True
        if self.cfg.max_nodes is not None and self.nodes > self.cfg.max_nodes:
            self._exhausted = True
        elif (self._deadline is not None and self.nodes % TIME_CHECK_NODES == 0
              and time.monotonic() >= self._deadline):
            self._exhausted = True
        return self._exhausted

    def search_best_move(self, board: Board,
                         difficulty: Union[str, Difficulty, None] = None) -> Tuple[Optional[Move], Optional[int]]:
        """Pick B's move. Returns (move, unperturbed score), or (None, None) if B cannot move."""
        difficulty = Difficulty.parse(difficulty or self.cfg.default_difficulty)
        depth = self.depth_for(difficulty)
        factor = self.jitter_for(difficulty)

        with self._lock:
            moves = legal_moves(board, Side.B)
            if not moves:
                return None, None

            self.nodes = 0
            self._exhausted = False
            start_time = time.monotonic()
            self._deadline = (start_time + self.cfg.time_limit_ms / 1000
                              if self.cfg.time_limit_ms is not None else None)

            best_move = None
            best_score = None
            best_perturbed = -float("inf")
            for move in moves:
                score = self.minimax(board.apply_move(move), max(depth - 1, 0), False, -INF, INF)
                perturbed = score
                if factor > 0:
                    perturbed = score + (self.rng.random() - 0.5) * factor * self.cfg.jitter_unit
                # strict comparison keeps the first of equal candidates
                if perturbed > best_perturbed:
                    best_perturbed = perturbed
                    best_move = move
                    best_score = score

            elapsed = time.monotonic() - start_time
            if self._exhausted:
                logger.warning("search budget exhausted after %d nodes; leaves scored statically",
                               self.nodes)
            logger.debug(format_info(depth, best_score, self.nodes, elapsed, best_move,
                                     difficulty.value))
            self._deadline = None
            return best_move, best_score

    def choose_move(self, board: Board,
                    difficulty: Union[str, Difficulty, None] = None) -> Optional[Move]:
        move, _ = self.search_best_move(board, difficulty)
        return move

    def start_search(self, board: Board, difficulty: Union[str, Difficulty, None] = None,
                     callback: Optional[Callable[[Optional[Move]], None]] = None,
                     delay_ms: Optional[int] = None, queue: bool = False) -> bool:
        """Run choose_move on a worker thread after the thinking delay.

        Returns False (and does nothing) if a search is already running, unless
        `queue` is set: the new search then starts once the running one has
        finished. A started search is never cancelled; use wait() to join it.
        """
        previous = self._thread if self.is_searching else None
        if previous is not None and not queue:
            return False
        delay = self.cfg.think_delay_ms if delay_ms is None else delay_ms

        def worker():
            if previous is not None:
                previous.join()
            if delay > 0:
                time.sleep(delay / 1000)
            move = self.choose_move(board, difficulty)
            if callback:
                callback(move)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()
        return True

    @property
    def is_searching(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the worker thread. True once no search is running."""
        if self._thread:
            self._thread.join(timeout)
        return not self.is_searching
