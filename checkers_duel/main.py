from typing import List, Optional, Tuple, Union

from checkers_duel.core.board import Board, Move, Side, empty_board
from checkers_duel.core.board import apply_move as _apply_move
from checkers_duel.core.evaluator import evaluate as _evaluate
from checkers_duel.core.movegen import legal_moves as _legal_moves
from checkers_duel.core.search import Difficulty, SearchEngine

_engine: Optional[SearchEngine] = None


def _default_engine() -> SearchEngine:
    global _engine
    if _engine is None:
        _engine = SearchEngine()
    return _engine


def apply_move(board: Board, move: Move) -> Board:
    return _apply_move(board, move)


def legal_moves(board: Board, side: Side) -> List[Move]:
    return _legal_moves(board, side)


def evaluate(board: Board) -> int:
    return _evaluate(board)


def choose_ai_move(board: Board, difficulty: Union[str, Difficulty, None] = None) -> Optional[Move]:
    return _default_engine().choose_move(board, difficulty)


class Engine:
    def __init__(self, difficulty: Union[str, Difficulty, None] = None, seed: Optional[int] = None):
        self.board = empty_board()
        self.search = SearchEngine(seed=seed)
        self.difficulty = Difficulty.parse(difficulty or self.search.cfg.default_difficulty)

    def get_best_move(self) -> Tuple[Optional[Move], Optional[int]]:
        return self.search.search_best_move(self.board, self.difficulty)

    def make_move(self, move: Move, side: Side = Side.A) -> bool:
        if move not in _legal_moves(self.board, side):
            return False
        self.board = self.board.apply_move(move)
        return True

    def print_board(self):
        print(self.board)
