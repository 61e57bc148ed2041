"""Static evaluator: material plus mobility, from side B's point of view."""

from typing import Optional

from checkers_duel.config import CONFIG, EvalConfig
from checkers_duel.core.board import Board, Side
from checkers_duel.core.movegen import legal_moves


class Evaluator:
    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval

    def evaluate(self, board: Board) -> int:
        """Return static eval in points, positive favors B."""
        values = self.cfg.piece_values
        score = 0

        # Material.
        for _, piece in board.pieces():
            val = values["KING"] if piece.is_king else values["NORMAL"]
            score += val if piece.side is Side.B else -val

        # Mobility.
        mobility_b = len(legal_moves(board, Side.B))
        mobility_a = len(legal_moves(board, Side.A))
        score += self.cfg.mobility_weight * (mobility_b - mobility_a)

        return score


_default = Evaluator()


def evaluate(board: Board) -> int:
    return _default.evaluate(board)
