"""Checkers Duel: draughts engine with minimax AI and a heart-based match controller."""

from checkers_duel.core.board import (
    Board,
    Coord,
    MalformedBoardError,
    Move,
    MoveKind,
    Piece,
    Rank,
    Side,
    empty_board,
)
from checkers_duel.main import Engine, apply_move, choose_ai_move, evaluate, legal_moves
from checkers_duel.match import MatchController, MatchState, MatchStatus, Phase
from checkers_duel.core.search import Difficulty, SearchEngine
