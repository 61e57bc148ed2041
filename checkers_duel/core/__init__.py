"""Core engine components: board, move generation, evaluator and search."""

from .board import Board, Coord, MalformedBoardError, Move, MoveKind, Piece, Rank, Side
from .evaluator import Evaluator
from .search import Difficulty, SearchEngine
