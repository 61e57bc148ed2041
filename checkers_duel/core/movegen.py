"""Legal move generation: single steps and single captures, no chaining."""

from typing import List, Tuple

from checkers_duel.core.board import (
    Board,
    Coord,
    Move,
    MoveKind,
    Side,
    in_bounds,
    piece_directions,
)


def piece_moves(board: Board, coord: Tuple[int, int], side: Side) -> List[Move]:
    """Moves of the piece on `coord`, or [] if it is not one of `side`'s pieces."""
    piece = board.piece_at(coord)
    if piece is None or piece.side is not side:
        return []

    row, col = coord
    origin = Coord(row, col)
    moves = []
    for d_row, d_col in piece_directions(piece.rank, piece.side):
        adj = (row + d_row, col + d_col)
        if not in_bounds(adj):
            continue
        target = board.piece_at(adj)
        if target is None:
            moves.append(Move(origin, Coord(*adj), MoveKind.STEP))
        elif target.side is not side:
            landing = (adj[0] + d_row, adj[1] + d_col)
            if in_bounds(landing) and board.piece_at(landing) is None:
                moves.append(Move(origin, Coord(*landing), MoveKind.CAPTURE, Coord(*adj)))
    return moves


def legal_moves(board: Board, side: Side) -> List[Move]:
    """All moves for `side`, pieces taken by ascending row then column."""
    moves = []
    for coord, _ in board.pieces(side):
        moves.extend(piece_moves(board, coord, side))
    return moves


all_legal_moves = legal_moves


def has_legal_moves(board: Board, side: Side) -> bool:
    return any(piece_moves(board, coord, side) for coord, _ in board.pieces(side))
