"""Immutable 8x8 draughts board: pieces, coordinates, promotion and move application."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

BOARD_SIZE = 8
START_ROWS = 3


class MalformedBoardError(AssertionError):
    """A board or move violates the grid invariants. Always a programming defect."""


class Side(Enum):
    A = "A"  # human, starts at the bottom
    B = "B"  # AI, starts at the top

    @property
    def opponent(self) -> "Side":
        return Side.B if self is Side.A else Side.A

    @property
    def forward(self) -> int:
        """Row delta of a normal piece's move."""
        return -1 if self is Side.A else 1

    @property
    def promotion_row(self) -> int:
        """The opponent's back rank."""
        return 0 if self is Side.A else BOARD_SIZE - 1


class Rank(Enum):
    NORMAL = "normal"
    KING = "king"


@dataclass(frozen=True)
class Piece:
    side: Side
    rank: Rank = Rank.NORMAL

    @property
    def is_king(self) -> bool:
        return self.rank is Rank.KING

    def symbol(self) -> str:
        """'a'/'b' for normal pieces, 'A'/'B' for kings."""
        s = self.side.value
        return s if self.is_king else s.lower()

    @classmethod
    def from_symbol(cls, symbol: str) -> "Piece":
        try:
            side = Side(symbol.upper())
        except ValueError:
            raise MalformedBoardError(f"unknown piece symbol {symbol!r}") from None
        return cls(side, Rank.KING if symbol.isupper() else Rank.NORMAL)


class Coord(NamedTuple):
    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.row},{self.col}"


class MoveKind(Enum):
    STEP = "step"
    CAPTURE = "capture"


@dataclass(frozen=True)
class Move:
    from_square: Coord
    to_square: Coord
    kind: MoveKind = MoveKind.STEP
    captured: Optional[Coord] = None

    @property
    def is_capture(self) -> bool:
        return self.kind is MoveKind.CAPTURE

    def __str__(self) -> str:
        sep = "x" if self.is_capture else "-"
        return f"{self.from_square}{sep}{self.to_square}"


# Shared instances; pieces are values so identity does not matter.
A_NORMAL = Piece(Side.A)
A_KING = Piece(Side.A, Rank.KING)
B_NORMAL = Piece(Side.B)
B_KING = Piece(Side.B, Rank.KING)

_KING_DIRECTIONS = ((-1, -1), (-1, 1), (1, -1), (1, 1))

Grid = Tuple[Tuple[Optional[Piece], ...], ...]


def in_bounds(coord: Tuple[int, int]) -> bool:
    row, col = coord
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def is_occupiable(coord: Tuple[int, int]) -> bool:
    """Only the dark squares, where row + col is odd, ever hold a piece."""
    return in_bounds(coord) and (coord[0] + coord[1]) % 2 == 1


def piece_directions(rank: Rank, side: Side) -> Tuple[Tuple[int, int], ...]:
    if rank is Rank.KING:
        return _KING_DIRECTIONS
    d = side.forward
    return ((d, -1), (d, 1))


def promote_if_eligible(piece: Piece, landing_row: int) -> Piece:
    if piece.rank is Rank.NORMAL and landing_row == piece.side.promotion_row:
        return Piece(piece.side, Rank.KING)
    return piece


class Board:
    """Value-type board. Every mutation returns a new Board."""

    __slots__ = ("_grid",)

    def __init__(self, grid: Optional[Sequence[Sequence[Optional[Piece]]]] = None):
        if grid is None:
            grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self._grid: Grid = tuple(tuple(row) for row in grid)
        self._check_invariants()

    @classmethod
    def _trusted(cls, grid: Grid) -> "Board":
        # Skips the invariant scan; only for grids derived from a valid board.
        board = cls.__new__(cls)
        board._grid = grid
        return board

    def _check_invariants(self):
        if len(self._grid) != BOARD_SIZE or any(len(r) != BOARD_SIZE for r in self._grid):
            raise MalformedBoardError(f"board must be {BOARD_SIZE}x{BOARD_SIZE}")
        for r, row in enumerate(self._grid):
            for c, piece in enumerate(row):
                if piece is None:
                    continue
                if not isinstance(piece, Piece):
                    raise MalformedBoardError(f"cell {r},{c} holds {piece!r}")
                if (r + c) % 2 == 0:
                    raise MalformedBoardError(f"piece on non-playable square {r},{c}")

    # --- text format ---

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Board":
        """Parse eight rows of '.', 'a', 'A', 'b', 'B' (row 0 first)."""
        if len(rows) != BOARD_SIZE:
            raise MalformedBoardError(f"expected {BOARD_SIZE} rows, got {len(rows)}")
        grid = []
        for line in rows:
            line = line.strip()
            if len(line) != BOARD_SIZE:
                raise MalformedBoardError(f"bad row {line!r}")
            grid.append([None if ch == "." else Piece.from_symbol(ch) for ch in line])
        return cls(grid)

    def to_rows(self) -> List[str]:
        return ["".join(p.symbol() if p else "." for p in row) for row in self._grid]

    def __str__(self) -> str:
        return "\n".join(self.to_rows())

    def __repr__(self) -> str:
        return f"Board({self.to_rows()!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __hash__(self) -> int:
        return hash(self._grid)

    # --- queries ---

    def piece_at(self, coord: Tuple[int, int]) -> Optional[Piece]:
        if not in_bounds(coord):
            raise MalformedBoardError(f"coordinate {coord} out of bounds")
        return self._grid[coord[0]][coord[1]]

    def pieces(self, side: Optional[Side] = None) -> Iterator[Tuple[Coord, Piece]]:
        """Yield (coord, piece) by ascending row, then column."""
        for r, row in enumerate(self._grid):
            for c, piece in enumerate(row):
                if piece is not None and (side is None or piece.side is side):
                    yield Coord(r, c), piece

    def count(self, side: Side) -> int:
        return sum(1 for _ in self.pieces(side))

    # --- mutation ---

    def apply_move(self, move: Move) -> "Board":
        """Return the board after `move`: captured piece removed, promotion applied."""
        piece = self.piece_at(move.from_square)
        if piece is None:
            raise MalformedBoardError(f"no piece on {move.from_square}")
        if not is_occupiable(move.to_square):
            raise MalformedBoardError(f"illegal landing square {move.to_square}")
        if self._grid[move.to_square[0]][move.to_square[1]] is not None:
            raise MalformedBoardError(f"landing square {move.to_square} is occupied")
        if move.is_capture != (move.captured is not None):
            raise MalformedBoardError(f"{move.kind.value} move with captured square {move.captured}")
        if move.captured is not None:
            victim = self.piece_at(move.captured)
            if victim is None or victim.side is piece.side:
                raise MalformedBoardError(f"no opposing piece to capture on {move.captured}")

        rows = [list(r) for r in self._grid]
        fr, fc = move.from_square
        tr, tc = move.to_square
        rows[fr][fc] = None
        if move.captured is not None:
            cr, cc = move.captured
            rows[cr][cc] = None
        rows[tr][tc] = promote_if_eligible(piece, tr)
        return Board._trusted(tuple(tuple(r) for r in rows))


def empty_board() -> Board:
    """Starting layout: B on the top three rows, A on the bottom three."""
    grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            if (row + col) % 2 == 0:
                continue
            if row < START_ROWS:
                grid[row][col] = B_NORMAL
            elif row >= BOARD_SIZE - START_ROWS:
                grid[row][col] = A_NORMAL
    return Board(grid)


initial_board = empty_board


def apply_move(board: Board, move: Move) -> Board:
    return board.apply_move(move)
