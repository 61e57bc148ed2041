"""FastAPI REST interface over a single in-memory match."""

import threading
from typing import List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from checkers_duel.config import CONFIG
from checkers_duel.core.board import BOARD_SIZE, Move, Side
from checkers_duel.core.movegen import legal_moves
from checkers_duel.core.search import Difficulty, SearchEngine
from checkers_duel.match import MatchController, MatchStatus

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared match; every endpoint holds _match_lock while it touches it.
engine = SearchEngine()
controller = MatchController(engine=engine)
_match_lock = threading.Lock()


class MoveRequest(BaseModel):
    from_square: Tuple[int, int]
    to_square: Tuple[int, int]


class NewMatchRequest(BaseModel):
    difficulty: Optional[str] = None


def _move_dict(move: Move) -> dict:
    return {
        "from": list(move.from_square),
        "to": list(move.to_square),
        "kind": move.kind.value,
        "captured": list(move.captured) if move.captured else None,
    }


def _match_dict() -> dict:
    board, state, phase = controller.snapshot()
    in_round = state.status is MatchStatus.IN_ROUND
    return {
        "board": board.to_rows(),
        "side_to_move": state.side_to_move.value,
        "status": state.status.value,
        "phase": phase.value,
        "difficulty": controller.difficulty.value,
        "hearts": {"A": state.hearts_a, "B": state.hearts_b},
        "round": state.round_number,
        "last_round_winner": state.last_round_winner.value if state.last_round_winner else None,
        "match_winner": state.match_winner.value if state.match_winner else None,
        "legal_moves": [_move_dict(m) for m in legal_moves(board, state.side_to_move)] if in_round else [],
    }


@app.get("/match")
def get_match():
    with _match_lock:
        return _match_dict()


@app.post("/move")
def make_move(req: MoveRequest):
    with _match_lock:
        if not controller.submit_human_squares(req.from_square, req.to_square):
            raise HTTPException(status_code=400, detail=f"Move not accepted: {req.from_square} -> {req.to_square}")
        return _match_dict()


@app.post("/ai")
def ai_move():
    with _match_lock:
        _, state, _ = controller.snapshot()
        if state.status is not MatchStatus.IN_ROUND or state.side_to_move is not Side.B:
            raise HTTPException(status_code=400, detail="Not the AI's turn")
        move = controller.step()
        return {"move": _move_dict(move) if move else None, **_match_dict()}


@app.post("/new")
def new_match(req: NewMatchRequest = NewMatchRequest()):
    try:
        difficulty = Difficulty.parse(req.difficulty) if req.difficulty else None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    with _match_lock:
        controller.new_match(difficulty)
        return _match_dict()


@app.get("/moves/{row}/{col}")
def get_targets(row: int, col: int) -> List[List[int]]:
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise HTTPException(status_code=400, detail=f"Square {row},{col} is off the board")
    with _match_lock:
        return [list(c) for c in controller.selectable_targets((row, col))]
