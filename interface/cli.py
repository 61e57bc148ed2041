"""Terminal play: you are A (bottom, lowercase 'a'), the engine is B."""

import argparse
import logging

from checkers_duel.config import CONFIG
from checkers_duel.core.board import BOARD_SIZE, Side
from checkers_duel.core.search import Difficulty, SearchEngine
from checkers_duel.match import MatchController, MatchStatus


def render(controller: MatchController) -> str:
    state = controller.state
    lines = ["   " + " ".join(str(c) for c in range(BOARD_SIZE))]
    for r, row in enumerate(controller.board.to_rows()):
        lines.append(f"{r}  " + " ".join(row))
    lines.append(f"round {state.round_number} | you {'♥' * state.hearts_a} | AI {'♥' * state.hearts_b}")
    return "\n".join(lines)


def parse_squares(text: str):
    """'5,2 4,3' -> ((5, 2), (4, 3))"""
    parts = text.replace("-", " ").replace("x", " ").split()
    if len(parts) != 2:
        raise ValueError("expected two squares")
    squares = tuple(tuple(int(v) for v in p.split(",")) for p in parts)
    if any(len(sq) != 2 for sq in squares):
        raise ValueError("squares are row,col")
    return squares


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play a checkers duel against the engine.")
    parser.add_argument("--difficulty", default=CONFIG.search.default_difficulty,
                        choices=[d.value for d in Difficulty])
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=CONFIG.log_level)

    controller = MatchController(difficulty=args.difficulty, engine=SearchEngine(seed=args.seed))
    controller.add_round_end_listener(
        lambda winner, left: print(f"\n*** {'You win' if winner is Side.A else 'AI wins'} this round! "
                                   f"{'AI' if winner is Side.A else 'You'}: {left} heart(s) left ***\n"))

    while controller.state.status is not MatchStatus.MATCH_OVER:
        print(render(controller))
        print("----------------------------")

        if controller.state.side_to_move is Side.A:
            user_move = input("Your move (row,col row,col, e.g. 5,0 4,1): ")
            if user_move.strip() in ("q", "quit"):
                return
            try:
                src, dst = parse_squares(user_move)
            except ValueError:
                print("Could not parse move, try again.")
                continue
            if not controller.submit_human_squares(src, dst):
                print("Illegal move, try again.")
        else:
            move = controller.step()
            print(f"AI plays: {move if move else 'nothing (no moves)'}")

    winner = controller.state.match_winner
    print("Victory!" if winner is Side.A else "Defeat!")


if __name__ == "__main__":
    main()
