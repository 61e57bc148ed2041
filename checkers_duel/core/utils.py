def format_info(depth, score, nodes, elapsed, move, difficulty):
        move_str = str(move) if move else "-"
        nps = int(nodes / elapsed) if elapsed > 0 else 0
        return (f"info difficulty {difficulty} depth {depth} score {score} nodes {nodes} "
                f"nps {nps} time {int(elapsed * 1000)} move {move_str}")
