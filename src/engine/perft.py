"""
Perft: count the leaves of the tree of legal move sequences up to a fixed depth.

The standard correctness test for move generators. From the starting position the counts are known:
depth 1-5 --> 20, 400, 8902, 197281, 4865609
"""

from src.engine.board import Board
from src.engine.legality import legal_moves
from src.engine.make_move import apply_move, unmake_move

STARTING_POSITION_PERFT: dict[int, int] = {
    1: 20,
    2: 400,
    3: 8902,
    4: 197281,
    5: 4865609,
}


def perft(board: Board, depth: int) -> int:
    """Number of legal move sequences of length `depth`. The board is restored when done."""
    if depth <= 0:
        return 1

    moves = legal_moves(board)
    if depth == 1:
        return len(moves)

    nodes = 0
    for move in moves:
        undo = apply_move(board, move)
        nodes += perft(board, depth - 1)
        unmake_move(board, move, undo)
    return nodes


def divide(board: Board, depth: int) -> dict[str, int]:
    """Perft split by the first move (UCI notation). Handy to find where a generator goes wrong."""
    counts: dict[str, int] = {}
    for move in legal_moves(board):
        undo = apply_move(board, move)
        counts[move.to_uci()] = perft(board, depth - 1)
        unmake_move(board, move, undo)
    return counts
