"""
Legality filter: turns candidate moves into legal moves.

Plan (per candidate move):
1. Copy the board
2. make the candidate move on the copy
3. determine if your own king is in check on the new board --> if so, throw the move away

Castling gets two extra checks: you cannot castle out of check, and the king may not pass through
(or land on) a square that is under attack.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from src.engine.attacks import is_any_attacked, is_in_check
from src.engine.board import Board
from src.engine.castling import CASTLING_RULES
from src.engine.make_move import simulate
from src.engine.moves import Move
from src.engine.movement import (
    candidate_castling_moves,
    candidate_moves,
    pseudo_legal_moves,
)
from src.engine.pieces import Color
from src.engine.square import Square


def is_putting_yourself_in_check(board: Board, move: Move) -> bool:
    """Return True if the move leaves the mover's king under attack"""
    color = board.color_to_move
    return is_in_check(simulate(board, move), color)


def legal_castling_moves(board: Board, color: Optional[Color] = None) -> list[Move]:
    """
    Find the legal castling moves for the player to move
    ---

    **you are allowed to castle if** (on top of what `candidate_castling_moves()` already checks)

    * You are not currently in check (you cannot castle out of a check).
    * None of the squares the king passes through, the destination included, is under attack.
      Each square is tested on its own: it is not enough to check where the king ends up.
    """
    if color is None:
        color = board.color_to_move
    candidates = candidate_castling_moves(board, color)
    if not candidates or is_in_check(board, color):
        return []

    return [
        move
        for move in candidates
        if not is_any_attacked(
            board, CASTLING_RULES[move.castling_direction].king_path(), color.opponent
        )
    ]


def legal_moves(board: Board, workers: Optional[int] = None) -> list[Move]:
    """
    List of legal moves for the player to move
    ----

    1. generate candidate moves, using the basic movement rules for all pieces
    2. remove the ones that would put (or leave) you in check
    3. add the castling moves that are allowed

    With `workers` > 1 the simulations are spread over a thread pool.
    Every simulation works on its own copy of the board, and the result keeps the order of the candidates,
    so the outcome is identical to the serial version.
    """
    candidates = pseudo_legal_moves(board, board.color_to_move)

    if workers is not None and workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            leaves_in_check = list(
                executor.map(lambda move: is_putting_yourself_in_check(board, move), candidates)
            )
    else:
        leaves_in_check = [is_putting_yourself_in_check(board, move) for move in candidates]

    moves = [move for move, in_check in zip(candidates, leaves_in_check) if not in_check]
    moves.extend(legal_castling_moves(board))
    return moves


def legal_moves_from(board: Board, square: Square) -> list[Move]:
    """Legal moves of the piece on a single square (for highlighting a selected piece)"""
    piece = board.piece(square)
    if piece is None or piece.color != board.color_to_move:
        return []

    moves = [
        move
        for move in candidate_moves(square, board)
        if not is_putting_yourself_in_check(board, move)
    ]
    moves.extend(
        move for move in legal_castling_moves(board) if move.from_square == square
    )
    return moves


def has_legal_move(board: Board) -> bool:
    """Stops at the first legal move found. Enough to decide whether the game is over."""
    for move in pseudo_legal_moves(board, board.color_to_move):
        if not is_putting_yourself_in_check(board, move):
            return True
    return bool(legal_castling_moves(board))
