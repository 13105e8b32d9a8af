"""
Attack / check detection.

A square is attacked by a color when one of that color's candidate moves could land on it.
This module only builds on the movement rules (never on the legality filter, which itself needs to know about checks).
Whether the attacking piece would expose its own king does not matter: a pinned piece still gives check.
"""

from src.engine.board import Board
from src.engine.movement import MOVEMENT_RULES, pawn_attack_squares
from src.engine.pieces import Color, Piece, PieceType
from src.engine.square import Square


def _targets(square: Square, piece: Piece, board: Board) -> list[Square]:
    """
    Squares the piece is hitting.
    Pawns are the exception to "attacks = moves": they push forward but take diagonally, also onto empty squares
    (which matters for castling through check).
    """
    if piece.type == PieceType.PAWN:
        return pawn_attack_squares(square, piece.color)
    return [move.to_square for move in MOVEMENT_RULES[piece.type](square, board)]


def is_attacked(board: Board, square: Square, by_color: Color) -> bool:
    """Is the square in the line of sight of any piece of `by_color`?"""
    return any(
        square in _targets(attacker_square, attacker, board)
        for attacker_square, attacker in board.pieces(by_color)
    )


def is_any_attacked(board: Board, squares: list[Square], by_color: Color) -> bool:
    """Is at least one of the squares attacked? Each square is judged on its own (e.g. the king path of castling)"""
    attacked = attacked_squares(board, by_color)
    return any(square in attacked for square in squares)


def attacked_squares(board: Board, by_color: Color) -> set[Square]:
    """All squares hit by at least one piece of `by_color`"""
    return {
        target
        for attacker_square, attacker in board.pieces(by_color)
        for target in _targets(attacker_square, attacker, board)
    }


def is_in_check(board: Board, color: Color) -> bool:
    """Is the king of `color` under attack? (Raises KingNotFoundError if there is no such king)"""
    return is_attacked(board, board.king_square(color), color.opponent)
