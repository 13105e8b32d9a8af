"""
Move application: realise all side effects of a move on the board, and take them back again.

NOTE: No legality checks happen here. Feed it moves produced by the movement rules / legality filter.
"""

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import BoardCorruptedError
from src.engine.board import Board
from src.engine.castling import CASTLING_RULES, ROOK_HOME_SQUARES, CastlingDirection
from src.engine.moves import Move, MoveKind
from src.engine.pieces import Color, Piece, PieceType
from src.engine.square import Square


@dataclass(frozen=True)
class UndoInfo:
    """
    Snapshot of the state that cannot be reconstructed from the move alone
    (for instance: the castling rights and en passant square before the move).
    """

    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int
    moved_piece: Piece


def en_passant_capture_square(move: Move) -> Square:
    """The pawn taken en passant stands next to the moving pawn: the destination's file, the origin's rank."""
    return Square(move.to_square.file, move.from_square.rank)


def apply_move(board: Board, move: Move) -> UndoInfo:
    """
    Make the move on the board.
    ----

    1. relocate the moving piece (promoting it, if needed)
    2. kind specific extras: remove the pawn taken en passant, move the rook when castling
    3. bump the moving piece's move count
    4. revoke castling rights (king moved, rook left its corner, rook got taken in its corner)
    5. set / clear the en passant square
    6. update move counters, history and the color to move

    Returns what is needed to undo the move again.
    """
    piece = board.piece(move.from_square)
    if piece is None:
        raise BoardCorruptedError(f"No piece on {move.from_square} to make move {move}")

    undo = UndoInfo(
        castling_rights=dict(board.castling_rights),
        en_passant_square=board.en_passant_square,
        half_move_clock=board.half_move_clock,
        num_turns=board.num_turns,
        moved_piece=piece,
    )

    board.remove_piece(move.from_square)
    if move.kind == MoveKind.EN_PASSANT:
        board.remove_piece(en_passant_capture_square(move))

    if move.is_castling:
        assert move.castling_direction is not None
        rule = CASTLING_RULES[move.castling_direction]
        rook = board.remove_piece(rule.rook_from)
        if rook is None:
            raise BoardCorruptedError(f"No rook on {rule.rook_from} to castle with")
        board.place_piece(rook.moved(), rule.rook_to)

    if move.is_promotion:
        assert move.promote_to is not None
        piece = piece.promote_to(move.promote_to)

    # Placing on the destination removes whatever was captured there
    board.place_piece(piece.moved(), move.to_square)

    _revoke_castling_rights_if_needed(board, move, undo.moved_piece)
    board.en_passant_square = _determine_en_passant_square(move, undo.moved_piece)

    if undo.moved_piece.type == PieceType.PAWN or move.is_capture:
        board.half_move_clock = 0
    else:
        board.half_move_clock += 1
    if undo.moved_piece.color == Color.BLACK:
        board.num_turns += 1

    board.history.append(move)
    board.toggle_color_to_move()
    return undo


def unmake_move(board: Board, move: Move, undo: UndoInfo) -> None:
    """Exact inverse of `apply_move()`, given the snapshot it returned."""
    board.toggle_color_to_move()
    board.history.pop()

    board.remove_piece(move.to_square)
    board.place_piece(undo.moved_piece, move.from_square)

    if move.kind == MoveKind.EN_PASSANT:
        assert move.captured is not None
        board.place_piece(move.captured, en_passant_capture_square(move))
    elif move.captured is not None:
        board.place_piece(move.captured, move.to_square)

    if move.is_castling:
        assert move.castling_direction is not None
        rule = CASTLING_RULES[move.castling_direction]
        rook = board.remove_piece(rule.rook_to)
        if rook is None:
            raise BoardCorruptedError(f"No rook on {rule.rook_to} to undo castling")
        board.place_piece(rook.unmoved(), rule.rook_from)

    board.castling_rights = dict(undo.castling_rights)
    board.en_passant_square = undo.en_passant_square
    board.half_move_clock = undo.half_move_clock
    board.num_turns = undo.num_turns


def simulate(board: Board, move: Move) -> Board:
    """Make the move on a throw-away copy of the board. The original stays untouched."""
    new_board = board.copy()
    apply_move(new_board, move)
    return new_board


def _revoke_castling_rights_if_needed(board: Board, move: Move, piece: Piece) -> None:
    """
    Checks which rights should get revoked
    ----

    1. If you are moving your king (castling included) --> revoke both
    2. If you are moving a rook away from its corner --> revoke the right in that direction
    3. If you are taking a rook in its corner --> revoke the right in that direction
    """
    if piece.type == PieceType.KING:
        board.revoke_all_castling_rights(piece.color)

    if piece.type == PieceType.ROOK and move.from_square in ROOK_HOME_SQUARES:
        direction = ROOK_HOME_SQUARES[move.from_square]
        if direction.color == piece.color:
            board.revoke_castling_right(direction)

    captured = move.captured
    if (
        captured is not None
        and captured.type == PieceType.ROOK
        and move.to_square in ROOK_HOME_SQUARES
    ):
        direction = ROOK_HOME_SQUARES[move.to_square]
        if direction.color == captured.color:
            board.revoke_castling_right(direction)


def _determine_en_passant_square(move: Move, piece: Piece) -> Optional[Square]:
    """The square skipped by a double pawn push. Every other move clears the en passant square."""
    if move.kind != MoveKind.DOUBLE_PAWN_PUSH or piece.type != PieceType.PAWN:
        return None
    skipped_rank = (move.from_square.rank + move.to_square.rank) // 2
    return Square(move.from_square.file, skipped_rank)
