"""Unit tests for /src/engine/legality.py"""

import pytest

from src.engine.board import Board
from src.engine.legality import (
    has_legal_move,
    is_putting_yourself_in_check,
    legal_castling_moves,
    legal_moves,
    legal_moves_from,
)
from src.engine.make_move import apply_move
from src.engine.moves import Move, MoveKind
from src.engine.pieces import PieceType
from tests.helpers import board_with, sq, uci_set


def test_starting_position_has_20_moves(starting_board: Board) -> None:
    moves = legal_moves(starting_board)
    assert len(moves) == 20
    assert len(uci_set(moves)) == 20


def test_pinned_piece_cannot_leave_the_line() -> None:
    """The rook is pinned along the e-file: it may slide along it (and take the queen), but not leave it"""
    board = board_with({"e1": "K", "e2": "R", "e8": "q", "a8": "k"})
    rook_moves = uci_set(legal_moves_from(board, sq("e2")))
    assert rook_moves == {"e2e3", "e2e4", "e2e5", "e2e6", "e2e7", "e2e8"}


def test_king_cannot_walk_into_check() -> None:
    board = board_with({"e1": "K", "d8": "r", "h8": "k"})
    king_moves = uci_set(legal_moves_from(board, sq("e1")))
    assert "e1d1" not in king_moves
    assert "e1d2" not in king_moves
    assert king_moves == {"e1e2", "e1f1", "e1f2"}


def test_king_cannot_take_defended_piece() -> None:
    board = board_with({"e1": "K", "e2": "q", "e8": "r", "a8": "k"})
    assert "e1e2" not in uci_set(legal_moves_from(board, sq("e1")))


def test_must_resolve_check() -> None:
    """In check from the rook: block, capture, or step away. Nothing else."""
    board = board_with({"e1": "K", "a2": "P", "c3": "B", "e8": "r", "a8": "k"})
    moves = uci_set(legal_moves(board))
    assert moves == {"e1d1", "e1d2", "e1f1", "e1f2", "c3e5"}


def test_is_putting_yourself_in_check() -> None:
    board = board_with({"e1": "K", "e2": "R", "e8": "q", "a8": "k"})
    assert is_putting_yourself_in_check(board, Move(sq("e2"), sq("a2")))
    assert not is_putting_yourself_in_check(board, Move(sq("e2"), sq("e3")))


def test_legal_moves_from_opponent_or_empty_square(starting_board: Board) -> None:
    assert legal_moves_from(starting_board, sq("e7")) == []
    assert legal_moves_from(starting_board, sq("e4")) == []


# --- CASTLING ---
CASTLING_PIECES = {"e1": "K", "a1": "R", "h1": "R", "e8": "k"}


def test_castling_allowed() -> None:
    board = board_with(CASTLING_PIECES, castling="KQ")
    assert uci_set(legal_castling_moves(board)) == {"e1g1", "e1c1"}
    assert {"e1g1", "e1c1"} <= uci_set(legal_moves(board))


def test_cannot_castle_out_of_check() -> None:
    board = board_with({**CASTLING_PIECES, "e5": "r"}, castling="KQ")
    assert legal_castling_moves(board) == []


@pytest.mark.parametrize(
    "attacker_square, allowed",
    [
        ("f5", {"e1c1"}),  # rook on the f-file: king side passes through f1
        ("g5", {"e1c1"}),  # ... or lands on g1
        ("d5", {"e1g1"}),  # d1 is crossed when castling queen side
        ("c5", {"e1g1"}),
        ("b5", {"e1g1", "e1c1"}),  # b1 only needs to be empty, the king never crosses it
    ],
)
def test_cannot_castle_through_attacked_square(attacker_square: str, allowed: set[str]) -> None:
    board = board_with({**CASTLING_PIECES, attacker_square: "r"}, castling="KQ")
    assert uci_set(legal_castling_moves(board)) == allowed


def test_pawn_attack_on_transit_square_stops_castling() -> None:
    """The pawn on g2 attacks f1 (an empty square): castling king side is not allowed"""
    board = board_with({**CASTLING_PIECES, "g2": "p"}, castling="KQ")
    assert uci_set(legal_castling_moves(board)) == {"e1c1"}


# --- EN PASSANT ---
def test_en_passant_only_right_after_the_double_push() -> None:
    board = Board.from_fen("rnbqkbnr/pppppppp/8/4P3/8/8/PPPP1PPP/RNBQKBNR b KQkq - 0 2")

    double_push = next(move for move in legal_moves(board) if move.to_uci() == "d7d5")
    apply_move(board, double_push)
    en_passant_moves = [move for move in legal_moves(board) if move.kind == MoveKind.EN_PASSANT]
    assert uci_set(en_passant_moves) == {"e5d6"}
    assert len(en_passant_moves) == 1

    # one move pair later, the chance is gone
    apply_move(board, next(move for move in legal_moves(board) if move.to_uci() == "g1f3"))
    apply_move(board, next(move for move in legal_moves(board) if move.to_uci() == "g8f6"))
    assert "e5d6" not in uci_set(legal_moves(board))


def test_en_passant_from_both_sides() -> None:
    """Two pawns next to the one that just double pushed: each gets exactly one en passant capture"""
    board = board_with({"e1": "K", "e8": "k", "c5": "P", "e5": "P", "d5": "p"}, en_passant="d6")
    en_passant_moves = [move for move in legal_moves(board) if move.kind == MoveKind.EN_PASSANT]
    assert len(en_passant_moves) == 2
    assert uci_set(en_passant_moves) == {"c5d6", "e5d6"}
    assert all(move.to_square == sq("d6") for move in en_passant_moves)


def test_en_passant_exposing_the_king() -> None:
    """Taking en passant removes two pawns from the rank: that can open a line onto your own king"""
    board = board_with({"a5": "K", "b5": "P", "c5": "p", "h5": "r", "e8": "k"}, en_passant="c6")
    assert "b5c6" not in uci_set(legal_moves(board))


# --- PROMOTION ---
def test_promotion_gives_four_moves() -> None:
    board = board_with({"e1": "K", "a8": "k", "g7": "P"})
    promotions = [move for move in legal_moves(board) if move.from_square == sq("g7")]
    assert len(promotions) == 4
    assert {move.promote_to for move in promotions} == {
        PieceType.QUEEN,
        PieceType.ROOK,
        PieceType.BISHOP,
        PieceType.KNIGHT,
    }
    assert all(move.kind == MoveKind.PROMOTION for move in promotions)


# --- GAME OVER POSITIONS ---
@pytest.mark.parametrize(
    "fen, expected",
    [
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", True),
        ("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3", False),  # fool's mate
        ("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1", False),  # stalemate
    ],
)
def test_has_legal_move(fen: str, expected: bool) -> None:
    assert has_legal_move(Board.from_fen(fen)) is expected


def test_parallel_legal_moves_match_serial() -> None:
    board = Board.from_fen("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1")
    serial = legal_moves(board)
    assert legal_moves(board, workers=4) == serial
    assert len(serial) == 48
