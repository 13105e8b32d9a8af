"""Unit tests for src/engine/fen.py"""

import pytest

from src.engine.castling import CastlingDirection
from src.engine.fen import (
    STARTING_FEN,
    STARTING_POSITION,
    FENState,
    InvalidFENError,
    has_one_king_per_color,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_position,
    is_valid_square,
    parse_placement,
    placement_to_fen,
)
from src.engine.pieces import Color, PieceType
from src.engine.square import Square

SOME_FENS = [
    STARTING_FEN,
    "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
    "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
    "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
    "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1 b kq - 3 9",
    "4k3/8/8/8/8/8/8/4K3 w - - 0 1",
]


@pytest.mark.parametrize("fen", SOME_FENS)
def test_fen_roundtrip(fen: str) -> None:
    """Parsing a FEN string and writing it again gives back the exact same string"""
    assert FENState.from_fen(fen).to_fen() == fen


@pytest.mark.parametrize("placement", [fen.split(" ")[0] for fen in SOME_FENS])
def test_placement_roundtrip(placement: str) -> None:
    assert placement_to_fen(parse_placement(placement)) == placement


def test_starting_position() -> None:
    state = FENState.from_fen(STARTING_FEN)
    assert state.position == STARTING_POSITION
    assert state.color_to_move == Color.WHITE
    assert all(state.castling_rights.values())
    assert state.en_passant_square is None
    assert state.half_move_clock == 0
    assert state.num_turns == 1


@pytest.mark.parametrize(
    "abbreviated, full",
    [
        (STARTING_POSITION, STARTING_FEN),
        (f"{STARTING_POSITION} b", f"{STARTING_POSITION} b KQkq - 0 1"),
        (f"{STARTING_POSITION} w Kq", f"{STARTING_POSITION} w Kq - 0 1"),
        (f"{STARTING_POSITION} b - e3", f"{STARTING_POSITION} b - e3 0 1"),
        (f"{STARTING_POSITION} w - - 12", f"{STARTING_POSITION} w - - 12 1"),
    ],
)
def test_missing_trailing_fields_get_defaults(abbreviated: str, full: str) -> None:
    """Only the placement is mandatory. Everything that is left out gets the values of the standard start"""
    assert FENState.from_fen(abbreviated).to_fen() == full


def test_parsing_details() -> None:
    state = FENState.from_fen("4k3/8/8/8/4Pp2/8/8/4K3 b Qk e3 4 17")
    assert state.color_to_move == Color.BLACK
    assert state.castling_rights == {
        CastlingDirection.WHITE_KING_SIDE: False,
        CastlingDirection.WHITE_QUEEN_SIDE: True,
        CastlingDirection.BLACK_KING_SIDE: True,
        CastlingDirection.BLACK_QUEEN_SIDE: False,
    }
    assert state.en_passant_square == Square.from_algebraic("e3")
    assert state.half_move_clock == 4
    assert state.num_turns == 17


def test_parse_placement_reads_rank_8_first() -> None:
    pieces = parse_placement(STARTING_POSITION)
    assert len(pieces) == 32
    a8 = pieces[Square.from_algebraic("a8")]
    assert (a8.type, a8.color) == (PieceType.ROOK, Color.BLACK)
    e1 = pieces[Square.from_algebraic("e1")]
    assert (e1.type, e1.color) == (PieceType.KING, Color.WHITE)
    assert Square.from_algebraic("e4") not in pieces


@pytest.mark.parametrize(
    "square, expected_move_count",
    [
        ("e2", 0),  # white pawn at home
        ("d4", 1),  # white pawn that must have moved
        ("c7", 0),  # black pawn at home
        ("h5", 1),  # black pawn that must have moved
        ("e1", 0),  # king on its castling square
        ("a1", 0),  # rook in its corner
        ("g3", 1),  # rook anywhere else
        ("b1", 0),  # knights: unknown, and it does not matter
    ],
)
def test_move_count_inferred_from_placement(square: str, expected_move_count: int) -> None:
    """A FEN string does not store move counts. Pawns / kings / rooks off their starting squares must have moved."""
    pieces = parse_placement("4k3/2p5/8/7p/3P4/6R1/4P3/RN2K3")
    assert pieces[Square.from_algebraic(square)].move_count == expected_move_count


@pytest.mark.parametrize(
    "position",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP",  # only 7 ranks
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR/8",  # 9 ranks
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN",  # rank with 7 files
        "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR",  # 9 empty squares
        "rnbqkbnr/ppppxppp/8/8/8/8/PPPPPPPP/RNBQKBNR",  # invalid character
        "rnbqkbnr/pppppppp/08/8/8/8/PPPPPPPP/RNBQKBNR",  # zero is not a run of empty squares
    ],
)
def test_invalid_position(position: str) -> None:
    assert not is_valid_position(position)
    with pytest.raises(InvalidFENError):
        FENState.from_fen(position)


@pytest.mark.parametrize(
    "fen",
    [
        "",
        f"{STARTING_POSITION} x KQkq - 0 1",
        f"{STARTING_POSITION} w KQxq - 0 1",
        f"{STARTING_POSITION} w qkQK - 0 1",
        f"{STARTING_POSITION} w KQkq e4 0 1",
        f"{STARTING_POSITION} w KQkq - a 1",
        f"{STARTING_POSITION} w KQkq - 0 0",
        f"{STARTING_POSITION} w KQkq - 0 1 extra",
        "8/8/8/8/8/8/8/8 w - - 0 1",  # no kings at all
        "8/8/8/8/8/8/8/4K3 w - - 0 1",  # no black king
        "4k3/8/8/8/8/8/8/4KK2 w - - 0 1",  # two white kings
        "3kk3/8/8/8/8/8/8/4K3 b - - 0 1",  # two black kings
    ],
)
def test_invalid_fen(fen: str) -> None:
    assert not is_valid_fen(fen)
    with pytest.raises(InvalidFENError):
        FENState.from_fen(fen)


@pytest.mark.parametrize(
    "position, valid",
    [
        (STARTING_POSITION, True),
        ("4k3/8/8/8/8/8/8/4K3", True),
        ("8/8/8/8/8/8/8/8", False),
        ("4k3/8/8/8/8/8/8/8", False),
        ("4k3/8/8/8/8/8/8/K3K3", False),
    ],
)
def test_has_one_king_per_color(position: str, valid: bool) -> None:
    assert has_one_king_per_color(position) == valid


def test_king_less_placement_still_parses() -> None:
    """Only a full position needs both kings: the placement on its own is just syntax"""
    assert parse_placement("8/8/8/8/8/8/8/8") == {}


@pytest.mark.parametrize(
    "square, valid",
    [("a1", True), ("h8", True), ("i1", False), ("a9", False), ("a0", False), ("a", False), ("1a", False)],
)
def test_is_valid_square(square: str, valid: bool) -> None:
    assert is_valid_square(square) == valid


@pytest.mark.parametrize(
    "en_passant, valid", [("-", True), ("e3", True), ("d6", True), ("e4", False), ("z3", False)]
)
def test_is_valid_en_passant(en_passant: str, valid: bool) -> None:
    """Only a square skipped by a double pawn push can be an en passant square"""
    assert is_valid_en_passant(en_passant) == valid
