"""
Forsyth-Edwards Notation (FEN): import / export of a position, plus validation of every part of the string.
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.core.exceptions import InvalidFENError
from src.engine.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_from_fen,
    castling_to_fen,
)
from src.engine.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.engine.square import BOARD_DIMENSIONS, FILE_NAMES, Square

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
STARTING_FEN = f"{STARTING_POSITION} w KQkq - 0 1"

# Defaults for the trailing fields, used when a FEN string only contains the first N fields
DEFAULT_FIELDS: tuple[str, ...] = ("w", "KQkq", "-", "0", "1")

VALID_CASTLING_ENCODINGS = [
    "-",
    "K",
    "Q",
    "k",
    "q",
    "KQ",
    "Kk",
    "Kq",
    "Qk",
    "Qq",
    "kq",
    "KQk",
    "KQq",
    "Kkq",
    "Qkq",
    "KQkq",
]

PAWN_HOME_RANK: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: 6}
EN_PASSANT_RANKS: set[str] = {"3", "6"}

_UNMOVED_CANDIDATES: dict[PieceType, set[Square]] = {
    PieceType.KING: {rule.king_from for rule in CASTLING_RULES.values()},
    PieceType.ROOK: {rule.rook_from for rule in CASTLING_RULES.values()},
}


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character.isdigit() and 1 <= int(character) <= num_files:
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    """A '-' or a square on the 3rd/6th rank (the only squares a double pawn push can skip)"""
    return (en_passant == "-") or (
        is_valid_square(en_passant) and en_passant[1:] in EN_PASSANT_RANKS
    )


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    if len(square) < 2:
        return False

    file_char, rank_char = square[0], square[1:]
    if file_char not in FILE_NAMES[: BOARD_DIMENSIONS[0]]:
        return False

    if not rank_char.isdigit():
        return False

    return 1 <= int(rank_char) <= BOARD_DIMENSIONS[1]


def has_one_king_per_color(position: str) -> bool:
    """Legal play needs exactly one king of each color on the board"""
    return position.count("K") == 1 and position.count("k") == 1


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


def _validate_fields(fields: list[str]) -> None:
    """Raise an InvalidFENError naming the first part of the string that is malformed."""
    if not 1 <= len(fields) <= 6:
        raise InvalidFENError(
            f"FEN must have between 1 and 6 space separated fields, got {len(fields)}"
        )

    position, color, castling, en_passant, half_moves, full_moves = fields
    if not is_valid_position(position):
        raise InvalidFENError(f"Invalid piece placement: {position!r}")
    if not has_one_king_per_color(position):
        raise InvalidFENError(f"Placement needs exactly one king per color: {position!r}")
    if not is_valid_color_code(color):
        raise InvalidFENError(f"Invalid side to move: {color!r}")
    if not is_valid_castling_rights(castling):
        raise InvalidFENError(f"Invalid castling rights: {castling!r}")
    if not is_valid_en_passant(en_passant):
        raise InvalidFENError(f"Invalid en passant square: {en_passant!r}")
    if not is_valid_move_counter(half_moves):
        raise InvalidFENError(f"Invalid half move clock: {half_moves!r}")
    if not (is_valid_move_counter(full_moves) and int(full_moves) >= 1):
        raise InvalidFENError(f"Invalid full move number: {full_moves!r}")


def is_valid_fen(fen: str) -> bool:
    """Check if given string follows (possibly abbreviated) FEN notation."""
    try:
        _validate_fields(_fill_defaults(fen.split()))
    except InvalidFENError:
        return False
    return True


def _fill_defaults(fields: list[str]) -> list[str]:
    if not 1 <= len(fields) <= 6:
        raise InvalidFENError(
            f"FEN must have between 1 and 6 space separated fields, got {len(fields)}"
        )
    return fields + list(DEFAULT_FIELDS[len(fields) - 1 :])


def _initial_move_count(piece: Piece, square: Square) -> int:
    """
    A FEN string does not tell how often a piece moved. Infer the only part that matters:
    pawns off their home rank, and kings / rooks off their castling squares, have moved at least once.
    """
    if piece.type == PieceType.PAWN:
        return 0 if square.rank == PAWN_HOME_RANK[piece.color] else 1
    if piece.type in _UNMOVED_CANDIDATES:
        return 0 if square in _UNMOVED_CANDIDATES[piece.type] else 1
    return 0


def parse_placement(position: str) -> dict[Square, Piece]:
    """
    The board position part of the FEN string:

    ex. standard starting position:
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
    means:
    * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
    * pawns cover 7th rank entirely
    * ranks 6 through 3 have 8 consecutive empty squares
    * rank 2 are the white pawns (capital letters)
    * 1st rank are the white pieces, again read from a1 to h1.
    """
    if not is_valid_position(position):
        raise InvalidFENError(f"Invalid piece placement: {position!r}")

    pieces: dict[Square, Piece] = {}
    for rank_idx, fen_one_rank in enumerate(position.split("/")):
        # FEN string is read from top rank (8th) to bottom rank (1st)
        rank = BOARD_DIMENSIONS[1] - 1 - rank_idx
        # ... but the first character is the a-file, so reads in normal direction
        file = 0
        for character in fen_one_rank:
            if character.isdigit():
                # A number denotes the amount of empty squares after each other
                file += int(character)
                continue

            square = Square(file, rank)
            piece = Piece.from_fen(character)
            pieces[square] = Piece(
                piece.type, piece.color, _initial_move_count(piece, square)
            )
            file += 1
    return pieces


def placement_to_fen(pieces: dict[Square, Piece]) -> str:
    """Ranks are separated by slashes in FEN string."""
    return "/".join(
        _rank_to_fen(pieces, rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
    )


def _rank_to_fen(pieces: dict[Square, Piece], rank: int) -> str:
    """FEN string of a single rank"""
    fen_characters: list[str] = []
    empty_count = 0
    for file in range(BOARD_DIMENSIONS[0]):
        piece = pieces.get(Square(file, rank))
        if piece is None:
            empty_count += 1
            continue

        if empty_count > 0:
            fen_characters.append(str(empty_count))
            empty_count = 0
        fen_characters.append(piece.to_fen())

    # if the entire rank is empty, then we still place this number in the string
    if empty_count > 0:
        fen_characters.append(str(empty_count))
    return "".join(fen_characters)


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
    The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

    <board position string> <active color> <castling rights> <en passant square> <half move clock> <full move number>

    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
        In the starting position: KQkq (all rights available). Once every right is revoked a "-" is used.
    * The en passant square is the square a pawn skipped over with its double push. If not available a "-" is used.
    * The half move clock counts the number of moves made since the last pawn move or capture.
    * The full move number starts at 1 and increments after every move black makes.

    Only the board position is mandatory: missing trailing fields take the values of the standard start
    (w KQkq - 0 1).

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    """

    position: str
    color_to_move: Color
    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data. Raises an InvalidFENError if any part is malformed."""
        fields = _fill_defaults(fen.split())
        _validate_fields(fields)

        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            num_turns,
        ) = fields

        return cls(
            position=position,
            color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
            castling_rights=castling_from_fen(castling_str),
            en_passant_square=(
                Square.from_algebraic(en_passant_algebraic)
                if en_passant_algebraic != "-"
                else None
            ),
            half_move_clock=int(half_move_clock),
            num_turns=int(num_turns),
        )

    def to_fen(self) -> str:
        """reverse operation: write a (full, six field) FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = castling_to_fen(self.castling_rights)
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return f"{self.position} {active_color} {castling_str} {en_passant_algebraic} {self.half_move_clock} {self.num_turns}"
