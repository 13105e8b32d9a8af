"""
The Board is the single authoritative game state: the position of the pieces plus everything FEN encodes
(side to move, castling rights, en passant square, move counters) and the history of moves played.

Only accessors / mutators live here. The rules that decide what may happen to a board are elsewhere:
* movement.py: how pieces move
* make_move.py: how a move changes the board
* legality.py: which moves are allowed
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.core.exceptions import KingNotFoundError
from src.engine.castling import CastlingDirection, castling_directions
from src.engine.fen import (
    STARTING_FEN,
    FENState,
    parse_placement,
    placement_to_fen,
)
from src.engine.moves import Move
from src.engine.pieces import Color, Piece, PieceType
from src.engine.square import Square


@dataclass(eq=False)
class Board:
    position: dict[Square, Piece]
    color_to_move: Color = Color.WHITE
    castling_rights: dict[CastlingDirection, bool] = field(
        default_factory=lambda: {direction: True for direction in CastlingDirection}
    )
    en_passant_square: Optional[Square] = None
    half_move_clock: int = 0
    num_turns: int = 1
    history: list[Move] = field(default_factory=list)

    # --- CREATION ---
    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board from a FEN string. Only the piece placement is required, missing fields get defaults."""
        state = FENState.from_fen(fen_str)
        return cls(
            position=parse_placement(state.position),
            color_to_move=state.color_to_move,
            castling_rights=state.castling_rights,
            en_passant_square=state.en_passant_square,
            half_move_clock=state.half_move_clock,
            num_turns=state.num_turns,
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    def to_fen_state(self) -> FENState:
        return FENState(
            position=placement_to_fen(self.position),
            color_to_move=self.color_to_move,
            castling_rights=dict(self.castling_rights),
            en_passant_square=self.en_passant_square,
            half_move_clock=self.half_move_clock,
            num_turns=self.num_turns,
        )

    def to_fen(self) -> str:
        return self.to_fen_state().to_fen()

    def placement(self) -> str:
        """Only the piece placement part of the FEN string"""
        return placement_to_fen(self.position)

    def copy(self) -> Self:
        """
        Fully independent copy.
        Pieces are immutable, so copying the containers is all it takes (much cheaper than a deepcopy).
        """
        return type(self)(
            position=dict(self.position),
            color_to_move=self.color_to_move,
            castling_rights=dict(self.castling_rights),
            en_passant_square=self.en_passant_square,
            half_move_clock=self.half_move_clock,
            num_turns=self.num_turns,
            history=list(self.history),
        )

    def __eq__(self, other: object) -> bool:
        """Two boards are equal when they describe the same position (what a FEN string encodes)."""
        if not isinstance(other, Board):
            return NotImplemented
        return self.to_fen() == other.to_fen()

    # --- ACCESSORS ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(square in self.position for square in squares)

    def pieces(self, color: Color) -> Iterator[tuple[Square, Piece]]:
        """All pieces of a color. Iterates over a snapshot, so it is safe to mutate the board while looping."""
        return iter(
            [(square, piece) for square, piece in self.position.items() if piece.color == color]
        )

    def king_square(self, color: Color) -> Square:
        """Find the king. A missing king means the board got corrupted: there is no sensible way to continue."""
        for square, piece in self.position.items():
            if piece.type == PieceType.KING and piece.color == color:
                return square
        raise KingNotFoundError(f"No {color.name.lower()} king on the board: {self.placement()}")

    def has_castling_right(self, direction: CastlingDirection) -> bool:
        return self.castling_rights[direction]

    def castling_rights_of(self, color: Color) -> list[CastlingDirection]:
        return [
            direction
            for direction in castling_directions(color)
            if self.has_castling_right(direction)
        ]

    # --- MUTATORS ---
    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        return self.position.pop(square, None)

    def revoke_castling_right(self, direction: CastlingDirection) -> None:
        """Rights only ever get revoked, never granted again."""
        self.castling_rights[direction] = False

    def revoke_all_castling_rights(self, color: Color) -> None:
        for direction in castling_directions(color):
            self.revoke_castling_right(direction)

    def toggle_color_to_move(self) -> None:
        self.color_to_move = self.color_to_move.opponent
