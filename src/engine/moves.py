"""
Move model: the value type describing a single transition of the board.

Moves are produced by the movement rules (src/engine/movement.py), so their `kind` is set when they are created
and always agrees with the geometry on the board at that moment.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Self

from src.engine.castling import CastlingDirection
from src.engine.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Piece, PieceType
from src.engine.square import Square


class MoveKind(Enum):
    NORMAL = auto()
    DOUBLE_PAWN_PUSH = auto()
    CAPTURE = auto()
    EN_PASSANT = auto()
    CASTLE = auto()
    PROMOTION = auto()
    PROMOTION_CAPTURE = auto()


CAPTURING_KINDS = frozenset(
    {MoveKind.CAPTURE, MoveKind.EN_PASSANT, MoveKind.PROMOTION_CAPTURE}
)
PROMOTING_KINDS = frozenset({MoveKind.PROMOTION, MoveKind.PROMOTION_CAPTURE})


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    kind: MoveKind = MoveKind.NORMAL
    promote_to: Optional[PieceType] = None
    castling_direction: Optional[CastlingDirection] = None
    captured: Optional[Piece] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        One of the standard chess notations for moves

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)

        NOTE: The kind of move cannot be known without a board. Use it to look up the matching legal move.
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        promote_to = FEN_TO_PIECE[uci[4]] if len(uci) == 5 else None
        kind = MoveKind.PROMOTION if promote_to else MoveKind.NORMAL
        return cls(from_sq, to_sq, kind=kind, promote_to=promote_to)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    @property
    def is_capture(self) -> bool:
        return self.kind in CAPTURING_KINDS

    @property
    def is_promotion(self) -> bool:
        return self.kind in PROMOTING_KINDS

    @property
    def is_castling(self) -> bool:
        return self.kind == MoveKind.CASTLE

    def matches(
        self, from_square: Square, to_square: Square, promote_to: Optional[PieceType]
    ) -> bool:
        """Does this move correspond to the request of a player? (They only tell us squares + maybe a promotion piece)"""
        return (
            self.from_square == from_square
            and self.to_square == to_square
            and self.promote_to == promote_to
        )

    def __str__(self) -> str:
        return self.to_uci()
