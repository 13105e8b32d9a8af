"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType
from src.engine import pieces
from src.engine.fen import is_valid_fen, is_valid_square

PROMOTION_LETTERS = {"q", "r", "b", "n"}


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        if not is_valid_fen(value.strip()):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a FEN string.")
        return value.strip()


class GameRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    """A (from, to) pair of squares, plus the letter of the piece to promote into when a pawn reaches the final rank."""

    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[str] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if len(value) != 2 or not is_valid_square(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        letter = value.lower()
        if letter not in PROMOTION_LETTERS:
            raise InvalidRequestError(
                f"Cannot promote into {value!r}. Pick one of {', '.join(sorted(PROMOTION_LETTERS))}."
            )
        return letter

    def promotion_piece(self) -> Optional[pieces.PieceType]:
        """Engine piece type to promote into (if any)"""
        return pieces.FEN_TO_PIECE[self.promote_to] if self.promote_to else None


class PromotionRequest(BaseModel):
    """Continuation of a move that was rejected as an ambiguous promotion"""

    game_id: UUID
    promote_to: str

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: str) -> str:
        letter = value.lower()
        if letter not in PROMOTION_LETTERS:
            raise InvalidRequestError(
                f"Cannot promote into {value!r}. Pick one of {', '.join(sorted(PROMOTION_LETTERS))}."
            )
        return letter


# --- RESPONSE MODELS ---
class CellModel(BaseModel):
    type: PieceType
    color: Color


class BoardResponse(BaseModel):
    """
    All 64 squares, a1 first and h8 last (index = rank * 8 + file).
    Empty squares are None.
    """

    game_id: UUID
    cells: list[Optional[CellModel]]
    color_to_move: Color


class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    move_history: list[str]
    status: str
    in_check: bool
    winner: Optional[Color] = None


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]
