"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
The service, the repository and the domain layer all speak this format, so none of them depends on the internals of the others.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class GameModel:
    """Transport-safe representation of a chess game: where it started, what was played, where it stands now."""

    starting_fen: str
    current_fen: str
    moves_uci: list[str] = field(default_factory=list)
    status: str = "in progress"
    # from + to square (ex. "e7e8") of a pawn move waiting for the choice of promotion piece
    pending_promotion: Optional[str] = None
