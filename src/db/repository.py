"""Protocol repository (the engine itself keeps nothing beyond FEN strings / move lists, see GameModel)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Where the service keeps its game records between requests"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The record stored under this ID, or None when there is none."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new record. Returns what was stored and the ID it got."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the record of an existing game (None if the ID is unknown)."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Drop a record. Returns the removed record, if there was one."""
        ...
