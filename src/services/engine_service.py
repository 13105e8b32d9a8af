"""Orchestration of communication from external collaborators (CLI, UI, AI) to the engine and the game records."""

from pathlib import Path
from uuid import UUID

from loguru import logger

from src.api.models import (
    BoardResponse,
    CellModel,
    CreateGameRequest,
    GameRequest,
    GameResponse,
    LegalMovesResponse,
    MoveRequest,
    PromotionRequest,
)
from src.core.config import EngineConfig, load_config
from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.logging import setup_logging
from src.core.models import GameModel
from src.core.shared_types import Color, PieceType
from src.db.repository import GameRepository
from src.engine import pieces
from src.engine.game import Game
from src.engine.square import ALL_SQUARES, Square


class EngineService:
    """Orchestration of layers for chess game."""

    def __init__(
        self, repository: GameRepository, config: EngineConfig | None = None
    ) -> None:
        self.repo = repository
        self.config = config or EngineConfig()

    @classmethod
    def from_config(
        cls,
        repository: GameRepository,
        config_path: str | Path | None = None,
        overrides: list[str] | None = None,
    ) -> "EngineService":
        """Entry point for a collaborator process: load the configuration and set up logging accordingly."""
        config = load_config(config_path, overrides)
        setup_logging(level=config.log_level, log_file=config.log_file)
        logger.info(f"Engine service started (legality workers: {config.legality_workers})")
        return cls(repository, config)

    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Create a new game (standard start, unless the request brings a FEN string)."""
        new_game = Game.new_game(
            starting_fen=request.starting_fen or self.config.starting_fen,
            legality_workers=self.config.legality_workers,
        )
        _, game_id = self.repo.create_game(new_game.to_model())
        logger.info(f"Created game {game_id}")
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GameRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def get_board(self, request: GameRequest) -> BoardResponse:
        """Full board contents, for a renderer."""
        game = self._load_game(request.game_id)
        board = game.snapshot()
        return BoardResponse(
            game_id=request.game_id,
            cells=[self._to_cell(board.piece(square)) for square in ALL_SQUARES],
            color_to_move=self._to_color(game.color_to_move),
        )

    def legal_moves(self, request: GameRequest) -> LegalMovesResponse:
        """Current set of legal moves (for highlighting / validation)"""
        game = self._load_game(request.game_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            color=self._to_color(game.color_to_move),
            legal_moves=[move.to_uci() for move in game.legal_moves()],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.

        A rejected move leaves the position untouched. The record only remembers the pending promotion:
        after an ambiguous promotion it holds the pawn move (finish it with `complete_promotion()`),
        after any other rejected move it holds nothing.
        """
        game = self._load_game(request.game_id)
        try:
            game.request_move(
                Square.from_algebraic(request.from_square),
                Square.from_algebraic(request.to_square),
                request.promotion_piece(),
            )
        except IllegalMoveError:
            self.repo.update_game(request.game_id, game.to_model())
            raise

        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def complete_promotion(self, request: PromotionRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.complete_promotion(pieces.FEN_TO_PIECE[request.promote_to])
        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def undo_move(self, request: GameRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.undo_move()
        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: GameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _load_game(self, game_id: UUID) -> Game:
        return Game.from_model(
            self._fetch_game(game_id), legality_workers=self.config.legality_workers
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameStateError(f"Game with {game_id=} not found.")
        return game_model

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        model = game.to_model()
        return GameResponse(
            game_id=game_id,
            fen_state=model.current_fen,
            starting_state=model.starting_fen,
            move_history=model.moves_uci,
            status=model.status,
            in_check=game.is_check,
            winner=self._to_color(game.winner) if game.winner else None,
        )

    @staticmethod
    def _to_color(color: pieces.Color) -> Color:
        return Color[color.name]

    @classmethod
    def _to_cell(cls, piece: pieces.Piece | None) -> CellModel | None:
        if piece is None:
            return None
        return CellModel(type=PieceType[piece.type.name], color=cls._to_color(piece.color))
