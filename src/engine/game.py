"""
The Game class is the entrypoint into the domain layer.
It owns the one and only Board of a game, and is responsible for orchestrating everything required to play a turn:
validating the request, applying the move, and deciding whether the game is over.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from loguru import logger

from src.core.exceptions import (
    AmbiguousPromotionError,
    GameAlreadyOverError,
    GameStateError,
    IllegalMoveError,
    InvalidFENError,
    NoPieceAtSourceError,
    WrongSideToMoveError,
)
from src.core.models import GameModel
from src.core.shared_types import Status
from src.engine.attacks import is_in_check
from src.engine.board import Board
from src.engine.fen import STARTING_FEN
from src.engine.legality import has_legal_move, legal_moves, legal_moves_from
from src.engine.make_move import UndoInfo, apply_move, unmake_move
from src.engine.moves import Move
from src.engine.pieces import Color, Piece, PieceType
from src.engine.square import Square


def evaluate_status(board: Board) -> Status:
    """
    Game over when the player to move has no legal move left:
    checkmate if that player is in check, stalemate otherwise.

    Pure function: evaluating it again on the same board always gives the same answer.
    """
    if has_legal_move(board):
        return Status.IN_PROGRESS
    if is_in_check(board, board.color_to_move):
        return Status.CHECKMATE
    return Status.STALEMATE


@dataclass
class PlayedMove:
    """What is needed to take a move back"""

    move: Move
    undo: UndoInfo
    status_before: Status


@dataclass
class Game:
    # --- DOMAIN LAYER API ---

    _board: Board
    starting_fen: str
    status: Status = Status.IN_PROGRESS
    white_in_check: bool = False
    black_in_check: bool = False
    pending_promotion: Optional[tuple[Square, Square]] = None
    legality_workers: int = 1
    played: list[PlayedMove] = field(default_factory=list)

    @classmethod
    def new_game(
        cls, starting_fen: Optional[str] = None, legality_workers: int = 1
    ) -> Self:
        """Start a new game from the standard starting position, or the position given as a FEN string."""
        starting_fen = starting_fen or STARTING_FEN
        board = Board.from_fen(starting_fen)
        if is_in_check(board, board.color_to_move.opponent):
            # the player to move could take the king
            raise InvalidFENError(
                f"{board.color_to_move.opponent.name.lower()} is in check, but it is not their move: {starting_fen!r}"
            )
        game = cls(
            _board=board,
            starting_fen=board.to_fen(),
            legality_workers=legality_workers,
        )
        game._update_check_flags()
        game._update_game_status()
        logger.debug(f"New game from {game.starting_fen} ({game.status})")
        return game

    @classmethod
    def from_model(cls, model: GameModel, legality_workers: int = 1) -> Self:
        """
        Rebuild a Game by replaying the recorded moves from the starting position.
        The result has to end up in the recorded position, or the record is inconsistent.
        """
        game = cls.new_game(model.starting_fen, legality_workers=legality_workers)
        for uci in model.moves_uci:
            move = Move.from_uci(uci)
            game.request_move(move.from_square, move.to_square, move.promote_to)

        if game.to_fen() != model.current_fen:
            raise GameStateError(
                f"Replaying the moves ends in {game.to_fen()!r}, but the record says {model.current_fen!r}"
            )

        if model.pending_promotion:
            pending = Move.from_uci(model.pending_promotion)
            game.pending_promotion = (pending.from_square, pending.to_square)
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        pending = (
            Move(*self.pending_promotion).to_uci() if self.pending_promotion else None
        )
        return GameModel(
            starting_fen=self.starting_fen,
            current_fen=self.to_fen(),
            moves_uci=[played.move.to_uci() for played in self.played],
            status=str(self.status),
            pending_promotion=pending,
        )

    # --- READ-ONLY VIEWS ---
    def snapshot(self) -> Board:
        """A copy of the board. Changing it does not affect the game."""
        return self._board.copy()

    def to_fen(self) -> str:
        return self._board.to_fen()

    def piece(self, square: Square) -> Optional[Piece]:
        return self._board.piece(square)

    @property
    def color_to_move(self) -> Color:
        return self._board.color_to_move

    @property
    def is_check(self) -> bool:
        return self.white_in_check if self.color_to_move == Color.WHITE else self.black_in_check

    @property
    def is_checkmate(self) -> bool:
        return self.status == Status.CHECKMATE

    @property
    def is_stalemate(self) -> bool:
        return self.status == Status.STALEMATE

    @property
    def is_game_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    @property
    def winner(self) -> Optional[Color]:
        """Only a checkmate has a winner: the player who just moved, i.e. not the one to move."""
        if self.status != Status.CHECKMATE:
            return None
        return self.color_to_move.opponent

    def legal_moves(self) -> list[Move]:
        """Current set of legal moves (empty once the game is over)."""
        if self.is_game_over:
            return []
        return legal_moves(self._board, workers=self.legality_workers)

    def legal_moves_from(self, square: Square) -> list[Move]:
        if self.is_game_over:
            return []
        return legal_moves_from(self._board, square)

    def evaluate_status(self) -> Status:
        """Re-evaluate the game state from scratch. Does not change anything."""
        return evaluate_status(self._board)

    # --- MAKING MOVES ---
    def request_move(
        self,
        from_square: Square,
        to_square: Square,
        promotion: Optional[PieceType] = None,
    ) -> Move:
        """
        Attempt to make a move
        -----

        1. make sure the game is still in progress
        2. make sure there is a piece, and it is yours
        3. look the move up in the set of legal moves (a pawn reaching the final rank needs to know what to promote into)
        4. update the board
        5. update check flags and game status

        Every rejection raises before anything is changed (a pawn move waiting for its promotion piece is forgotten:
        only the request right before `complete_promotion()` counts).
        """
        self.pending_promotion = None
        if self.is_game_over:
            raise GameAlreadyOverError(f"Game is over. status: {self.status}")

        piece = self._board.piece(from_square)
        if piece is None:
            raise NoPieceAtSourceError(f"There is no piece on {from_square}")

        if piece.color != self.color_to_move:
            raise WrongSideToMoveError(
                f"It is not your turn. Waiting for {self.color_to_move.name.lower()} to make a move first."
            )

        move = self._find_legal_move(from_square, to_square, promotion)

        played = PlayedMove(
            move=move,
            undo=apply_move(self._board, move),
            status_before=self.status,
        )
        self.played.append(played)
        logger.debug(f"{piece.color.name.lower()} played {move.to_uci()} ({move.kind.name.lower()})")

        self._update_check_flags()
        self._update_game_status()
        return move

    def complete_promotion(self, promotion: PieceType) -> Move:
        """Continuation of a request that got rejected because it did not say what to promote into."""
        if self.pending_promotion is None:
            raise GameStateError("There is no pawn waiting for promotion")
        from_square, to_square = self.pending_promotion
        return self.request_move(from_square, to_square, promotion)

    def undo_move(self) -> Move:
        """Take back the last move"""
        if not self.played:
            raise GameStateError("There is no move to take back")

        played = self.played.pop()
        unmake_move(self._board, played.move, played.undo)
        self.status = played.status_before
        self.pending_promotion = None
        self._update_check_flags()
        logger.info(f"Took back {played.move.to_uci()}")
        return played.move

    # -- PRIVATE HELPERS ---
    def _find_legal_move(
        self, from_square: Square, to_square: Square, promotion: Optional[PieceType]
    ) -> Move:
        candidates = [
            move
            for move in legal_moves_from(self._board, from_square)
            if move.to_square == to_square
        ]
        if not candidates:
            logger.debug(f"Rejected illegal move {from_square}{to_square}")
            raise IllegalMoveError(f"Move not allowed: {from_square}{to_square}")

        if promotion is None and any(move.is_promotion for move in candidates):
            self.pending_promotion = (from_square, to_square)
            raise AmbiguousPromotionError(
                f"Pawn reaches the final rank with {from_square}{to_square}: choose a piece to promote into"
            )

        for move in candidates:
            if move.matches(from_square, to_square, promotion):
                return move
        raise IllegalMoveError(
            f"Move not allowed: {from_square}{to_square} promoting to {promotion}"
        )

    def _update_check_flags(self) -> None:
        self.white_in_check = is_in_check(self._board, Color.WHITE)
        self.black_in_check = is_in_check(self._board, Color.BLACK)

    def _update_game_status(self) -> None:
        """Performs checks to see if game has ended and changes status accordingly."""
        self.status = evaluate_status(self._board)
        if self.is_check and not self.is_game_over:
            logger.info(f"{self.color_to_move.name.lower()} is in check")
        if self.is_game_over:
            logger.info(f"Game over: {self.status} after {len(self.played)} moves")
