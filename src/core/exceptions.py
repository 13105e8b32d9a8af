"""
Exceptions shared across layers.

Everything deriving from GameError is a recoverable rejection: it is raised before anything got mutated,
so the caller can simply ask for another move / another input.
BoardCorruptedError is not a GameError on purpose. It signals a broken invariant and should abort whatever is running.
"""


class GameError(Exception):
    """Base class for all recoverable errors raised by the engine."""


class InvalidFENError(GameError):
    """Malformed position notation (bad character, wrong number of ranks, rank not summing to 8 files, ...)"""


class InvalidRequestError(GameError):
    """Input from an external collaborator could not be interpreted."""


class GameStateError(GameError):
    """The game is not in a state that allows the requested action."""


class GameAlreadyOverError(GameStateError):
    """A move was requested after checkmate / stalemate."""


class IllegalMoveError(GameError):
    """The requested move is not in the set of legal moves."""


class NoPieceAtSourceError(IllegalMoveError):
    """The move was requested from an empty square."""


class WrongSideToMoveError(IllegalMoveError):
    """The piece on the source square belongs to the player that is not to move."""


class AmbiguousPromotionError(IllegalMoveError):
    """A pawn reaches the back rank, but no piece to promote into was supplied."""


class BoardCorruptedError(Exception):
    """Fatal: an invariant of the board no longer holds. Never reachable through legal play."""


class KingNotFoundError(BoardCorruptedError):
    """Fatal: one of the kings disappeared from the board."""
