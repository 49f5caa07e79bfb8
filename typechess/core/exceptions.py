"""
Custom exceptions shared by all layers.

Everything raised on purpose by the application derives from GameError, so the layer above only needs a single except clause.
"""


class GameError(Exception):
    """Top level exception of the application."""


# --- DOMAIN ERRORS ---
class GameStateError(GameError):
    """The game is not in a state that allows the request (e.g. data that cannot be decoded)."""


class IllegalMoveError(GameError):
    """The requested move is not among the legal moves."""


class InvalidSquareError(GameError):
    """A square outside of the board, or a square name that cannot be parsed."""


class PromotionError(GameError):
    """Base for everything that can go wrong when choosing a piece for a promoted pawn."""


class NoMoveToPromoteError(PromotionError):
    """No move has been played yet, so there is no pawn to promote."""


class PromotionNotPendingError(PromotionError):
    """The last move did not bring a pawn to the final rank."""


class InvalidPromotionChoiceError(PromotionError):
    """The requested piece name does not map onto a piece a pawn can promote into."""


# --- PERSISTENCE ERRORS ---
class RepositoryError(GameError):
    """
    Storage failed.

    `retryable` is True for I/O failures (the transport layer may try again), False for things like a missing record.
    """

    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class GameNotFoundError(RepositoryError):
    """No record stored under the requested game name."""


class GameAlreadyExistsError(RepositoryError):
    """A record with the requested game name is already stored."""


# --- API ERRORS ---
class InvalidRequestError(GameError):
    """
    Request data that does not pass validation.

    NOTE: deliberately not a ValueError: pydantic then lets it propagate as-is instead of wrapping it in a ValidationError.
    """
