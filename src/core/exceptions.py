"""
Exceptions used across layers.

Parse errors and illegal moves are expected, caller-facing errors: the API layer maps them onto 4xx responses.
"""


class GameError(Exception):
    """Base class for everything the chess backend raises on purpose."""


# --- PARSE ERRORS ---
class ParseError(GameError):
    """Input could not be interpreted (notation, FEN, square names...)."""


class InvalidSquareError(ParseError):
    pass


class InvalidMoveNotationError(ParseError):
    pass


class InvalidFENError(ParseError):
    pass


# --- RULES ---
class IllegalMoveError(GameError):
    """Syntactically fine, but not allowed by the rules of chess in the current position."""


class EmptyHistoryError(GameError):
    """Nothing left to undo."""


class GameStateError(GameError):
    """Operation does not make sense in the current state of the game."""


# --- MOVE SELECTION ---
class EngineError(GameError):
    pass


class NoLegalMovesError(EngineError):
    pass


class EngineInterruptedError(EngineError):
    """The caller stopped the engine before it produced a move."""


class SearchCancelledError(EngineInterruptedError):
    pass


class SearchTimeoutError(EngineInterruptedError):
    pass


# --- PERSISTENCE / BOUNDARY ---
class RepositoryError(GameError):
    pass


class GameNotFoundError(RepositoryError):
    pass


class InvalidRequestError(GameError):
    """Raised from request model validators. NOTE: not a ValueError, so pydantic lets it propagate unwrapped."""
