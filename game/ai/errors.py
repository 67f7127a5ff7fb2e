# game/ai/errors.py


class EngineError(Exception):
    """Base class for everything the move engine and its callers raise."""


class IllegalCellError(EngineError):
    """A move targets an occupied cell or an index outside 0-8."""


class NoLegalMoveError(EngineError):
    """Selection was requested on a full board."""


class InvalidBoardError(EngineError, ValueError):
    """Board is not a sequence of 9 cells in {"", "X", "O"}."""


class TransportError(EngineError):
    """The move provider could not be reached or returned garbage."""
