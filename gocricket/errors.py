"""Game error taxonomy.

None of these escape the engine's public entry points; they are raised
internally and absorbed as no-ops, warning messages or skipped turns.
"""

from enum import IntEnum


class RequestError(IntEnum):
    """Reasons a card request is rejected."""

    NONE = 0
    WRONG_PHASE = 1
    NOT_YOUR_TURN = 2
    UNKNOWN_PLAYER = 3
    SELF_TARGET = 4
    RANK_NOT_HELD = 5
    BUSY = 6  # Animation or pending continuation in flight


class GameError(Exception):
    """Base class for game errors."""


class EmptyDeckError(GameError):
    """Raised when drawing from an empty deck."""

    def __init__(self) -> None:
        super().__init__("The deck is empty")


class InvalidActionError(GameError):
    """Raised when a request is made out of turn, out of phase or for a rank not held."""

    def __init__(self, reason: RequestError, message: str = ""):
        super().__init__(message or reason.name)
        self.reason = reason


class NoValidMoveError(GameError):
    """Raised when a CPU player has no legal request to make."""
