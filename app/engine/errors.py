"""
Exceptions raised by the match engine.
"""


class MatchError(Exception):
    """Base class for match engine errors."""


class ProgrammingError(MatchError):
    """Raised when a caller acts out of turn (wrong stage, finished innings, no toss)."""


class BallInFlightError(MatchError):
    """Raised when a ball is played while the previous one is still being resolved."""


class InvalidShotError(MatchError, ValueError):
    """Raised for a shot value outside the legal batting set."""


class MatchResetError(MatchError):
    """Raised when the match was reset while a ball was still being resolved."""
