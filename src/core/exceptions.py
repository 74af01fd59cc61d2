"""
Errors raised by the domain, service and request layers.

NOTE: an illegal move is NOT an error. Submitting one simply returns False.
"""


class GameError(Exception):
    """Base class for all errors raised by the application."""


class GameStateError(GameError):
    """The game is not in a state that allows the requested action (not started yet, already over, ...)."""


class NotYourTurnError(GameError):
    """A player tried to act while the opponent is to move."""


class InvalidFENError(GameError):
    """A piece placement string does not describe a board with the expected bounds."""


class InvalidRequestError(GameError):
    """Request data that cannot be interpreted. Raised from the request models' validators."""


class UnknownVariantError(GameError):
    """No board factory is registered for the requested variant."""


class RepositoryError(GameError):
    """The requested match could not be found."""
