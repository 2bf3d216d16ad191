"""Errors raised by the Imposter engine and its adapters."""


class GameError(Exception):
    """Base class for all game errors."""


class ConfigurationError(GameError, ValueError):
    """Player/impostor counts or player names are not valid for a game."""


class PreconditionError(GameError):
    """Operation is not allowed in the current game state."""


class PersistenceError(GameError):
    """Loading, storing or clearing the game record failed. Always recoverable."""


class NoGameError(PreconditionError):
    """No game has been configured in this session."""
