"""Error taxonomy shared by the lifecycle managers, the gateway and the HTTP API."""


class DuoPartyError(Exception):
    """Base class; ``message`` is what the originating client gets to see."""

    def __init__(self, message: str = ''):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.__class__.__name__


class ValidationError(DuoPartyError):
    """Missing or malformed parameters."""


class RoomFull(ValidationError):
    """Room already has two players."""


class StaleRound(ValidationError):
    """Round already resolved."""


class NotFound(DuoPartyError):
    """Not found."""


class SessionNotFound(NotFound):
    """Session not found."""


class GameNotFound(NotFound):
    """Game not found."""


class StoreUnavailable(DuoPartyError):
    """State store unavailable."""


class InvariantViolation(DuoPartyError):
    """Game state out of bounds."""
