"""Domain exceptions raised by the social graph and card services.

Rule violations (NotFound, Forbidden, InvalidOperation, Conflict) are
deterministic and surfaced verbatim. Unavailable is the only retryable class.
"""


class SocialGraphError(Exception):
    """Base exception for all StyleSync domain errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(SocialGraphError):
    """A referenced identity or relationship record does not exist."""

    status_code = 404


class Forbidden(SocialGraphError):
    """The acting identity is not a party allowed to touch this record."""

    status_code = 403


class InvalidOperation(SocialGraphError):
    """Self-targeting or otherwise nonsensical request."""

    status_code = 400


class Conflict(SocialGraphError):
    """A relationship state rule was violated."""

    status_code = 409


class Unavailable(SocialGraphError):
    """The underlying store could not be reached or the deadline expired."""

    status_code = 503
