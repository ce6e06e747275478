"""Error taxonomy shared by the core, web and CLI layers.

Each error carries the HTTP status it maps to at the request boundary.
"""


class ExamdeskError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ExamdeskError):
    """Missing or malformed input."""

    status_code = 400


class AuthError(ExamdeskError):
    """Bad credentials."""

    status_code = 401


class NotFoundError(ExamdeskError):
    """Unknown identifier."""

    status_code = 404


class StateError(ExamdeskError):
    """Operation not allowed in the entity's current state."""

    status_code = 409


class StorageError(ExamdeskError):
    """Underlying store failure. The message is never sent to clients."""

    status_code = 500
