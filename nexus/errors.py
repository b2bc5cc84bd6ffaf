"""
Domain error taxonomy. Every failure a service raises is one of these; the
exception handlers in nexus.api turn them into `{"error": message}` responses.
"""


class NexusError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(NexusError):
    """Missing or malformed required field."""
    status_code = 400


class NotFoundError(NexusError):
    """Referenced entity id does not resolve."""
    status_code = 404


class AlreadyEnrolledError(NexusError):
    """Student is already on the course roster."""
    status_code = 409


class StorageError(NexusError):
    """Underlying store failure (I/O, constraint violation)."""
    status_code = 500
