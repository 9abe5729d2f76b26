"""
Escape Room Errors

Service-level exceptions. Each client-facing error carries the HTTP status
the controllers answer with.
"""


class EscapeRoomError(Exception):
    """Base class for errors reported back to the caller."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(EscapeRoomError):
    """Malformed client input (missing name, wrong answer count, unknown group)."""
    status_code = 400


class NotFoundError(EscapeRoomError):
    """Room or participant does not exist."""
    status_code = 404


class CapacityError(EscapeRoomError):
    """No position left to claim in the room."""
    status_code = 409


class StateError(EscapeRoomError):
    """Action not allowed in the room's current status."""
    status_code = 409


class GenerationInconsistency(RuntimeError):
    """A generated question does not evaluate to the bit it encodes."""
