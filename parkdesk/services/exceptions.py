# parkdesk/services/exceptions.py
"""
Business-rule failures raised by the service layer.
parkdesk.main maps each one to an HTTP status; anything else is a 500.
"""


class ParkingError(Exception):
    """Base class for expected, reportable failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ParkingError):
    """Referenced entity is absent (or vanished underneath the request)."""


class ConflictError(ParkingError):
    """Uniqueness or state precondition violated."""


class AuthenticationError(ParkingError):
    """Credentials did not match a user."""
