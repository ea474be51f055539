"""
Portal Exceptions

Services raise these instead of HTTPException so the same logic can be
driven from routes, scripts and tests. main.py turns them into the
{"success": false, "error": ...} envelope.
"""


class PortalError(Exception):
    """Base class for all portal errors."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message}


class ValidationError(PortalError):
    """Missing or malformed input."""
    status_code = 400


class AuthenticationError(PortalError):
    """Missing, invalid or expired credentials."""
    status_code = 401


class AuthorizationError(PortalError):
    """Caller lacks the role or ownership required."""
    status_code = 403


class NotFoundError(PortalError):
    """Referenced entity does not exist."""
    status_code = 404


class ConflictError(PortalError):
    """Uniqueness violation."""
    status_code = 409


class UnclassifiedError(PortalError):
    """Storage or runtime failure."""
    status_code = 500
