"""
Domain errors raised by the auth service.

Each carries the HTTP status and the user-safe message the API returns;
``api.middleware`` turns them into ``{"message": ...}`` responses.
"""

from __future__ import annotations


class AuthError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConflictError(AuthError):
    status_code = 400
    default_message = "User already exists"


class UnauthorizedError(AuthError):
    status_code = 401
    default_message = "Invalid username or password"


class NotFoundError(AuthError):
    status_code = 404
    default_message = "User not found"


class InvalidOrExpiredTokenError(AuthError):
    status_code = 400
    default_message = "Invalid or expired token"


class InternalError(AuthError):
    """Unexpected store or transport failure; details stay in the logs."""
