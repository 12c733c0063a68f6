"""Service-layer exceptions. The HTTP boundary maps each to a status code."""
from __future__ import annotations


class ServiceError(Exception):
    status_code = 500
    error_code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class BadRequest(ServiceError):
    status_code = 400
    error_code = "BAD_REQUEST"
    default_message = "Bad request"


class DuplicateEmail(BadRequest):
    error_code = "DUPLICATE_EMAIL"
    default_message = "Email already registered"


class InvalidCredentials(ServiceError):
    # Covers unknown email and wrong password alike
    status_code = 401
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class InvalidToken(ServiceError):
    status_code = 401
    error_code = "INVALID_TOKEN"
    default_message = "Invalid token"


class TokenExpired(ServiceError):
    status_code = 401
    error_code = "TOKEN_EXPIRED"
    default_message = "Token expired"


class Unauthorized(ServiceError):
    """Authenticated, but not allowed to touch this resource."""
    status_code = 403
    error_code = "FORBIDDEN"
    default_message = "Not allowed to modify this resource"


class NotFound(ServiceError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Resource not found"
