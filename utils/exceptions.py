"""
Error taxonomy shared by the hasher, token, store and service layers.

Every error carries an AuthErrorKind; only api/errors.py turns a kind into an
HTTP status and response envelope.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional


class AuthErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"

    @property
    def status(self) -> int:
        return _STATUS_BY_KIND[self]


_STATUS_BY_KIND = {
    AuthErrorKind.VALIDATION: 400,
    AuthErrorKind.AUTHENTICATION: 401,
    AuthErrorKind.UNAUTHORIZED: 401,
    AuthErrorKind.NOT_FOUND: 404,
    AuthErrorKind.CONFLICT: 409,
    AuthErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    """Base class for every classified application error."""

    kind = AuthErrorKind.INTERNAL
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.kind.status


class ValidationError(AppError):
    kind = AuthErrorKind.VALIDATION
    default_message = "Invalid input"


class AuthenticationError(AppError):
    kind = AuthErrorKind.AUTHENTICATION
    default_message = "Invalid user credentials"


class UnauthorizedError(AppError):
    kind = AuthErrorKind.UNAUTHORIZED
    default_message = "Unauthorized request"


class NotFoundError(AppError):
    kind = AuthErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    kind = AuthErrorKind.CONFLICT
    default_message = "Conflict"


class InternalError(AppError):
    kind = AuthErrorKind.INTERNAL


class ConfigError(AppError):
    """Required configuration (e.g. a signing secret) is missing or unusable."""

    kind = AuthErrorKind.INTERNAL
    default_message = "Server is misconfigured"


class InvalidTokenError(AppError):
    """Token is malformed, has a bad signature, or carries the wrong claims."""

    kind = AuthErrorKind.UNAUTHORIZED
    default_message = "Invalid token"


class ExpiredTokenError(InvalidTokenError):
    """Token was recognized but is past its expiry."""

    default_message = "Token has expired"
