"""
Typed failures raised by the auth core and mapped to HTTP at the boundary.

Every application error carries an explicit ErrorKind; the HTTP layer turns
the kind into a status code through ERROR_STATUS and renders the uniform
envelope {status, success, message, error}.
"""

from enum import Enum


class ErrorKind(str, Enum):
    ALREADY_EXISTS = "AlreadyExists"
    NOT_FOUND = "NotFound"
    INVALID_CREDENTIALS = "InvalidCredentials"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    MALFORMED_INPUT = "MalformedInput"


ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.MALFORMED_INPUT: 422,
}


class AppError(Exception):
    """Base class for user-facing (4xx) failures."""

    kind: ErrorKind
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.kind]


class AlreadyExistsError(AppError):
    """Raised when a pseudonyme is already registered."""

    kind = ErrorKind.ALREADY_EXISTS
    default_message = "Account already exists"


class NotFoundError(AppError):
    """Raised when an identity lookup misses."""

    kind = ErrorKind.NOT_FOUND
    default_message = "User not found"


class InvalidCredentialsError(AppError):
    """Raised when a password does not match the stored hash."""

    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid credentials"


class UnauthorizedError(AppError):
    """Raised for missing, invalid, expired or forged tokens, or deleted subjects."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    """Raised when an authenticated subject lacks the required role."""

    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class MalformedInputError(AppError):
    """Raised when input passes schema validation but is still unusable."""

    kind = ErrorKind.MALFORMED_INPUT
    default_message = "Malformed input"


class TokenError(Exception):
    """Base class for token verification failures. Never shown to callers as-is."""

    reason: str = "token_error"


class InvalidTokenError(TokenError):
    """Signature mismatch or a failed claim check."""

    reason = "invalid"


class ExpiredTokenError(TokenError):
    """Token is past its exp claim."""

    reason = "expired"


class MalformedTokenError(TokenError):
    """Token cannot be decoded or lacks the claim set."""

    reason = "malformed"
