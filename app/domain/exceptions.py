from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class ValidationError(DomainError):
    """Missing or malformed input."""


class ConflictError(DomainError):
    """A unique field is already taken."""


class NotFoundError(DomainError):
    """No matching user."""


class UnauthorizedError(DomainError):
    """Credential or token rejected."""


class InvalidCredentialsError(UnauthorizedError):
    """Password does not match."""


class TokenInvalidError(UnauthorizedError):
    """Bad signature, malformed token or wrong token type."""


class TokenExpiredError(UnauthorizedError):
    """Validly signed token past its expiry."""


class RefreshTokenReuseError(UnauthorizedError):
    """Refresh token no longer matches the one stored for the user."""


class ConfigurationError(DomainError):
    """Settings are missing or inconsistent."""
