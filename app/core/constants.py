from enum import StrEnum


class TokenStoreBackend(StrEnum):
    """Refresh token store backends."""
    DATABASE = "database"
    MEMORY = "memory"


class AuthErrorDetails(StrEnum):
    """Refresh token related error messages."""

    REFRESH_TOKEN_MISSING = "Refresh token is required"
    REFRESH_TOKEN_INVALID = "Invalid refresh token"
    REFRESH_TOKEN_REUSED = "Refresh token is no longer valid. Please sign in again"
    REFRESH_TOKEN_DUPLICATE = "Refresh token already exists"
