"""Pydantic schemas for request/response validation."""
from app.schemas.refresh_token import (
    CookieAttributes,
    CookieDirective,
    RefreshTokenRecord,
    SessionData,
)
from app.schemas.response import ApiResponse

__all__ = [
    # Refresh token schemas
    "CookieAttributes",
    "CookieDirective",
    "RefreshTokenRecord",
    "SessionData",
    # Response wrapper
    "ApiResponse",
]
