"""SQLAlchemy ORM models."""
from app.models.refresh_token import RefreshToken

__all__ = [
    "RefreshToken",
]
