"""Refresh token SQLAlchemy model."""
from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column
from app.core.database import Base
from app.schemas.refresh_token import RefreshTokenRecord


class RefreshToken(Base):
    """One row per outstanding refresh session. Rotation rewrites `value` and `expire_at` in place."""

    __tablename__ = "refresh_tokens"

    value: Mapped[str] = mapped_column(String(128), primary_key=True)
    # No foreign key: user lifecycle is owned elsewhere
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    expire_at: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)  # epoch milliseconds

    def to_record(self) -> RefreshTokenRecord:
        return RefreshTokenRecord(value=self.value, user_id=self.user_id, expire_at=self.expire_at)

    def __repr__(self) -> str:
        return f"<RefreshToken(value={self.value[:8]}..., user_id={self.user_id})>"
