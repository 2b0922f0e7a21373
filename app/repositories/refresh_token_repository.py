"""Refresh token repository implementation using SQLAlchemy (PostgreSQL in production, SQLite in tests)."""
from typing import Optional
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.constants import AuthErrorDetails
from app.core.exceptions import DuplicateKeyException, TokenNotFoundException
from app.interfaces.refresh_token import IRefreshTokenRepository
from app.models.refresh_token import RefreshToken
from app.schemas.refresh_token import RefreshTokenRecord


class RefreshTokenRepository(IRefreshTokenRepository):
    """SQLAlchemy implementation of the refresh token store.

    Writes go through Core statements so the database, not the session's
    identity map, decides uniqueness and which concurrent rotation wins.
    Writes stay in the session transaction until commit() is called.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, user_id: str, value: str, expire_at: int) -> RefreshTokenRecord:
        """Persist a new refresh token."""
        stmt = insert(RefreshToken).values(value=value, user_id=user_id, expire_at=expire_at)
        try:
            await self._session.execute(stmt)
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateKeyException(AuthErrorDetails.REFRESH_TOKEN_DUPLICATE) from exc
        return RefreshTokenRecord(value=value, user_id=user_id, expire_at=expire_at)

    async def find_by_value(self, value: str) -> Optional[RefreshTokenRecord]:
        """Retrieve a refresh token by value."""
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.value == value)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        token = result.scalar_one_or_none()
        return token.to_record() if token else None

    async def update_by_value(
        self,
        old_value: str,
        new_value: str,
        new_expire_at: int,
        *,
        live_after: Optional[int] = None,
    ) -> RefreshTokenRecord:
        """Conditional in-place rotation keyed on the old value."""
        stmt = update(RefreshToken).where(RefreshToken.value == old_value)
        if live_after is not None:
            stmt = stmt.where(RefreshToken.expire_at > live_after)
        stmt = (
            stmt.values(value=new_value, expire_at=new_expire_at)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateKeyException(AuthErrorDetails.REFRESH_TOKEN_DUPLICATE) from exc

        if result.rowcount == 0:
            raise TokenNotFoundException(AuthErrorDetails.REFRESH_TOKEN_REUSED)

        # Same transaction, so this sees the row just written
        record = await self.find_by_value(new_value)
        if record is None:
            raise TokenNotFoundException(AuthErrorDetails.REFRESH_TOKEN_REUSED)
        return record

    async def delete_by_value(self, value: str) -> None:
        """Delete a refresh token by value."""
        stmt = delete(RefreshToken).where(RefreshToken.value == value)
        await self._session.execute(stmt)

    async def delete_expired(self, now: int) -> int:
        """Delete all refresh tokens that expired at or before `now`."""
        stmt = delete(RefreshToken).where(RefreshToken.expire_at <= now)
        result = await self._session.execute(stmt)
        return result.rowcount

    async def commit(self) -> None:
        """Commit the session transaction."""
        await self._session.commit()
