import asyncio
from typing import Optional

from app.core.constants import AuthErrorDetails
from app.core.exceptions import DuplicateKeyException, TokenNotFoundException
from app.interfaces.refresh_token import IRefreshTokenRepository
from app.schemas.refresh_token import RefreshTokenRecord


class InMemoryRefreshTokenRepository(IRefreshTokenRepository):
    """Process-local refresh token store. Every operation runs under one lock."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._tokens: dict[str, RefreshTokenRecord] = {}  # value -> record

    async def create(self, user_id: str, value: str, expire_at: int) -> RefreshTokenRecord:
        async with self._lock:
            if value in self._tokens:
                raise DuplicateKeyException(AuthErrorDetails.REFRESH_TOKEN_DUPLICATE)
            record = RefreshTokenRecord(value=value, user_id=user_id, expire_at=expire_at)
            self._tokens[value] = record
            return record

    async def find_by_value(self, value: str) -> Optional[RefreshTokenRecord]:
        async with self._lock:
            return self._tokens.get(value)

    async def update_by_value(
        self,
        old_value: str,
        new_value: str,
        new_expire_at: int,
        *,
        live_after: Optional[int] = None,
    ) -> RefreshTokenRecord:
        async with self._lock:
            current = self._tokens.get(old_value)
            if current is None or (live_after is not None and not current.is_live(live_after)):
                raise TokenNotFoundException(AuthErrorDetails.REFRESH_TOKEN_REUSED)
            if new_value != old_value and new_value in self._tokens:
                raise DuplicateKeyException(AuthErrorDetails.REFRESH_TOKEN_DUPLICATE)

            record = RefreshTokenRecord(value=new_value, user_id=current.user_id, expire_at=new_expire_at)
            del self._tokens[old_value]
            self._tokens[new_value] = record
            return record

    async def delete_by_value(self, value: str) -> None:
        async with self._lock:
            self._tokens.pop(value, None)

    async def delete_expired(self, now: int) -> int:
        async with self._lock:
            expired = [value for value, record in self._tokens.items() if not record.is_live(now)]
            for value in expired:
                del self._tokens[value]
            return len(expired)

    async def commit(self) -> None:
        # Writes apply under the lock as they happen
        return None

    def __len__(self) -> int:
        return len(self._tokens)
