from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.refresh_token import RefreshTokenRecord


class IRefreshTokenRepository(ABC):
    """Persistence for refresh token records, keyed by token value."""

    @abstractmethod
    async def create(self, user_id: str, value: str, expire_at: int) -> RefreshTokenRecord:
        """Persist a new refresh token.

        Args:
            user_id: Owning user reference, opaque to the store
            value: Token value, unique across all records
            expire_at: Expiry in epoch milliseconds

        Returns:
            The stored record

        Raises:
            DuplicateKeyException: If a record with `value` already exists
        """
        pass

    @abstractmethod
    async def find_by_value(self, value: str) -> Optional[RefreshTokenRecord]:
        """Return the record for `value`, expired or not, or None."""
        pass

    @abstractmethod
    async def update_by_value(
        self,
        old_value: str,
        new_value: str,
        new_expire_at: int,
        *,
        live_after: Optional[int] = None,
    ) -> RefreshTokenRecord:
        """Atomically replace the record keyed by `old_value` with `new_value`/`new_expire_at`.

        Concurrent callers racing on the same `old_value` see exactly one success.
        If the update cannot complete, the old record stays as it was.

        Args:
            old_value: Current token value
            new_value: Replacement token value
            new_expire_at: Replacement expiry in epoch milliseconds
            live_after: When given, only a record with expire_at > live_after matches

        Returns:
            The record as stored after the update

        Raises:
            TokenNotFoundException: If no matching record exists
            DuplicateKeyException: If `new_value` is already taken
        """
        pass

    @abstractmethod
    async def delete_by_value(self, value: str) -> None:
        """Delete the record for `value`. Deleting a missing value is not an error."""
        pass

    @abstractmethod
    async def delete_expired(self, now: int) -> int:
        """Delete every record with expire_at <= now and return how many were removed."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Make every write made so far durable. Called before a token value leaves the service."""
        pass
