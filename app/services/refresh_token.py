"""Refresh token lifecycle: issuance, resolution, rotation and revocation.

Tokens are opaque random strings that double as the record key. Rotation is
single-use: the store replaces the record keyed by the presented value, so a
replayed or already-rotated value no longer matches anything and surfaces as
TokenNotFoundException. Callers must treat that as a forced sign-in.

Every write is committed before the operation returns, so a value handed to
the caller (and from there to a Set-Cookie header) is already durable.

Expired records are never reported as such. Resolution folds them into
"absent", and rotation refuses to revive them, whether or not a cleanup job
has removed the rows yet.
"""
import logging
from typing import Any, Callable, Mapping, Optional

from app.core.config import RefreshTokenConfig
from app.core.security import generate_token_value, now_ms
from app.interfaces.refresh_token import IRefreshTokenRepository
from app.schemas.refresh_token import CookieDirective
from app.services.cookie_issuer import CookieIssuer

logger = logging.getLogger(__name__)


class RefreshTokenService:
    """Service for the refresh token lifecycle. Store errors propagate to the caller untouched."""

    def __init__(
        self,
        repository: IRefreshTokenRepository,
        config: RefreshTokenConfig,
        cookie_issuer: Optional[CookieIssuer] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.repository = repository
        self.config = config
        self.cookie_issuer = cookie_issuer or CookieIssuer(config)
        self._clock = clock

    def _next_expiry(self) -> int:
        return self._clock() + self.config.ttl_ms

    async def issue(self, user: Mapping[str, Any]) -> str:
        """Create a refresh token for an authenticated user and return its raw value."""
        user_id = str(user["id"])
        record = await self.repository.create(user_id, generate_token_value(), self._next_expiry())
        await self.repository.commit()
        logger.debug(f"Issued refresh token for user {user_id}")
        return record.value

    async def resolve_user_id(self, value: Optional[str]) -> Optional[str]:
        """Return the owning user id, or None for unknown, revoked or expired tokens."""
        if not value:
            return None

        record = await self.repository.find_by_value(value)
        if record is None or not record.is_live(self._clock()):
            return None
        return record.user_id

    async def rotate(self, value: str) -> str:
        """Replace `value` with a fresh token and expiry and return the new value.

        Raises:
            TokenNotFoundException: If `value` is unknown, already rotated, revoked or expired
        """
        now = self._clock()
        record = await self.repository.update_by_value(
            value,
            generate_token_value(),
            now + self.config.ttl_ms,
            live_after=now,
        )
        await self.repository.commit()
        logger.debug(f"Rotated refresh token for user {record.user_id}")
        return record.value

    async def revoke(self, value: Optional[str]) -> None:
        """Delete a refresh token. Unknown values are ignored."""
        if not value:
            return
        await self.repository.delete_by_value(value)
        await self.repository.commit()
        logger.debug("Revoked refresh token")

    async def issue_cookie(self, user: Mapping[str, Any]) -> CookieDirective:
        value = await self.issue(user)
        return self.cookie_issuer.issue_directive(value)

    async def rotate_cookie(self, value: str) -> CookieDirective:
        new_value = await self.rotate(value)
        return self.cookie_issuer.issue_directive(new_value)

    async def purge_expired(self) -> int:
        """Remove expired rows. Optional housekeeping; resolution never depends on it."""
        removed = await self.repository.delete_expired(self._clock())
        await self.repository.commit()
        logger.info(f"Purged {removed} expired refresh tokens")
        return removed
