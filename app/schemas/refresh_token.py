from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RefreshTokenRecord(BaseModel):
    """Persisted refresh token. `value` is both the key and the bearer secret."""

    model_config = ConfigDict(frozen=True)

    value: str
    user_id: str = Field(description="Opaque reference to the owning user")
    expire_at: int = Field(description="Expiry as milliseconds since the epoch")

    def is_live(self, now: int) -> bool:
        return self.expire_at > now

    def __repr__(self) -> str:
        return f"RefreshTokenRecord(value={self.value[:8]}..., user_id={self.user_id}, expire_at={self.expire_at})"


class CookieAttributes(BaseModel):
    http_only: bool
    secure: bool
    same_site: str
    path: str = "/"
    domain: Optional[str] = None


class CookieDirective(BaseModel):
    """What the transport layer should write to the outgoing response. `max_age` is in milliseconds."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    attributes: CookieAttributes
    max_age: int


class SessionData(BaseModel):
    user_id: str
