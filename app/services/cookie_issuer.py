"""Cookie directives for refresh tokens."""
from app.core.config import RefreshTokenConfig
from app.schemas.refresh_token import CookieAttributes, CookieDirective


class CookieIssuer:
    """Computes how a refresh token should travel in a cookie.

    Attaching the directive to a response is the caller's job.
    """

    def __init__(self, config: RefreshTokenConfig):
        self._config = config
        self._attributes = CookieAttributes(
            http_only=config.http_only,
            secure=config.secure,
            same_site=config.same_site,
            path=config.path,
            domain=config.domain,
        )

    def issue_directive(self, value: str) -> CookieDirective:
        return CookieDirective(
            name=self._config.cookie_name,
            value=value,
            attributes=self._attributes,
            max_age=self._config.ttl_ms,
        )

    def clear_directive(self) -> CookieDirective:
        """Directive that makes the client drop the refresh cookie."""
        return CookieDirective(
            name=self._config.cookie_name,
            value="",
            attributes=self._attributes,
            max_age=0,
        )
