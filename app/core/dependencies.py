"""Dependencies for FastAPI endpoints."""
from typing import AsyncGenerator
from fastapi import Depends, Response
from app.core.config import RefreshTokenConfig, settings
from app.core.constants import TokenStoreBackend
from app.core.database import db_manager
from app.interfaces.refresh_token import IRefreshTokenRepository
from app.schemas.refresh_token import CookieDirective
from app.services.cookie_issuer import CookieIssuer
from app.services.refresh_token import RefreshTokenService


def get_refresh_token_config() -> RefreshTokenConfig:
    """Refresh token policy derived from application settings."""
    return RefreshTokenConfig.from_settings(settings)


async def get_refresh_token_repository() -> AsyncGenerator[IRefreshTokenRepository, None]:
    """
    Yield the configured refresh token store.

    The database store wraps a request-scoped session. The service commits
    each write itself, before the route attaches a cookie.
    """
    if settings.REFRESH_TOKEN_STORE == TokenStoreBackend.MEMORY:
        from app.repositories.shared import refresh_token_repository

        yield refresh_token_repository
        return

    from app.repositories.refresh_token_repository import RefreshTokenRepository

    async for session in db_manager.get_session():
        yield RefreshTokenRepository(session)


def get_cookie_issuer(config: RefreshTokenConfig = Depends(get_refresh_token_config)) -> CookieIssuer:
    return CookieIssuer(config)


def get_refresh_token_service(
    repository: IRefreshTokenRepository = Depends(get_refresh_token_repository),
    config: RefreshTokenConfig = Depends(get_refresh_token_config),
    cookie_issuer: CookieIssuer = Depends(get_cookie_issuer),
) -> RefreshTokenService:
    """Dependency injection for RefreshTokenService."""
    return RefreshTokenService(
        repository=repository,
        config=config,
        cookie_issuer=cookie_issuer,
    )


def apply_cookie(response: Response, directive: CookieDirective) -> None:
    """Write a cookie directive onto a response. Directive max_age is milliseconds, the header wants seconds."""
    attributes = directive.attributes
    if directive.max_age <= 0:
        response.delete_cookie(
            key=directive.name,
            path=attributes.path,
            domain=attributes.domain,
            secure=attributes.secure,
            httponly=attributes.http_only,
            samesite=attributes.same_site,
        )
        return

    response.set_cookie(
        key=directive.name,
        value=directive.value,
        max_age=directive.max_age // 1000,
        path=attributes.path,
        domain=attributes.domain,
        secure=attributes.secure,
        httponly=attributes.http_only,
        samesite=attributes.same_site,
    )
