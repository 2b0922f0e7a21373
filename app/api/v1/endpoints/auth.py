import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request, Response, status
from app.schemas.refresh_token import SessionData
from app.schemas.response import ApiResponse
from app.services.refresh_token import RefreshTokenService
from app.core.config import RefreshTokenConfig
from app.core.constants import AuthErrorDetails
from app.core.dependencies import apply_cookie, get_refresh_token_config, get_refresh_token_service
from app.core.exceptions import AppException, TokenNotFoundException
from app.core.handler import create_error_response

logger = logging.getLogger(__name__)

router = APIRouter()


def get_refresh_token_cookie(
    request: Request,
    config: RefreshTokenConfig = Depends(get_refresh_token_config),
) -> Optional[str]:
    """Read the refresh token from the configured cookie name."""
    return request.cookies.get(config.cookie_name)


@router.post("/refresh", response_model=ApiResponse, status_code=status.HTTP_200_OK)
async def refresh(
    response: Response,
    refresh_token: Optional[str] = Depends(get_refresh_token_cookie),
    token_service: RefreshTokenService = Depends(get_refresh_token_service),
):
    """Rotate the refresh token cookie. A replayed token forces the client to sign in again."""
    if not refresh_token:
        raise AppException(message=AuthErrorDetails.REFRESH_TOKEN_MISSING, status_code=401)

    try:
        directive = await token_service.rotate_cookie(refresh_token)
    except TokenNotFoundException as exc:
        logger.warning("Rejected refresh with unknown, expired or already rotated token")
        error_response = create_error_response(exc.status_code, exc.message)
        apply_cookie(error_response, token_service.cookie_issuer.clear_directive())
        return error_response

    apply_cookie(response, directive)
    return ApiResponse(
        success=True,
        message="Token refreshed",
        data={"expires_in": directive.max_age // 1000}
    )


@router.post("/logout", response_model=ApiResponse, status_code=status.HTTP_200_OK)
async def logout(
    response: Response,
    refresh_token: Optional[str] = Depends(get_refresh_token_cookie),
    token_service: RefreshTokenService = Depends(get_refresh_token_service),
):
    """Revoke the refresh token and clear the cookie."""
    await token_service.revoke(refresh_token)
    apply_cookie(response, token_service.cookie_issuer.clear_directive())

    return ApiResponse(success=True, message="Logged out", data=None)


@router.get("/session", response_model=ApiResponse, status_code=status.HTTP_200_OK)
async def get_session(
    refresh_token: Optional[str] = Depends(get_refresh_token_cookie),
    token_service: RefreshTokenService = Depends(get_refresh_token_service),
):
    """Resolve the refresh token cookie to its user id."""
    user_id = await token_service.resolve_user_id(refresh_token)
    if user_id is None:
        raise AppException(message=AuthErrorDetails.REFRESH_TOKEN_INVALID, status_code=401)

    return ApiResponse(
        success=True,
        message="Session resolved",
        data=SessionData(user_id=user_id)
    )
