"""Figma OAuth endpoints.

GET  /auth/figma/authorize  redirect to Figma's consent screen
GET  /auth/figma/callback   exchange the code, set HTTP-only token cookies
GET  /auth/figma/me         current Figma user
POST /auth/figma/refresh    refresh the access token cookie
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from figma2html import config, settings
from figma2html.integrations.figma_client import FigmaClient, FigmaClientError
from figma2html.integrations.figma_oauth import FigmaOAuthClient, FigmaOAuthError

from app.dependencies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE

logger = logging.getLogger("figma2html.routes.oauth")

router = APIRouter(prefix="/auth/figma", tags=["auth"])


def _frontend_redirect(error: Optional[str] = None) -> RedirectResponse:
    if error:
        return RedirectResponse(f"{config.FRONTEND_URL}?error={quote(error)}")
    return RedirectResponse(f"{config.FRONTEND_URL}/")


def _set_token_cookies(response: Response, tokens: Dict[str, Any]) -> None:
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        tokens["access_token"],
        httponly=True,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_COOKIE_MAX_AGE,
    )
    if tokens.get("refresh_token"):
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            tokens["refresh_token"],
            httponly=True,
            samesite="lax",
            max_age=settings.REFRESH_TOKEN_COOKIE_MAX_AGE,
        )


@router.get("/authorize")
async def authorize(state: Optional[str] = None):
    return RedirectResponse(FigmaOAuthClient().get_authorization_url(state))


@router.get("/callback")
async def callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
):
    """Finish the OAuth flow; tokens never appear in the redirect URL."""
    if error:
        return _frontend_redirect(error)
    if not code:
        return _frontend_redirect("missing_code")

    try:
        tokens = await FigmaOAuthClient().exchange_code_for_token(code)
    except FigmaOAuthError as e:
        logger.error(f"OAuth callback error: {e}")
        return _frontend_redirect("oauth_failed")

    response = _frontend_redirect()
    _set_token_cookies(response, tokens)
    return response


@router.get("/me")
async def get_user_info(request: Request):
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise HTTPException(status_code=401, detail="Missing or invalid access token")

    client = FigmaClient(token)
    try:
        user = await client.get_me()
    except FigmaClientError as e:
        logger.error(f"Get user info error: {e}")
        status = 401 if e.status_code == 401 else 500
        raise HTTPException(status_code=status, detail=f"Failed to get user info: {e}")
    finally:
        await client.close()

    return {"success": True, "user": user}


@router.post("/refresh")
async def refresh(request: Request):
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not refresh_token:
        raise HTTPException(status_code=401, detail="Missing refresh token")

    try:
        tokens = await FigmaOAuthClient().refresh_access_token(refresh_token)
    except FigmaOAuthError as e:
        logger.error(f"Token refresh error: {e}")
        raise HTTPException(status_code=401, detail=str(e))

    response = JSONResponse({"success": True})
    _set_token_cookies(response, tokens)
    return response
