"""Figma OAuth 2 client: authorization URL, code exchange, token refresh."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from figma2html import config, settings

logger = logging.getLogger("figma2html.integrations.oauth")


class FigmaOAuthError(Exception):
    """Raised when the Figma token endpoint rejects a request."""


class FigmaOAuthClient:
    """Figma OAuth application client.

    Credentials default to the FIGMA_CLIENT_ID / FIGMA_CLIENT_SECRET /
    FIGMA_REDIRECT_URI environment configuration.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        scope: Optional[str] = None,
        timeout: float = settings.FIGMA_HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id if client_id is not None else config.FIGMA_CLIENT_ID
        self.client_secret = (
            client_secret if client_secret is not None else config.FIGMA_CLIENT_SECRET
        )
        self.redirect_uri = redirect_uri or config.FIGMA_REDIRECT_URI
        self.scope = scope or config.FIGMA_SCOPE
        self._timeout = timeout
        self._transport = transport

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "state": state or "",
            "response_type": "code",
        }
        return f"{config.FIGMA_AUTHORIZATION_URL}?{urlencode(params)}"

    async def _post_token(self, payload: Dict[str, str], action: str) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                resp = await client.post(config.FIGMA_TOKEN_URL, data=payload)
            except httpx.HTTPError as e:
                raise FigmaOAuthError(f"Failed to {action}: {e}") from e

        if resp.status_code != 200:
            detail = resp.text[:200]
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                detail = body.get("error") or body.get("message") or detail
            raise FigmaOAuthError(f"Failed to {action}: {detail}")

        tokens = resp.json()
        if not tokens.get("access_token"):
            raise FigmaOAuthError(f"Failed to {action}: response has no access_token")
        return tokens

    async def exchange_code_for_token(self, code: str) -> Dict[str, Any]:
        """Trade an authorization code for access (and refresh) tokens."""
        tokens = await self._post_token(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "code": code,
                "grant_type": "authorization_code",
            },
            "exchange code for token",
        )
        logger.info(f"OAuth code exchanged, user_id={tokens.get('user_id')}")
        return tokens

    async def refresh_access_token(self, refresh_token: str) -> Dict[str, Any]:
        tokens = await self._post_token(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            "refresh token",
        )
        logger.info("OAuth access token refreshed")
        return tokens
