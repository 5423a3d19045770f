"""Tests for figma2html.integrations.figma_oauth."""

from __future__ import annotations

from typing import List
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from figma2html.integrations.figma_oauth import FigmaOAuthClient, FigmaOAuthError


def _oauth_client(handler) -> FigmaOAuthClient:
    return FigmaOAuthClient(
        client_id="cid",
        client_secret="secret",
        redirect_uri="http://localhost:3000/auth/figma/callback",
        transport=httpx.MockTransport(handler),
    )


class TestAuthorizationUrl:
    def test_contains_oauth_params(self):
        url = FigmaOAuthClient(client_id="cid", redirect_uri="http://cb").get_authorization_url("xyz")
        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        assert parsed.netloc == "www.figma.com"
        assert parsed.path == "/oauth"
        assert query["client_id"] == ["cid"]
        assert query["redirect_uri"] == ["http://cb"]
        assert query["state"] == ["xyz"]
        assert query["response_type"] == ["code"]
        assert "file_content:read" in query["scope"][0]

    def test_empty_state(self):
        url = FigmaOAuthClient(client_id="cid").get_authorization_url()
        assert "state=&" in url


class TestTokenEndpoint:
    @pytest.mark.asyncio
    async def test_exchange_code(self):
        seen: List[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"access_token": "a", "refresh_token": "r"})

        tokens = await _oauth_client(handler).exchange_code_for_token("code-1")
        assert tokens == {"access_token": "a", "refresh_token": "r"}

        form = parse_qs(seen[0].content.decode())
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/v1/oauth/token"
        assert form["code"] == ["code-1"]
        assert form["grant_type"] == ["authorization_code"]
        assert form["client_secret"] == ["secret"]

    @pytest.mark.asyncio
    async def test_refresh(self):
        seen: List[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"access_token": "new"})

        tokens = await _oauth_client(handler).refresh_access_token("r-1")
        assert tokens["access_token"] == "new"
        form = parse_qs(seen[0].content.decode())
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["r-1"]

    @pytest.mark.asyncio
    async def test_error_response(self):
        def handler(request):
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(FigmaOAuthError, match="invalid_grant"):
            await _oauth_client(handler).exchange_code_for_token("bad")

    @pytest.mark.asyncio
    async def test_missing_access_token(self):
        def handler(request):
            return httpx.Response(200, json={"user_id": 1})

        with pytest.raises(FigmaOAuthError, match="no access_token"):
            await _oauth_client(handler).exchange_code_for_token("code")

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(FigmaOAuthError, match="refresh token"):
            await _oauth_client(handler).refresh_access_token("r")
