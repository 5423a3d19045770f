"""Shared FastAPI dependencies: access token, storage, HTML generator."""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request

from figma2html.llm.html_generator import HtmlGenerationError, HtmlGenerator
from figma2html.storage import DesignStorage

ACCESS_TOKEN_COOKIE = "figma_access_token"
REFRESH_TOKEN_COOKIE = "figma_refresh_token"

_storage: Optional[DesignStorage] = None


def get_access_token(request: Request) -> str:
    """Read the Figma token from the HTTP-only cookie or a Bearer header."""
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token

    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer ") and auth_header[7:].strip():
        return auth_header[7:].strip()

    raise HTTPException(status_code=401, detail="Missing or invalid access token")


def get_storage() -> DesignStorage:
    global _storage
    if _storage is None:
        _storage = DesignStorage()
    return _storage


def get_html_generator() -> HtmlGenerator:
    try:
        return HtmlGenerator()
    except HtmlGenerationError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
