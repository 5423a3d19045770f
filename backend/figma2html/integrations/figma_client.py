"""Figma REST API client.

Fetches file documents, node subtrees, rendered images and image-fill URLs
on behalf of a user, authenticated with an OAuth access token.

Usage:
    client = FigmaClient(access_token)
    try:
        data = await client.get_file("6kGd851qaAX4TiL44vpIrO", depth=4)
    finally:
        await client.close()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from figma2html import config, settings

logger = logging.getLogger("figma2html.integrations.figma")


class FigmaClientError(Exception):
    """Raised when a Figma API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _error_message(resp: httpx.Response) -> str:
    """Figma reports failures as ``{"err": ...}`` or ``{"error": ...}``."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict):
        message = body.get("err") or body.get("error") or body.get("message")
        if message:
            return str(message)
    return resp.text[:200]


class FigmaClient:
    """Async Figma REST API client.

    Args:
        access_token: OAuth access token of the user.
        timeout: HTTP request timeout in seconds.
        transport: Optional httpx transport (tests).
    """

    def __init__(
        self,
        access_token: str,
        timeout: float = settings.FIGMA_HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not access_token:
            raise FigmaClientError("Figma access token is required", status_code=401)
        self._token = access_token
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=config.FIGMA_API_BASE,
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=5, max_keepalive_connections=3),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Make a GET request to the Figma API."""
        client = await self._get_client()
        try:
            resp = await client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise FigmaClientError(f"Figma API timeout: {path}") from e
        except httpx.ConnectError as e:
            raise FigmaClientError(f"Figma API connection error: {path}") from e

        if resp.status_code == 401:
            raise FigmaClientError(
                f"Figma API returned 401 Unauthorized: {_error_message(resp)}",
                status_code=401,
            )
        if resp.status_code == 403:
            raise FigmaClientError(
                "Figma API returned 403 Forbidden. Check that the token has "
                "file_content:read scope.",
                status_code=403,
            )
        if resp.status_code == 404:
            raise FigmaClientError(f"Figma resource not found: {path}", status_code=404)
        if resp.status_code == 429:
            raise FigmaClientError("Figma API rate limit exceeded. Retry later.", status_code=429)
        if resp.status_code != 200:
            raise FigmaClientError(
                f"Figma API error {resp.status_code}: {_error_message(resp)}",
                status_code=resp.status_code,
            )

        return resp.json()

    # ------------------------------------------------------------------
    # API methods
    # ------------------------------------------------------------------

    async def get_file(
        self,
        file_key: str,
        version: Optional[str] = None,
        ids: Optional[str] = None,
        depth: Optional[int] = None,
        geometry: Optional[str] = None,
        plugin_data: Optional[str] = None,
        branch_data: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Fetch a file document.

        GET /v1/files/:key
        """
        params: Dict[str, str] = {}
        if version:
            params["version"] = version
        if ids:
            params["ids"] = ids
        if depth:
            params["depth"] = str(depth)
        if geometry:
            params["geometry"] = geometry
        if plugin_data:
            params["plugin_data"] = plugin_data
        if branch_data is not None:
            params["branch_data"] = _bool_param(branch_data)

        data = await self._get(f"/files/{file_key}", params=params or None)
        logger.info(f"get_file: file={file_key}, name={data.get('name')!r}")
        return data

    async def get_file_nodes(
        self,
        file_key: str,
        ids: str,
        version: Optional[str] = None,
        depth: Optional[int] = None,
        geometry: Optional[str] = None,
        plugin_data: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch specific nodes from a file.

        GET /v1/files/:key/nodes?ids=...
        """
        params: Dict[str, str] = {"ids": ids}
        if version:
            params["version"] = version
        if depth:
            params["depth"] = str(depth)
        if geometry:
            params["geometry"] = geometry
        if plugin_data:
            params["plugin_data"] = plugin_data

        data = await self._get(f"/files/{file_key}/nodes", params=params)
        logger.info(
            f"get_file_nodes: file={file_key}, requested={len(ids.split(','))}, "
            f"returned={len(data.get('nodes') or {})}"
        )
        return data

    async def get_images(
        self,
        file_key: str,
        ids: str,
        scale: Optional[float] = None,
        fmt: Optional[str] = None,
        svg_outline_text: Optional[bool] = None,
        svg_include_id: Optional[bool] = None,
        svg_include_node_id: Optional[bool] = None,
        svg_simplify_stroke: Optional[bool] = None,
        contents_only: Optional[bool] = None,
        use_absolute_bounds: Optional[bool] = None,
        version: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Render nodes as images.

        GET /v1/images/:key?ids=...&format=...&scale=...
        """
        params: Dict[str, str] = {"ids": ids}
        if scale:
            params["scale"] = str(scale)
        if fmt:
            params["format"] = fmt
        flags = {
            "svg_outline_text": svg_outline_text,
            "svg_include_id": svg_include_id,
            "svg_include_node_id": svg_include_node_id,
            "svg_simplify_stroke": svg_simplify_stroke,
            "contents_only": contents_only,
            "use_absolute_bounds": use_absolute_bounds,
        }
        for name, value in flags.items():
            if value is not None:
                params[name] = _bool_param(value)
        if version:
            params["version"] = version

        data = await self._get(f"/images/{file_key}", params=params)
        if data.get("err"):
            raise FigmaClientError(f"Figma image render error: {data['err']}")

        images = data.get("images") or {}
        logger.info(
            f"get_images: file={file_key}, requested={len(ids.split(','))}, "
            f"rendered={sum(1 for v in images.values() if v)}"
        )
        return data

    async def get_image_fills(self, file_key: str) -> Dict[str, Any]:
        """Fetch download URLs for all image fills in a file.

        GET /v1/files/:key/images
        """
        data = await self._get(f"/files/{file_key}/images")
        images = (data.get("meta") or {}).get("images") or {}
        logger.info(f"get_image_fills: file={file_key}, count={len(images)}")
        return data

    async def get_me(self) -> Dict[str, Any]:
        """Fetch the authenticated user.

        GET /v1/me
        """
        return await self._get("/me")
