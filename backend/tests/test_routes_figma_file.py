"""Tests for Figma file API routes (app/routes/figma_file.py).

Covers:
- GET /file/figma/{file_key} (fetch + cache)
- GET /file/figma/{file_key}/nodes, /images, /image-fills (proxy)
- GET /file/figma/{file_key}/extracted (extraction of cached file)
- POST /file/figma/{file_key}/html (LLM conversion)
- GET /file/figma/html, /file/figma/html/{file_name} (stored HTML)
- GET /health
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient
from langchain_core.language_models import FakeListChatModel

from app.dependencies import get_html_generator
from app.main import app
from figma2html.integrations.figma_client import FigmaClientError
from figma2html.llm.html_generator import HtmlGenerator

AUTH = {"Authorization": "Bearer test-token"}
COOKIE_AUTH = {"Cookie": "figma_access_token=cookie-token"}

FIGMA_FILE = {
    "name": "Marketing Site",
    "document": {
        "id": "0:0",
        "type": "DOCUMENT",
        "name": "Document",
        "children": [
            {
                "id": "0:1",
                "type": "CANVAS",
                "name": "Home",
                "backgroundColor": {"r": 0.9, "g": 0.9, "b": 0.9, "a": 1},
                "children": [
                    {
                        "id": "1:2",
                        "type": "TEXT",
                        "name": "Title",
                        "characters": "Welcome",
                        "absoluteBoundingBox": {"x": 10, "y": 20, "width": 300, "height": 40},
                    },
                    {"id": "1:3", "type": "VECTOR", "name": "Icon"},
                ],
            }
        ],
    },
}


@pytest.fixture
def figma_client():
    """Patch the FigmaClient used by the file routes; yields the instance mock."""
    with patch("app.routes.figma_file.FigmaClient") as cls:
        instance = MagicMock()
        instance.get_file = AsyncMock(return_value=FIGMA_FILE)
        instance.get_file_nodes = AsyncMock(return_value={"nodes": {"1:2": {}}})
        instance.get_images = AsyncMock(return_value={"images": {"1:2": "https://img"}})
        instance.get_image_fills = AsyncMock(
            return_value={"meta": {"images": {"ref": "https://fill"}}}
        )
        instance.close = AsyncMock()
        cls.return_value = instance
        yield instance


@pytest.fixture
def fake_llm_generator():
    generator = HtmlGenerator(
        provider="gemini",
        llm=FakeListChatModel(responses=["<!DOCTYPE html><html><body>Welcome</body></html>"]),
    )
    app.dependency_overrides[get_html_generator] = lambda: generator
    return generator


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class TestAccessToken:
    @pytest.mark.asyncio
    async def test_missing_token_returns_401(self, client: AsyncClient, figma_client):
        resp = await client.get("/file/figma/abc")
        assert resp.status_code == 401
        figma_client.get_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cookie_token_accepted(self, client: AsyncClient, figma_client):
        with patch("app.routes.figma_file.FigmaClient") as cls:
            cls.return_value = figma_client
            resp = await client.get("/file/figma/abc", headers=COOKIE_AUTH)
        assert resp.status_code == 200
        cls.assert_called_once_with("cookie-token")


# ---------------------------------------------------------------------------
# GET /file/figma/{file_key}
# ---------------------------------------------------------------------------


class TestGetFile:
    @pytest.mark.asyncio
    async def test_fetches_and_caches(self, client: AsyncClient, figma_client, storage):
        resp = await client.get("/file/figma/abc?depth=2", headers=AUTH)

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["file"]["name"] == "Marketing Site"
        assert storage.read_complete_json("abc") == FIGMA_FILE
        assert figma_client.get_file.await_args.kwargs["depth"] == 2
        figma_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, expected", [(404, 404), (403, 403), (429, 429), (502, 500)])
    async def test_figma_errors_mapped(self, client: AsyncClient, figma_client, status, expected):
        figma_client.get_file.side_effect = FigmaClientError("boom", status_code=status)

        resp = await client.get("/file/figma/abc", headers=AUTH)

        assert resp.status_code == expected
        assert resp.json()["detail"] == "Failed to get file: boom"
        figma_client.close.assert_awaited_once()


# ---------------------------------------------------------------------------
# Proxy endpoints
# ---------------------------------------------------------------------------


class TestProxyEndpoints:
    @pytest.mark.asyncio
    async def test_nodes_requires_ids(self, client: AsyncClient, figma_client):
        resp = await client.get("/file/figma/abc/nodes", headers=AUTH)
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_nodes(self, client: AsyncClient, figma_client):
        resp = await client.get("/file/figma/abc/nodes?ids=1:2", headers=AUTH)
        assert resp.status_code == 200
        assert resp.json()["nodes"] == {"nodes": {"1:2": {}}}
        assert figma_client.get_file_nodes.await_args.args == ("abc", "1:2")

    @pytest.mark.asyncio
    async def test_images_format_alias(self, client: AsyncClient, figma_client):
        resp = await client.get(
            "/file/figma/abc/images?ids=1:2&format=svg&scale=2", headers=AUTH
        )
        assert resp.status_code == 200
        assert resp.json()["images"]["images"] == {"1:2": "https://img"}
        kwargs = figma_client.get_images.await_args.kwargs
        assert kwargs["fmt"] == "svg"
        assert kwargs["scale"] == 2

    @pytest.mark.asyncio
    async def test_images_rejects_unknown_format(self, client: AsyncClient, figma_client):
        resp = await client.get("/file/figma/abc/images?ids=1:2&format=gif", headers=AUTH)
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_images_requires_ids(self, client: AsyncClient, figma_client):
        resp = await client.get("/file/figma/abc/images", headers=AUTH)
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_image_fills(self, client: AsyncClient, figma_client):
        resp = await client.get("/file/figma/abc/image-fills", headers=AUTH)
        assert resp.status_code == 200
        assert resp.json()["imageFills"]["meta"]["images"] == {"ref": "https://fill"}


# ---------------------------------------------------------------------------
# Extraction / conversion
# ---------------------------------------------------------------------------


class TestExtracted:
    @pytest.mark.asyncio
    async def test_not_cached_returns_404(self, client: AsyncClient):
        resp = await client.get("/file/figma/abc/extracted")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_extracts_cached_file(self, client: AsyncClient, storage):
        storage.save_complete_json(FIGMA_FILE, "abc")

        resp = await client.get("/file/figma/abc/extracted")

        assert resp.status_code == 200
        extracted = resp.json()["extracted"]
        assert extracted["fileName"] == "Marketing Site"
        assert extracted["summary"] == {
            "totalPages": 1,
            "totalFrames": 0,
            "totalTextNodes": 1,
            "totalRectangles": 0,
        }
        page = extracted["pages"][0]
        assert [c["id"] for c in page["children"]] == ["1:2"]
        assert page["children"][0]["characters"] == "Welcome"
        assert storage.read_minimized_json("abc") == extracted


class TestConvertToHtml:
    @pytest.mark.asyncio
    async def test_converts_and_stores(
        self, client: AsyncClient, figma_client, fake_llm_generator, storage
    ):
        resp = await client.post("/file/figma/abc/html", headers=AUTH)

        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["file_name"] == "Marketing Site"
        assert body["html"].startswith("<!DOCTYPE html>")
        assert body["summary"]["totalTextNodes"] == 1
        assert body["compact_size"] > 0
        assert body["html_file"].startswith("marketing_site_")
        assert storage.read_html(body["html_file"]) == body["html"]
        assert storage.minimized_json_exists("abc")

    @pytest.mark.asyncio
    async def test_uses_cached_file(
        self, client: AsyncClient, figma_client, fake_llm_generator, storage
    ):
        storage.save_complete_json(FIGMA_FILE, "abc")

        resp = await client.post("/file/figma/abc/html", headers=AUTH)

        assert resp.status_code == 200
        figma_client.get_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_refresh_refetches(
        self, client: AsyncClient, figma_client, fake_llm_generator, storage
    ):
        storage.save_complete_json({"name": "Stale", "document": {}}, "abc")

        resp = await client.post("/file/figma/abc/html?refresh=true", headers=AUTH)

        assert resp.status_code == 200
        figma_client.get_file.assert_awaited_once()
        assert storage.read_complete_json("abc") == FIGMA_FILE

    @pytest.mark.asyncio
    async def test_llm_failure_returns_500(self, client: AsyncClient, figma_client, storage):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("model overloaded"))
        app.dependency_overrides[get_html_generator] = lambda: HtmlGenerator(llm=llm)

        resp = await client.post("/file/figma/abc/html", headers=AUTH)

        assert resp.status_code == 500
        assert "model overloaded" in resp.json()["detail"]
        assert storage.list_html_files() == []

    @pytest.mark.asyncio
    async def test_unconfigured_llm_returns_503(self, client: AsyncClient, figma_client, monkeypatch):
        from figma2html import config

        monkeypatch.setattr(config, "LLM_PROVIDER", "openai")
        monkeypatch.setattr(config, "OPENAI_API_KEY", "")

        resp = await client.post("/file/figma/abc/html", headers=AUTH)

        assert resp.status_code == 503
        assert "OPENAI_API_KEY" in resp.json()["detail"]


# ---------------------------------------------------------------------------
# Stored HTML
# ---------------------------------------------------------------------------


class TestStoredHtml:
    @pytest.mark.asyncio
    async def test_list_empty(self, client: AsyncClient):
        resp = await client.get("/file/figma/html")
        assert resp.status_code == 200
        assert resp.json() == {"files": []}

    @pytest.mark.asyncio
    async def test_list_and_read(self, client: AsyncClient, storage):
        name = storage.save_html("<p>saved</p>", "Page")

        listed = await client.get("/file/figma/html")
        assert listed.json()["files"] == [name]

        resp = await client.get(f"/file/figma/html/{name}")
        assert resp.status_code == 200
        assert resp.json()["html"] == "<p>saved</p>"

    @pytest.mark.asyncio
    async def test_read_missing(self, client: AsyncClient):
        resp = await client.get("/file/figma/html/missing.html")
        assert resp.status_code == 404


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "message": "Server is running"}
