"""Figma file endpoints and HTML conversion.

Proxies the Figma REST API for the signed-in user, caches file responses on
disk, and runs the extraction + LLM pipeline that turns a cached file into
HTML.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from figma2html.extraction import extract_essential_data
from figma2html.integrations.figma_client import FigmaClient, FigmaClientError
from figma2html.llm.html_generator import HtmlGenerationError, HtmlGenerator
from figma2html.storage import DesignStorage, StorageError

from app.dependencies import get_access_token, get_html_generator, get_storage

logger = logging.getLogger("figma2html.routes.file")

router = APIRouter(prefix="/file/figma", tags=["file"])

# Figma statuses passed through to the caller; anything else is a 500
_PASSTHROUGH_STATUSES = (401, 403, 404, 429)


# --- Schemas ---


class HtmlConversionResponse(BaseModel):
    """Response for POST /file/figma/{file_key}/html."""

    success: bool = True
    file_key: str
    file_name: str
    html_file: str = Field(..., description="Stored HTML file name")
    summary: Dict[str, int]
    original_size: int = Field(..., description="Raw Figma JSON size in characters")
    compact_size: int = Field(..., description="Compact extraction size in characters")
    html: str


class HtmlFileList(BaseModel):
    files: List[str] = Field(default_factory=list)


# --- Helpers ---


def _figma_error(action: str, error: FigmaClientError) -> HTTPException:
    logger.error(f"{action} error: {error}")
    status = error.status_code if error.status_code in _PASSTHROUGH_STATUSES else 500
    return HTTPException(status_code=status, detail=f"Failed to {action}: {error}")


async def _fetch_and_cache_file(
    token: str,
    file_key: str,
    storage: DesignStorage,
    **options: Any,
) -> Dict[str, Any]:
    client = FigmaClient(token)
    try:
        data = await client.get_file(file_key, **options)
    except FigmaClientError as e:
        raise _figma_error("get file", e)
    finally:
        await client.close()

    storage.save_complete_json(data, file_key)
    return data


def _read_cached_file(storage: DesignStorage, file_key: str) -> Dict[str, Any]:
    try:
        return storage.read_complete_json(file_key)
    except StorageError as e:
        raise HTTPException(status_code=404, detail=str(e))


# --- Stored HTML (declared before /{file_key} so "html" is not a file key) ---


@router.get("/html", response_model=HtmlFileList)
async def list_html_files(storage: DesignStorage = Depends(get_storage)):
    return HtmlFileList(files=storage.list_html_files())


@router.get("/html/{file_name}")
async def get_html_file(file_name: str, storage: DesignStorage = Depends(get_storage)):
    try:
        html = storage.read_html(file_name)
    except StorageError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "file_name": file_name, "html": html}


# --- Figma proxy ---


@router.get("/{file_key}")
async def get_file(
    file_key: str,
    version: Optional[str] = None,
    ids: Optional[str] = None,
    depth: Optional[int] = None,
    geometry: Optional[str] = None,
    plugin_data: Optional[str] = None,
    branch_data: bool = False,
    token: str = Depends(get_access_token),
    storage: DesignStorage = Depends(get_storage),
):
    """Fetch a file and cache the complete response under its key."""
    data = await _fetch_and_cache_file(
        token,
        file_key,
        storage,
        version=version,
        ids=ids,
        depth=depth,
        geometry=geometry,
        plugin_data=plugin_data,
        branch_data=branch_data,
    )
    return {"success": True, "file": data}


@router.get("/{file_key}/nodes")
async def get_file_nodes(
    file_key: str,
    ids: Optional[str] = None,
    version: Optional[str] = None,
    depth: Optional[int] = None,
    geometry: Optional[str] = None,
    plugin_data: Optional[str] = None,
    token: str = Depends(get_access_token),
):
    if not ids:
        raise HTTPException(status_code=400, detail="Node IDs (ids) query parameter is required")

    client = FigmaClient(token)
    try:
        nodes = await client.get_file_nodes(
            file_key,
            ids,
            version=version,
            depth=depth,
            geometry=geometry,
            plugin_data=plugin_data,
        )
    except FigmaClientError as e:
        raise _figma_error("get file nodes", e)
    finally:
        await client.close()

    return {"success": True, "nodes": nodes}


@router.get("/{file_key}/images")
async def get_file_images(
    file_key: str,
    ids: Optional[str] = None,
    scale: Optional[float] = None,
    fmt: Optional[str] = Query(None, alias="format", pattern="^(jpg|png|svg|pdf)$"),
    svg_outline_text: bool = False,
    svg_include_id: bool = False,
    svg_include_node_id: bool = False,
    svg_simplify_stroke: bool = False,
    contents_only: bool = True,
    use_absolute_bounds: bool = False,
    version: Optional[str] = None,
    token: str = Depends(get_access_token),
):
    if not ids:
        raise HTTPException(status_code=400, detail="Node IDs (ids) query parameter is required")

    client = FigmaClient(token)
    try:
        images = await client.get_images(
            file_key,
            ids,
            scale=scale,
            fmt=fmt,
            svg_outline_text=svg_outline_text,
            svg_include_id=svg_include_id,
            svg_include_node_id=svg_include_node_id,
            svg_simplify_stroke=svg_simplify_stroke,
            contents_only=contents_only,
            use_absolute_bounds=use_absolute_bounds,
            version=version,
        )
    except FigmaClientError as e:
        raise _figma_error("get file images", e)
    finally:
        await client.close()

    return {"success": True, "images": images}


@router.get("/{file_key}/image-fills")
async def get_file_image_fills(file_key: str, token: str = Depends(get_access_token)):
    client = FigmaClient(token)
    try:
        image_fills = await client.get_image_fills(file_key)
    except FigmaClientError as e:
        raise _figma_error("get file image fills", e)
    finally:
        await client.close()

    return {"success": True, "imageFills": image_fills}


# --- Extraction / conversion ---


@router.get("/{file_key}/extracted")
async def get_extracted(file_key: str, storage: DesignStorage = Depends(get_storage)):
    """Extraction result for a previously fetched file."""
    data = _read_cached_file(storage, file_key)
    extracted = extract_essential_data(data)
    storage.save_minimized_json(extracted, file_key)
    return {"success": True, "extracted": extracted}


@router.post("/{file_key}/html", response_model=HtmlConversionResponse)
async def convert_to_html(
    file_key: str,
    refresh: bool = False,
    token: str = Depends(get_access_token),
    storage: DesignStorage = Depends(get_storage),
    generator: HtmlGenerator = Depends(get_html_generator),
):
    """Generate HTML for a file, fetching it first unless cached."""
    if refresh or not storage.complete_json_exists(file_key):
        data = await _fetch_and_cache_file(token, file_key, storage)
    else:
        data = _read_cached_file(storage, file_key)

    try:
        result = await generator.convert(data)
    except HtmlGenerationError as e:
        logger.error(f"HTML conversion failed for {file_key}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate HTML: {e}")

    extracted = result["extracted"]
    storage.save_minimized_json(extracted, file_key)
    html_file = storage.save_html(result["html"], extracted["fileName"])

    return HtmlConversionResponse(
        file_key=file_key,
        file_name=extracted["fileName"],
        html_file=html_file,
        summary=dict(extracted["summary"]),
        original_size=result["original_size"],
        compact_size=result["compact_size"],
        html=result["html"],
    )
