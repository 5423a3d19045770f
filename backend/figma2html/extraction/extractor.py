"""Figma node-tree extraction.

Walks a raw Figma document (GET /v1/files/:key response) and produces a
pruned, parallel tree that keeps only what an LLM needs to rebuild the design
as HTML/CSS: geometry, text, paints, layout, typography, borders, corners,
effects and constraints. Hex colors are computed once here so downstream
consumers never convert RGB floats themselves.

Output nodes are sparse: a key is present only when the source node carried a
meaningful (non-default) value for it.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set


from .colors import color_to_hex, round_half_up
from .models import (
    Effect,
    ExtractedNode,
    ExtractionResult,
    ExtractionSummary,
    GradientStop,
    Paint,
    Stroke,
)

logger = logging.getLogger("figma2html.extraction")

# Complex vector geometry and non-visual scaffolding a text-only consumer
# cannot reconstruct. Dropped together with their subtree.
DEFAULT_SKIP_NODE_TYPES = frozenset({
    "VECTOR",
    "BOOLEAN_OPERATION",
    "STAR",
    "POLYGON",
    "ELLIPSE",
    "REGULAR_POLYGON",
    "SLICE",
    "CONNECTOR",
    "WASHI_TAPE",
})

FRAME_LIKE_TYPES = ("FRAME", "COMPONENT", "INSTANCE")

FILL_TYPES = ("SOLID", "GRADIENT_LINEAR", "GRADIENT_RADIAL")
_GRADIENT_KINDS = {"GRADIENT_LINEAR": "LINEAR", "GRADIENT_RADIAL": "RADIAL"}

_BOUNDS_KEYS = ("x", "y", "width", "height")

# Copied only when layoutMode is set
_AUTO_LAYOUT_FIELDS = (
    "paddingLeft",
    "paddingRight",
    "paddingTop",
    "paddingBottom",
    "itemSpacing",
    "counterAxisAlignItems",
    "primaryAxisSizingMode",
)

# Copied whenever present
_LAYOUT_FIELDS = (
    "layoutSizingHorizontal",
    "layoutSizingVertical",
    "layoutAlign",
    "layoutGrow",
    "layoutWrap",
    "primaryAxisAlignItems",
    "counterAxisSizingMode",
)

_TEXT_STYLE_FIELDS = (
    "fontSize",
    "fontFamily",
    "fontWeight",
    "textAlignHorizontal",
    "textAlignVertical",
    "letterSpacing",
    "lineHeightPx",
    "textAutoResize",
)

_EFFECT_FIELDS = ("type", "visible", "radius", "color", "offset", "spread")

# Recursion ceiling (pages are depth 0) and number of pages kept
DEFAULT_MAX_DEPTH = 10
DEFAULT_MAX_PAGES = 3

MAX_FILLS = 1
MAX_STROKES = 1
MAX_EFFECTS = 3


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _number(value: Any) -> float:
    return value if _is_number(value) else 0


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _is_visible(entry: Mapping[str, Any]) -> bool:
    return entry.get("visible") is not False


# ---------------------------------------------------------------------------
# Per-field extraction
# ---------------------------------------------------------------------------


def _copy_bounds(box: Mapping[str, Any], out: Dict[str, Any]) -> None:
    for key in _BOUNDS_KEYS:
        value = box.get(key)
        if _is_number(value):
            out[key] = round_half_up(value)


def _extract_geometry(node: Mapping[str, Any], out: Dict[str, Any]) -> None:
    """Resolve position/size from the first available source (no merging)."""
    for source in ("absoluteBoundingBox", "absoluteRenderBounds"):
        box = node.get(source)
        if isinstance(box, Mapping):
            _copy_bounds(box, out)
            return

    if node.get("x") is not None and node.get("y") is not None:
        _copy_bounds(node, out)


def _paint_candidates(node: Mapping[str, Any]) -> List[Any]:
    """Merge the two paint sources: ``fills`` first, then ``background``."""
    return _as_list(node.get("fills")) + _as_list(node.get("background"))


def _extract_gradient_stop(stop: Any) -> Optional[GradientStop]:
    if not isinstance(stop, Mapping) or not isinstance(stop.get("color"), Mapping):
        return None
    color = dict(stop["color"])
    return {"color": color, "hex": color_to_hex(color), "position": stop.get("position")}


def _extract_paint(paint: Mapping[str, Any]) -> Optional[Paint]:
    paint_type = paint.get("type")

    if paint_type == "SOLID":
        if not isinstance(paint.get("color"), Mapping):
            return None
        color = dict(paint["color"])
        solid: Paint = {"type": paint_type, "color": color}
        if paint.get("opacity") is not None:
            solid["opacity"] = paint["opacity"]
        solid["hex"] = color_to_hex(color)
        return solid

    stops = paint.get("gradientStops")
    if not isinstance(stops, list):
        return None
    converted = [_extract_gradient_stop(stop) for stop in stops]
    return {
        "type": paint_type,
        "gradientType": _GRADIENT_KINDS[paint_type],
        "gradientStops": [stop for stop in converted if stop is not None],
    }


def _extract_fills(node: Mapping[str, Any]) -> List[Paint]:
    fills: List[Paint] = []
    for paint in _paint_candidates(node):
        if not isinstance(paint, Mapping) or not _is_visible(paint):
            continue
        if paint.get("type") not in FILL_TYPES:
            continue
        extracted = _extract_paint(paint)
        if extracted is not None:
            fills.append(extracted)
        if len(fills) >= MAX_FILLS:
            break
    return fills


def _has_visible_background(color: Mapping[str, Any]) -> bool:
    """Fully transparent black (Figma's default) carries no information."""
    return (
        _number(color.get("a")) > 0
        or _number(color.get("r")) != 0
        or _number(color.get("g")) != 0
        or _number(color.get("b")) != 0
    )


def _copy_present(source: Mapping[str, Any], keys: Iterable[str], out: Dict[str, Any]) -> None:
    """Copy each key independently; 0 and False are values, None is absence."""
    for key in keys:
        if source.get(key) is not None:
            out[key] = source[key]


def _extract_strokes(node: Mapping[str, Any]) -> List[Stroke]:
    strokes: List[Stroke] = []
    for stroke in _as_list(node.get("strokes")):
        if not isinstance(stroke, Mapping) or not _is_visible(stroke):
            continue
        if stroke.get("type") != "SOLID" or not isinstance(stroke.get("color"), Mapping):
            continue
        color = dict(stroke["color"])
        strokes.append({"type": "SOLID", "color": color, "hex": color_to_hex(color)})
        if len(strokes) >= MAX_STROKES:
            break
    return strokes


def _extract_corners(node: Mapping[str, Any], out: Dict[str, Any]) -> None:
    radii = node.get("rectangleCornerRadii")
    if isinstance(radii, (list, tuple)) and len(radii) >= 4 and all(
        _is_number(r) for r in radii[:4]
    ):
        # [topLeft, topRight, bottomRight, bottomLeft]
        out["cornerRadii"] = [round_half_up(r) for r in radii[:4]]
    elif _is_number(node.get("cornerRadius")):
        out["cornerRadius"] = round_half_up(node["cornerRadius"])


def _extract_effects(node: Mapping[str, Any]) -> List[Effect]:
    effects: List[Effect] = []
    for effect in _as_list(node.get("effects")):
        if not isinstance(effect, Mapping) or not _is_visible(effect):
            continue
        mapped: Effect = {}
        _copy_present(effect, _EFFECT_FIELDS, mapped)
        effects.append(mapped)
        if len(effects) >= MAX_EFFECTS:
            break
    return effects


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------


class FigmaExtractor:
    """Reduce raw Figma node trees to LLM-ready projections.

    Args:
        skip_types: Node types dropped together with their subtree.
        max_depth: Recursion ceiling used by extract_essential_data.
        max_pages: Number of document children kept as pages.
    """

    def __init__(
        self,
        skip_types: Iterable[str] = DEFAULT_SKIP_NODE_TYPES,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_pages: int = DEFAULT_MAX_PAGES,
    ):
        self.skip_types = frozenset(skip_types)
        self.max_depth = max_depth
        self.max_pages = max_pages

    def should_skip(self, node_type: Any) -> bool:
        return isinstance(node_type, str) and node_type in self.skip_types

    def extract_node(
        self,
        node: Any,
        max_depth: Optional[int] = None,
        current_depth: int = 0,
    ) -> Optional[ExtractedNode]:
        """Extract one node and its descendants.

        Returns None for non-mapping input, nodes deeper than ``max_depth``,
        and skipped types. Any other node is returned, even when only its
        identity fields could be filled.
        """
        if max_depth is None:
            max_depth = self.max_depth
        return self._extract(node, max_depth, current_depth, set())

    def _extract(
        self,
        node: Any,
        max_depth: int,
        current_depth: int,
        ancestors: Set[int],
    ) -> Optional[ExtractedNode]:
        if not isinstance(node, Mapping):
            return None
        if current_depth > max_depth:
            return None
        if self.should_skip(node.get("type")):
            return None
        # A node that contains itself would otherwise recurse up to max_depth
        if id(node) in ancestors:
            return None

        out: Dict[str, Any] = {
            "id": node.get("id"),
            "type": node.get("type"),
            "name": node.get("name"),
        }

        _extract_geometry(node, out)

        if isinstance(node.get("characters"), str):
            out["characters"] = node["characters"]

        fills = _extract_fills(node)
        if fills:
            out["fills"] = fills

        background = node.get("backgroundColor")
        if isinstance(background, Mapping) and _has_visible_background(background):
            out["backgroundColor"] = dict(background)
            out["backgroundColorHex"] = color_to_hex(background)

        if node.get("layoutMode"):
            out["layoutMode"] = node["layoutMode"]
            _copy_present(node, _AUTO_LAYOUT_FIELDS, out)

        _copy_present(node, _LAYOUT_FIELDS, out)

        style = node.get("style")
        if isinstance(style, Mapping):
            _copy_present(style, _TEXT_STYLE_FIELDS, out)

        strokes = _extract_strokes(node)
        if strokes:
            out["strokes"] = strokes
            _copy_present(node, ("strokeWeight", "strokeAlign"), out)

        _extract_corners(node, out)

        if node.get("clipsContent") is not None:
            out["clipsContent"] = node["clipsContent"]

        if node.get("opacity") is not None and node["opacity"] != 1:
            out["opacity"] = node["opacity"]

        if node.get("rotation") is not None and node["rotation"] != 0:
            out["rotation"] = node["rotation"]

        effects = _extract_effects(node)
        if effects:
            out["effects"] = effects

        constraints = node.get("constraints")
        if isinstance(constraints, Mapping):
            out["constraints"] = {}
            _copy_present(constraints, ("vertical", "horizontal"), out["constraints"])

        children = node.get("children")
        if isinstance(children, list) and children and current_depth < max_depth:
            ancestors.add(id(node))
            try:
                extracted_children = [
                    self._extract(child, max_depth, current_depth + 1, ancestors)
                    for child in children
                ]
            finally:
                ancestors.discard(id(node))
            out["children"] = [c for c in extracted_children if c is not None]

        return out  # type: ignore[return-value]

    def extract_essential_data(self, figma_file_data: Any) -> ExtractionResult:
        """Extract pages, canvas background and summary from a file response.

        Accepts ``{"file": {"document": ...}}``, ``{"document": ...}`` or a bare
        DOCUMENT node. Unrecognized shapes are treated as the document itself,
        which usually yields an empty ``pages`` list rather than an error.
        """
        document = resolve_document(figma_file_data)
        top_level = _as_list(document.get("children")) if isinstance(document, Mapping) else []
        if not top_level:
            logger.warning("No children found in Figma document")

        pages: List[ExtractedNode] = []
        for page in top_level[: self.max_pages]:
            extracted = self.extract_node(page, self.max_depth)
            if extracted is None:
                name = page.get("name") if isinstance(page, Mapping) else None
                page_type = page.get("type") if isinstance(page, Mapping) else None
                logger.warning(f"Failed to extract page: {name} (type: {page_type})")
                continue
            pages.append(extracted)

        file_name = None
        if isinstance(figma_file_data, Mapping):
            file_name = figma_file_data.get("name")

        result: ExtractionResult = {
            "fileName": file_name or "Untitled",
            "pages": pages,
            "summary": summarize(pages),
        }

        # Sourced from the raw first child, not from the extracted page
        first = top_level[0] if top_level else None
        if isinstance(first, Mapping) and first.get("backgroundColor") is not None:
            result["canvasBackground"] = first["backgroundColor"]

        return result


def resolve_document(figma_file_data: Any) -> Any:
    """Normalize the accepted response shapes to the DOCUMENT node."""
    if not isinstance(figma_file_data, Mapping):
        logger.warning(f"Figma data is not an object: {type(figma_file_data).__name__}")
        return {}

    wrapped = figma_file_data.get("file")
    if isinstance(wrapped, Mapping) and wrapped.get("document"):
        return wrapped["document"]
    if figma_file_data.get("document"):
        return figma_file_data["document"]
    if figma_file_data.get("type") == "DOCUMENT":
        return figma_file_data

    logger.warning(
        f"No document found in Figma data, keys: {list(figma_file_data.keys())}"
    )
    return figma_file_data


def summarize(pages: List[ExtractedNode]) -> ExtractionSummary:
    """Count frame-like, text and rectangle nodes across the pruned pages."""
    summary: ExtractionSummary = {
        "totalPages": len(pages),
        "totalFrames": 0,
        "totalTextNodes": 0,
        "totalRectangles": 0,
    }

    def _count(node: ExtractedNode) -> None:
        node_type = node.get("type")
        if node_type in FRAME_LIKE_TYPES:
            summary["totalFrames"] += 1
        elif node_type == "TEXT":
            summary["totalTextNodes"] += 1
        elif node_type == "RECTANGLE":
            summary["totalRectangles"] += 1
        for child in node.get("children", []):
            _count(child)

    for page in pages:
        _count(page)
    return summary


_default_extractor = FigmaExtractor()


def extract_node(
    node: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    current_depth: int = 0,
) -> Optional[ExtractedNode]:
    """Extract a node with the default skip-set."""
    return _default_extractor.extract_node(node, max_depth, current_depth)


def extract_essential_data(figma_file_data: Any) -> ExtractionResult:
    """Extract a file response with the default extractor."""
    return _default_extractor.extract_essential_data(figma_file_data)
