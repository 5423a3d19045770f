"""Figma node-tree extraction: pruning, color conversion, compaction."""

from .colors import color_to_hex, rgb_to_hex, round_half_up
from .compact import prune_empty, to_compact_json
from .extractor import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_PAGES,
    DEFAULT_SKIP_NODE_TYPES,
    FigmaExtractor,
    extract_essential_data,
    extract_node,
    resolve_document,
    summarize,
)
from .models import ExtractedNode, ExtractionResult, ExtractionSummary

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_PAGES",
    "DEFAULT_SKIP_NODE_TYPES",
    "ExtractedNode",
    "ExtractionResult",
    "ExtractionSummary",
    "FigmaExtractor",
    "color_to_hex",
    "extract_essential_data",
    "extract_node",
    "prune_empty",
    "resolve_document",
    "rgb_to_hex",
    "round_half_up",
    "summarize",
    "to_compact_json",
]
