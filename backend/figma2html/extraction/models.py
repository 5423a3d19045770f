"""Typed shapes for extraction output.

Every structure is a plain dict at runtime so results stay JSON-serializable.
Sparse records use ``total=False``: a missing key means "no value", never a
default.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict

RGBA = Dict[str, float]


class GradientStop(TypedDict):
    color: RGBA
    hex: str
    position: float


class Paint(TypedDict, total=False):
    type: str
    color: RGBA
    opacity: float
    hex: str
    gradientType: str  # "LINEAR" | "RADIAL"
    gradientStops: List[GradientStop]


class Stroke(TypedDict):
    type: str
    color: RGBA
    hex: str


class Effect(TypedDict, total=False):
    type: str
    visible: bool
    radius: float
    color: RGBA
    offset: Dict[str, float]
    spread: float


class Constraints(TypedDict, total=False):
    vertical: str
    horizontal: str


class _NodeIdentity(TypedDict):
    id: Any
    type: Any
    name: Any


class ExtractedNode(_NodeIdentity, total=False):
    # Geometry
    x: int
    y: int
    width: int
    height: int

    characters: str

    fills: List[Paint]
    backgroundColor: RGBA
    backgroundColorHex: str

    # Auto-layout (gated on layoutMode)
    layoutMode: str
    paddingLeft: float
    paddingRight: float
    paddingTop: float
    paddingBottom: float
    itemSpacing: float
    counterAxisAlignItems: str
    primaryAxisSizingMode: str

    # Layout (ungated)
    layoutSizingHorizontal: str
    layoutSizingVertical: str
    layoutAlign: str
    layoutGrow: float
    layoutWrap: str
    primaryAxisAlignItems: str
    counterAxisSizingMode: str

    # Typography
    fontSize: float
    fontFamily: str
    fontWeight: float
    textAlignHorizontal: str
    textAlignVertical: str
    letterSpacing: float
    lineHeightPx: float
    textAutoResize: str

    strokes: List[Stroke]
    strokeWeight: float
    strokeAlign: str

    cornerRadius: int
    cornerRadii: List[int]  # [topLeft, topRight, bottomRight, bottomLeft]

    clipsContent: bool
    opacity: float
    rotation: float
    effects: List[Effect]
    constraints: Constraints

    children: List["ExtractedNode"]


class ExtractionSummary(TypedDict):
    totalPages: int
    totalFrames: int
    totalTextNodes: int
    totalRectangles: int


class _ExtractionResultBase(TypedDict):
    fileName: str
    pages: List[ExtractedNode]
    summary: ExtractionSummary


class ExtractionResult(_ExtractionResultBase, total=False):
    canvasBackground: Optional[RGBA]
