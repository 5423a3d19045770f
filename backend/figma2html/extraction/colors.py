"""Figma color helpers."""

from __future__ import annotations

import math
from typing import Any, Mapping


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def _hex_channel(channel: float) -> str:
    scaled = channel * 255
    if not math.isfinite(scaled):
        return "00"
    return f"{round_half_up(scaled):02X}"


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert Figma RGB channels (0-1 range) to an uppercase ``#RRGGBB`` string.

    Channels are not clamped: 1.2 becomes ``132`` (306) rather than ``FF``.
    NaN and infinite channels are written as ``00``.
    """
    return "#" + "".join(_hex_channel(channel) for channel in (r, g, b))


def _channel(color: Mapping[str, Any], key: str) -> float:
    value = color.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    return value


def color_to_hex(color: Mapping[str, Any]) -> str:
    """Convert a Figma ``{r, g, b, a}`` dict to hex, ignoring alpha.

    Missing, non-numeric or non-finite channels count as 0.
    """
    return rgb_to_hex(_channel(color, "r"), _channel(color, "g"), _channel(color, "b"))
