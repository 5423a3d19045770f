"""Prompt text for the design-to-HTML conversion."""

from __future__ import annotations

HTML_SYSTEM_RULES = """You are an expert front-end developer. Rebuild the Figma design described by the JSON below as a single HTML5 document with embedded CSS.

Rules:
1. Return one complete document starting with <!DOCTYPE html>, with a viewport meta tag.
2. Use semantic elements (header, nav, main, section, footer) where the layer names suggest them.
3. Colors are pre-converted. Use every "hex" value as-is (fills, strokes, gradientStops, backgroundColorHex); never convert r/g/b floats yourself.
4. Gradients: gradientType LINEAR -> linear-gradient, RADIAL -> radial-gradient; each stop is "<hex> <position * 100>%".
5. Use canvasBackground or the page backgroundColorHex as the body background.
6. Position nodes absolutely from their x, y, width and height. The top-level frame is position: relative; coordinates are absolute on the canvas, so subtract the parent's x and y.
7. Frames with layoutMode use flexbox inside their box: HORIZONTAL -> row, VERTICAL -> column, itemSpacing -> gap, padding* -> padding.
8. TEXT nodes: render "characters" with fontFamily, fontSize, fontWeight, lineHeightPx, letterSpacing and textAlignHorizontal.
9. strokes + strokeWeight -> border; cornerRadius / cornerRadii [tl, tr, br, bl] -> border-radius; clipsContent -> overflow: hidden.
10. effects: DROP_SHADOW / INNER_SHADOW -> box-shadow, LAYER_BLUR -> filter: blur, BACKGROUND_BLUR -> backdrop-filter.
11. Return ONLY the HTML. No markdown fences, no explanations."""


def build_html_prompt(compact_json: str) -> str:
    """Embed the compacted extraction result into the conversion instructions."""
    return f"{HTML_SYSTEM_RULES}\n\nFigma JSON:\n{compact_json}"


CONNECTION_TEST_PROMPT = "Say 'Hello, the HTML generator is working!' in one sentence."
