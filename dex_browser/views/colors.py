from __future__ import annotations

from typing import Dict, Sequence

from plotly.colors import hex_to_rgb, qualitative

# d3.schemeCategory10 followed by d3.schemeSet3
PALETTE = list(qualitative.D3) + list(qualitative.Set3)


def category_colors(keys: Sequence[str], offset: int = 0) -> Dict[str, str]:
    """Stable key -> colour mapping; keys beyond the palette wrap around."""
    return {key: PALETTE[(i + offset) % len(PALETTE)] for i, key in enumerate(keys)}


def step_color(index: int) -> str:
    return qualitative.D3[index % len(qualitative.D3)]


def text_color_for(background: str) -> str:
    """Black or white, whichever reads better on `background` (hex or rgb())."""
    if background.startswith("rgb"):
        r, g, b = (int(float(c)) for c in background[background.index("(") + 1:-1].split(",")[:3])
    else:
        r, g, b = hex_to_rgb(background)
    luminance = 0.2126 * r / 255 + 0.7152 * g / 255 + 0.0722 * b / 255
    return "#000000" if luminance > 0.5 else "#FFFFFF"
