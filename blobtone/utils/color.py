"""Color validation / conversion over matplotlib's color parser."""

from __future__ import annotations

from matplotlib import colors as mcolors

TRANSPARENT = "transparent"


def is_color(value: str, *, allow_transparent: bool = False) -> bool:
    """True for any CSS-ish color matplotlib understands ("#000", "black", ...)."""
    if not isinstance(value, str):
        return False
    if value.strip().lower() in (TRANSPARENT, "none"):
        return allow_transparent
    return bool(mcolors.is_color_like(value))


def to_rgba8(value: str) -> tuple[int, int, int, int]:
    """Color string → 8-bit RGBA. ``transparent`` maps to (0, 0, 0, 0)."""
    if value.strip().lower() in (TRANSPARENT, "none"):
        return (0, 0, 0, 0)
    r, g, b, a = mcolors.to_rgba(value)
    return (round(r * 255), round(g * 255), round(b * 255), round(a * 255))
