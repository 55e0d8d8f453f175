"""
Fixed chart palettes.

Colours are assigned by position in the ordered category list, cycling
through the palette, so the same ordered categories always get the same
colours.
"""
from __future__ import annotations

from typing import Sequence, Tuple

PIE_PALETTE: Tuple[str, ...] = (
    "#3b82f6",  # blue
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#8b5cf6",  # violet
    "#ec4899",  # pink
    "#06b6d4",  # cyan
    "#22c55e",  # green
    "#a855f7",  # purple
    "#fb923c",  # orange
    "#0ea5e9",  # sky
    "#f43f5e",  # rose
)

BAR_PALETTE: Tuple[str, ...] = PIE_PALETTE[:8]

LINE_COLOR = "#3b82f6"
COMPANION_ALPHA = 0.4


def assign_colors(count: int, palette: Sequence[str] = PIE_PALETTE) -> Tuple[str, ...]:
    if not palette:
        raise ValueError("Palette must contain at least one colour")
    return tuple(palette[index % len(palette)] for index in range(max(0, count)))


def with_alpha(color: str, alpha: float) -> str:
    """Return an ``#rrggbbaa`` variant of a ``#rrggbb`` colour."""
    alpha = min(1.0, max(0.0, alpha))
    return f"{color[:7]}{round(alpha * 255):02x}"
