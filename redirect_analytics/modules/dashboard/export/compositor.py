from __future__ import annotations

import io
import math
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from redirect_analytics.modules.dashboard.domain.errors import (
    NoExportableSurfacesError,
    UnsupportedExportError,
)
from redirect_analytics.modules.dashboard.export.charts import ChartSurface


TITLE_BAND_HEIGHT = 30
DEFAULT_BACKGROUND = "#ffffff"
TITLE_COLOR = "#000000"

EXPORT_PRESETS = {
    "small": (400, 300),
    "medium": (800, 600),
    "large": (1200, 900),
    "hd": (1920, 1080),
    "square": (800, 800),
    "wide": (1200, 600),
}


class ChartLayout(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    GRID = "grid"


def parse_layout(value: "ChartLayout | str") -> ChartLayout:
    try:
        return ChartLayout(value)
    except ValueError:
        raise UnsupportedExportError(f"Unsupported chart layout: {value}") from None


def grid_shape(count: int) -> Tuple[int, int]:
    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    return cols, rows


def _band(surface: ChartSurface) -> int:
    return TITLE_BAND_HEIGHT if surface.title else 0


def canvas_extent(surfaces: Sequence[ChartSurface], layout: ChartLayout) -> Tuple[int, int]:
    """
    Size of the combined canvas for valid ``surfaces``.

    Each titled surface is given a title band above it. In a grid every
    cell is as large as the largest surface, plus a band if any surface has
    a title.
    """
    sizes = [(surface.image.width, surface.image.height + _band(surface)) for surface in surfaces]
    if layout is ChartLayout.HORIZONTAL:
        return sum(w for w, _ in sizes), max(h for _, h in sizes)
    if layout is ChartLayout.VERTICAL:
        return max(w for w, _ in sizes), sum(h for _, h in sizes)
    cols, rows = grid_shape(len(surfaces))
    return cols * _cell_width(surfaces), rows * _cell_height(surfaces)


def _cell_width(surfaces: Sequence[ChartSurface]) -> int:
    return max(surface.image.width for surface in surfaces)


def _cell_height(surfaces: Sequence[ChartSurface]) -> int:
    band = TITLE_BAND_HEIGHT if any(surface.title for surface in surfaces) else 0
    return max(surface.image.height for surface in surfaces) + band


def _positions(surfaces: Sequence[ChartSurface], layout: ChartLayout) -> List[Tuple[int, int]]:
    positions: List[Tuple[int, int]] = []
    if layout is ChartLayout.GRID:
        cols, _rows = grid_shape(len(surfaces))
        cell_w, cell_h = _cell_width(surfaces), _cell_height(surfaces)
        for index in range(len(surfaces)):
            positions.append(((index % cols) * cell_w, (index // cols) * cell_h))
        return positions

    x = y = 0
    for surface in surfaces:
        positions.append((x, y))
        if layout is ChartLayout.HORIZONTAL:
            x += surface.image.width
        else:
            y += surface.image.height + _band(surface)
    return positions


def _draw_title(draw: ImageDraw.ImageDraw, title: str, left: int, top: int, width: int) -> None:
    font = ImageFont.load_default()
    bbox = draw.textbbox((0, 0), title, font=font)
    text_w, text_h = bbox[2] - bbox[0], bbox[3] - bbox[1]
    x = left + max(0, (width - text_w) // 2) - bbox[0]
    y = top + max(0, (TITLE_BAND_HEIGHT - text_h) // 2) - bbox[1]
    draw.text((x, y), title, fill=TITLE_COLOR, font=font)


def _png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def compose_image(
    surfaces: Sequence[ChartSurface],
    layout: "ChartLayout | str" = ChartLayout.VERTICAL,
    background: str = DEFAULT_BACKGROUND,
) -> Image.Image:
    """
    Lay several chart surfaces out on one opaque canvas.

    Invalid surfaces (missing image or zero size) are dropped first.

    Raises:
        NoExportableSurfacesError: If no valid surface remains
        UnsupportedExportError: If the layout is unknown
    """
    layout = parse_layout(layout)
    valid = [surface for surface in surfaces if surface is not None and surface.is_valid]
    if not valid:
        raise NoExportableSurfacesError()

    width, height = canvas_extent(valid, layout)
    canvas = Image.new("RGB", (width, height), background)
    draw = ImageDraw.Draw(canvas)

    for surface, (left, top) in zip(valid, _positions(valid, layout)):
        band = _band(surface)
        if surface.title:
            _draw_title(draw, surface.title, left, top, surface.image.width)
        rgba = surface.image.convert("RGBA")
        canvas.paste(rgba, (left, top + band), mask=rgba)

    return canvas


def compose(
    surfaces: Sequence[ChartSurface],
    layout: "ChartLayout | str" = ChartLayout.VERTICAL,
    background: str = DEFAULT_BACKGROUND,
) -> bytes:
    return _png_bytes(compose_image(surfaces, layout, background))


def export_surface(
    surface: ChartSurface,
    background: str = DEFAULT_BACKGROUND,
    size: Optional[Tuple[int, int]] = None,
) -> bytes:
    """
    Flatten one chart onto an opaque background, optionally rescaled.

    Args:
        surface: Rendered chart
        background: Fill colour behind transparent pixels
        size: Target (width, height) in pixels, e.g. one of EXPORT_PRESETS

    Returns:
        PNG bytes
    """
    if surface is None or not surface.is_valid:
        raise NoExportableSurfacesError("Chart has invalid dimensions")

    image = surface.image.convert("RGBA")
    if size is not None:
        width, height = size
        if width < 1 or height < 1:
            raise UnsupportedExportError(f"Invalid export size: {width}x{height}")
        image = image.resize((width, height), Image.LANCZOS)

    canvas = Image.new("RGB", image.size, background)
    canvas.paste(image, (0, 0), mask=image)
    return _png_bytes(canvas)
