"""Render a month of the heatmap calendar to a PNG with Pillow."""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageDraw

from heatmap import HeatmapFilter, cell_style, month_grid, today_string
from models import HabitEntry

logger = logging.getLogger(__name__)

CELL_SIZE = 36  # pixels
CELL_GAP = 6
PADDING = 16
RADIUS = 8

LIGHT_BACKGROUND = (250, 250, 249, 255)
DARK_BACKGROUND = (28, 25, 23, 255)
EMPTY_LIGHT = (231, 229, 228, 255)  # days with no entry
EMPTY_DARK = (41, 37, 36, 255)


def _dimensions(weeks: int) -> Tuple[int, int]:
    width = 7 * CELL_SIZE + 6 * CELL_GAP + 2 * PADDING
    height = weeks * CELL_SIZE + (weeks - 1) * CELL_GAP + 2 * PADDING
    return width, height


def _fill(style, is_dark: bool):
    """RGBA fill for a cell, or None for blank future days."""
    alpha = int(round(255 * style.opacity))
    if style.color is None:
        if not style.clickable:
            return None
        base = EMPTY_DARK if is_dark else EMPTY_LIGHT
        return base[:3] + (alpha,)
    return style.color.rgb() + (alpha,)


def render_month(entries_by_date: Dict[str, HabitEntry], year: int, month: int,
                 is_dark: bool = False, active_boolean_habit_count: int = 0,
                 flt: Optional[HeatmapFilter] = None,
                 today: Optional[str] = None) -> Image.Image:
    today = today or today_string()
    weeks = month_grid(year, month)
    background = DARK_BACKGROUND if is_dark else LIGHT_BACKGROUND
    image = Image.new("RGBA", _dimensions(len(weeks)), background)
    overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    for row, week in enumerate(weeks):
        for col, day in enumerate(week):
            if day is None:
                continue
            style = cell_style(day, entries_by_date.get(day), today, is_dark,
                               active_boolean_habit_count, flt)
            fill = _fill(style, is_dark)
            if fill is None:
                continue
            x = PADDING + col * (CELL_SIZE + CELL_GAP)
            y = PADDING + row * (CELL_SIZE + CELL_GAP)
            draw.rounded_rectangle([x, y, x + CELL_SIZE, y + CELL_SIZE], radius=RADIUS, fill=fill)

    return Image.alpha_composite(image, overlay)


def save_month_png(path: Union[str, Path], entries_by_date: Dict[str, HabitEntry], year: int,
                   month: int, **kwargs) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    render_month(entries_by_date, year, month, **kwargs).convert("RGB").save(path, "PNG")
    logger.info("Heatmap for %04d-%02d written to %s", year, month, path)
    return path
