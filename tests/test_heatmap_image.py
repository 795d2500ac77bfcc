from heatmap import HABIT_AXIS
from heatmap_image import CELL_GAP, CELL_SIZE, DARK_BACKGROUND, LIGHT_BACKGROUND, PADDING, render_month, save_month_png
from models import HabitEntry, HabitState


def _center(row, col):
    return (
        PADDING + col * (CELL_SIZE + CELL_GAP) + CELL_SIZE // 2,
        PADDING + row * (CELL_SIZE + CELL_GAP) + CELL_SIZE // 2,
    )


ENTRIES = {"2026-02-02": HabitEntry(date="2026-02-02", habits={"a": HabitState(True, False)})}


def test_render_month_paints_cells():
    image = render_month(ENTRIES, 2026, 2, active_boolean_habit_count=1, today="2026-02-15")
    # 2026-02-02 is the Monday of the second row
    assert image.getpixel(_center(1, 0))[:3] == HABIT_AXIS.color(1, False).rgb()
    # leading padding before Sunday the 1st stays background
    assert image.getpixel(_center(0, 0)) == LIGHT_BACKGROUND


def test_future_days_are_left_blank():
    image = render_month(ENTRIES, 2026, 2, is_dark=True, today="2026-02-01")
    assert image.getpixel(_center(1, 0)) == DARK_BACKGROUND


def test_save_month_png(tmp_path):
    path = save_month_png(tmp_path / "out" / "feb.png", ENTRIES, 2026, 2, today="2026-02-15")
    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
