import pytest

from sessionline.tui.cursor import rows_to_move_up


@pytest.mark.parametrize(
    ("width", "columns", "rows"),
    [(0, 80, 1), (1, 80, 2), (80, 80, 2), (81, 80, 3), (240, 80, 4)],
)
def test_rows_to_move_up(width, columns, rows):
    assert rows_to_move_up(width, columns) == rows


@pytest.mark.parametrize("columns", [0, -5])
def test_rows_to_move_up_clamps_invalid_width(columns):
    assert rows_to_move_up(7, columns) == rows_to_move_up(7, 1) == 8
