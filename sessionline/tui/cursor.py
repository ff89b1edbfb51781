"""Cursor arithmetic for redrawing a line that may wrap."""
from __future__ import annotations

import math


def rows_to_move_up(visible_width: int, columns: int) -> int:
    """Rows between the cursor and the start of the redraw region.

    ``visible_width`` is the width of the written line with all styling
    removed. One extra row covers the blank line written before the status.
    """
    if columns <= 0:
        columns = 1
    return 1 + math.ceil(max(visible_width, 0) / columns)


__all__ = ["rows_to_move_up"]
