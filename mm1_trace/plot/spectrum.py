"""
ASCII spectrum plot.

Renders a pixel spectrum as a fixed-size scatter chart, one sampled bin
per column and one band of counts per row:

      1234 |      x   x
       617 |   x   xx  x
         0 |xxx x       xxxx
           +----------------

The plot only scales by the min/max of the data; no validation is done.
"""

from typing import List, Optional, Sequence

import numpy as np


COLS = 70
ROWS = 30

AXIS_INDENT = ' ' * 9


def _series(values: Optional[Sequence[int]]) -> Optional[np.ndarray]:
    if values is None:
        return None
    return np.asarray(values, dtype=np.int64)


def plot_spectrum(accepted: Optional[Sequence[int]],
                  rejected: Optional[Sequence[int]] = None,
                  cols: int = COLS,
                  rows: int = ROWS) -> List[str]:
    """
    Render accepted (and optionally rejected) bin counts as text lines.

    Columns sample bin c * x_unit for c in 1..cols, where
    x_unit = bins // cols. Row r covers counts
    [(r - 1) * y_unit + min, r * y_unit + min) with
    y_unit = (max - min) // (rows - 1); the top row is open above.
    Accepted bins plot as 'x' and rejected-only bins as '.'.

    Args:
        accepted: Accepted event bin counts, or None
        rejected: Rejected event bin counts, or None
        cols: Plot width in columns
        rows: Plot height in rows

    Returns:
        Plot lines without trailing newlines; empty when there is no data.
    """
    acc = _series(accepted)
    rej = _series(rejected)

    present = [s for s in (acc, rej) if s is not None and s.size > 0]
    if not present:
        return []

    a_min = int(min(s.min() for s in present))
    a_max = int(max(s.max() for s in present))
    size = max(s.size for s in present)

    x_unit = size // cols
    y_unit = (a_max - a_min) // (rows - 1) if rows > 1 else 0

    # Fewer bins than columns: one bin per column, the rest stay empty
    step = x_unit or 1

    def sample(series: Optional[np.ndarray], col: int) -> Optional[int]:
        idx = col * step
        if series is None or idx >= series.size:
            return None
        return int(series[idx])

    def band(y_bot: int, y_top: Optional[int]) -> str:
        dots = []
        for col in range(1, cols + 1):
            dot = ' '
            for series, mark in ((acc, 'x'), (rej, '.')):
                value = sample(series, col)
                if value is None:
                    continue
                if value >= y_bot and (y_top is None or value < y_top):
                    dot = mark
                    break
            dots.append(dot)
        return f" {y_bot:7d} |" + ''.join(dots)

    lines = []
    if y_unit == 0:
        lines.append(band(a_min, None))
    else:
        for r in range(rows, 0, -1):
            y_top = r * y_unit + a_min
            y_bot = y_top - y_unit
            lines.append(band(y_bot, None if r == rows else y_top))

    lines.append(AXIS_INDENT + '+' + '-' * cols)
    return lines
