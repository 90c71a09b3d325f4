from __future__ import annotations

import numpy as np


def presses_used(press) -> int:
    return int(np.count_nonzero(press))


def opened(still_locked: bool) -> int:
    return int(not still_locked)


def cells_flipped_by_press(y_size: int, x_size: int) -> int:
    # whole row plus whole column, shared cell counted once
    return y_size + x_size - 1


def success_rate(rows) -> float:
    rows = list(rows)
    if not rows:
        return 0.0
    return sum(int(r["opened"]) for r in rows) / len(rows)
