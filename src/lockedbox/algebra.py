from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from .bitmatrix import BitMatrix, pack_rows


def build_effect_matrix(y_size: int, x_size: int) -> NDArray[np.bool_]:
    """Return the N x N effect matrix over GF(2) for the row/column toggle.

    Entry (i, j) is set iff pressing cell j flips cell i. The matrix is
    symmetric: cells i and j share a row or a column, or i == j.
    """
    N = y_size * x_size
    rows, cols = np.divmod(np.arange(N), x_size)
    same_row = rows[:, None] == rows[None, :]
    same_col = cols[:, None] == cols[None, :]
    return np.eye(N, dtype=bool) ^ same_row ^ same_col


def build_system(y_size: int, x_size: int, state) -> BitMatrix:
    """Return the augmented matrix [A | b] for the given box state.

    Row idx = row * x_size + col states that the presses landing on that cell
    must have the parity of its current value.
    """
    state = np.asarray(state, dtype=bool)
    if state.shape != (y_size, x_size):
        raise ValueError(
            f"Expected state of shape {(y_size, x_size)}, got {state.shape}"
        )
    N = y_size * x_size
    system = BitMatrix(N, N + 1)

    # one grid row at a time keeps the dense scratch at x_size x (N + 1)
    block = np.zeros((x_size, N + 1), dtype=bool)
    for row in range(y_size):
        block[:] = False
        for col in range(x_size):
            idx = row * x_size + col
            coeff = block[col]
            coeff[idx] = True  # self
            coeff[row * x_size : (row + 1) * x_size] ^= True  # row
            coeff[col:N:x_size] ^= True  # column
            coeff[N] = state[row, col]
        system.words[row * x_size : (row + 1) * x_size] = pack_rows(
            block, system.n_words
        )
    return system


def gf2_eliminate(system: BitMatrix, n_unknowns: int) -> list[int]:
    """Reduce ``system`` in place to RREF over GF(2).

    Columns past ``n_unknowns`` (the right-hand side) ride along with every
    row operation. Returns the pivot columns; pivot k sits in row k.
    """
    assert 0 < n_unknowns <= system.cols
    m = system.rows
    row = 0
    pivcols: list[int] = []
    for col in range(n_unknowns):
        # find a pivot in/under current row
        below = np.flatnonzero(system.column(col)[row:])
        if below.size == 0:
            continue
        system.swap_rows(row, row + int(below[0]))
        # eliminate ALL other rows (Gauss-Jordan)
        hits = system.column(col)
        hits[row] = False
        if hits.any():
            system.xor_row_into(hits, row)
        pivcols.append(col)
        row += 1
        if row == m:
            break
    return pivcols


def gf2_extract_solution(
    system: BitMatrix, pivcols: list[int], n_unknowns: int
) -> Tuple[NDArray[np.bool_], bool]:
    """Read one solution out of a reduced system.

    Returns:
        press: pivot unknowns take their row's right-hand side, free unknowns 0
        consistent: False if some row reads 0 = 1
    """
    assert n_unknowns < system.cols, "system has no right-hand side column"
    rhs = system.column(n_unknowns)
    press = np.zeros(n_unknowns, dtype=bool)
    press[pivcols] = rhs[: len(pivcols)]
    contradictions = system.zero_rows(n_unknowns) & rhs
    return press, not bool(contradictions.any())


def gf2_rank(system: BitMatrix, n_unknowns: int) -> int:
    """Rank of the first ``n_unknowns`` columns; ``system`` is left untouched."""
    return len(gf2_eliminate(system.copy(), n_unknowns))


def is_reachable(y_size: int, x_size: int, state) -> bool:
    """Whether some set of presses turns ``state`` all-false."""
    system = build_system(y_size, x_size, state)
    N = y_size * x_size
    pivcols = gf2_eliminate(system, N)
    _, consistent = gf2_extract_solution(system, pivcols, N)
    return consistent
