from __future__ import annotations

import logging

import numpy as np

from .algebra import build_system, gf2_eliminate, gf2_extract_solution
from .box import SecureBox
from .config import MAX_CELLS, SolverConfig
from .errors import InvalidDimensions, StructuralAssumptionViolation

LOGGER = logging.getLogger(__name__)


def check_dimensions(y_size: int, x_size: int, max_cells: int = MAX_CELLS) -> None:
    if y_size < 1 or x_size < 1:
        raise InvalidDimensions(
            f"Box needs at least one row and one column, got {y_size}x{x_size}"
        )
    if y_size * x_size > max_cells:
        raise InvalidDimensions(
            f"{y_size}x{x_size} box has {y_size * x_size} cells, at most {max_cells} supported"
        )


def plan_presses(
    y_size: int, x_size: int, state, config: SolverConfig | None = None
) -> np.ndarray:
    """Return the press vector (row-major, length y_size * x_size) for ``state``.

    An unsolvable state is logged and answered with a best-effort plan, or
    raises StructuralAssumptionViolation when ``config.strict`` is set.
    """
    config = config or SolverConfig()
    check_dimensions(y_size, x_size, config.max_cells)
    N = y_size * x_size

    system = build_system(y_size, x_size, state)
    pivcols = gf2_eliminate(system, N)
    press, consistent = gf2_extract_solution(system, pivcols, N)
    LOGGER.debug(
        "Solved %dx%d box: rank %d of %d, %d presses",
        y_size,
        x_size,
        len(pivcols),
        N,
        int(press.sum()),
    )

    if not consistent:
        msg = f"No press set opens this {y_size}x{x_size} box (rank {len(pivcols)} of {N})"
        if config.strict:
            raise StructuralAssumptionViolation(msg)
        LOGGER.warning("%s; applying best-effort presses", msg)
    return press


def apply_presses(box: SecureBox, press) -> bool:
    """Toggle every cell marked in ``press`` and return whether the box is still locked."""
    press = np.asarray(press, dtype=bool)
    N = box.y_size * box.x_size
    if press.shape != (N,):
        raise ValueError(f"Expected press vector of shape {(N,)}, got {press.shape}")
    for idx in np.flatnonzero(press):
        row, col = divmod(int(idx), box.x_size)
        box.toggle(row, col)
    return box.is_locked()


def open_box(box: SecureBox, config: SolverConfig | None = None) -> bool:
    """Solve ``box`` in place. Returns True if it is still locked afterwards."""
    press = plan_presses(box.y_size, box.x_size, box.get_state(), config)
    still_locked = apply_presses(box, press)
    if still_locked:
        LOGGER.warning(
            "%dx%d box still locked after %d presses (%d cells set)",
            box.y_size,
            box.x_size,
            int(press.sum()),
            box.count_locked(),
        )
    return still_locked


def solve_and_open(
    y_size: int,
    x_size: int,
    rng: np.random.Generator | None = None,
    config: SolverConfig | None = None,
) -> bool:
    """Scramble a fresh ``y_size`` x ``x_size`` box with ``rng`` and open it.

    Returns False when the box ends up fully opened.
    """
    config = config or SolverConfig()
    check_dimensions(y_size, x_size, config.max_cells)
    rng = rng or np.random.default_rng()

    box = SecureBox(y_size, x_size)
    box.shuffle(rng)
    return open_box(box, config)
