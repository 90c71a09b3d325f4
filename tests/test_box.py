from __future__ import annotations

import numpy as np
import pytest

from lockedbox.box import SecureBox
from lockedbox.errors import InvalidDimensions
from lockedbox.evaluation.metrics import cells_flipped_by_press

SIZES = ((1, 1), (1, 4), (3, 1), (2, 3), (4, 4), (5, 7))


def test_new_box_is_unlocked() -> None:
    box = SecureBox(3, 4)
    assert box.get_state().shape == (3, 4)
    assert not box.is_locked()
    assert box.count_locked() == 0


@pytest.mark.parametrize(("y_size", "x_size"), SIZES)
def test_toggle_flips_row_and_column(y_size: int, x_size: int) -> None:
    for row in range(y_size):
        for col in range(x_size):
            box = SecureBox(y_size, x_size)
            box.toggle(row, col)
            state = box.get_state()
            assert state[row, col]
            assert state[row, :].all()
            assert state[:, col].all()
            assert box.count_locked() == cells_flipped_by_press(y_size, x_size)
            assert box.count_locked() == (x_size - 1) + (y_size - 1) + 1


@pytest.mark.parametrize(("y_size", "x_size"), SIZES)
def test_toggle_is_involution(fx_rng: np.random.Generator, y_size: int, x_size: int) -> None:
    box = SecureBox(y_size, x_size, fx_rng.uniform(size=(y_size, x_size)) < 0.5)
    before = box.get_state()
    row, col = int(fx_rng.integers(y_size)), int(fx_rng.integers(x_size))
    box.toggle(row, col)
    box.toggle(row, col)
    assert np.array_equal(box.get_state(), before)


def test_toggle_out_of_range() -> None:
    box = SecureBox(2, 3)
    with pytest.raises(IndexError):
        box.toggle(2, 0)
    with pytest.raises(IndexError):
        box.toggle(0, -1)


def test_state_is_copied() -> None:
    grid = np.zeros((2, 2), dtype=bool)
    box = SecureBox(2, 2, grid)
    grid[0, 0] = True
    assert not box.is_locked()

    snapshot = box.read_state()
    snapshot[1, 1] = True
    assert not box.is_locked()


def test_bad_shape() -> None:
    with pytest.raises(ValueError, match=r"Expected state of shape"):
        SecureBox(2, 2, np.zeros((3, 2), dtype=bool))
    with pytest.raises(InvalidDimensions):
        SecureBox(0, 2)


def test_shuffle_uses_given_rng() -> None:
    a = SecureBox(4, 5)
    b = SecureBox(4, 5)
    n_a = a.shuffle(np.random.default_rng(7))
    n_b = b.shuffle(np.random.default_rng(7))
    assert n_a == n_b
    assert np.array_equal(a.get_state(), b.get_state())


def test_shuffle_zero_toggles(fx_rng: np.random.Generator) -> None:
    box = SecureBox(3, 3)
    assert box.shuffle(fx_rng, max_toggles=0) == 0
    assert not box.is_locked()


def test_str() -> None:
    box = SecureBox(2, 3)
    box.toggle(0, 0)
    assert str(box) == "111\n100"
    assert repr(box) == "SecureBox(2x3, locked=4)"
