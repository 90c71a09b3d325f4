from __future__ import annotations

import numpy as np
import pytest

from lockedbox.bitmatrix import BitMatrix


def test_shape_ng() -> None:
    with pytest.raises(ValueError, match=r"Expected a positive shape"):
        BitMatrix(0, 3)
    with pytest.raises(ValueError, match=r"Expected a 2D array"):
        BitMatrix.from_dense(np.zeros(4, dtype=bool))


def test_dense(fx_rng: np.random.Generator) -> None:
    # 130 columns spans three words
    bits = fx_rng.uniform(size=(7, 130)) < 0.5
    matrix = BitMatrix.from_dense(bits)
    assert matrix.shape == (7, 130)
    assert matrix.n_words == 3
    assert np.array_equal(matrix.to_dense(), bits)
    for j in (0, 63, 64, 129):
        assert np.array_equal(matrix.column(j), bits[:, j])


def test_get_set_flip() -> None:
    matrix = BitMatrix(2, 70)
    matrix.set(1, 65, True)
    assert matrix.get(1, 65)
    assert not matrix.get(0, 65)
    matrix.flip(1, 65)
    assert not matrix.get(1, 65)
    matrix.flip(0, 3)
    matrix.set(0, 3, False)
    assert not matrix.words.any()

    with pytest.raises(IndexError):
        matrix.get(0, 70)


def test_row_ops() -> None:
    bits = np.array(
        [
            [1, 0, 1, 1],
            [0, 1, 1, 0],
            [1, 1, 0, 0],
        ],
        dtype=bool,
    )
    matrix = BitMatrix.from_dense(bits)
    matrix.swap_rows(0, 2)
    assert np.array_equal(matrix.to_dense(), bits[[2, 1, 0]])

    matrix.xor_row_into(np.array([False, True, True]), 0)
    expected = np.array(
        [
            [1, 1, 0, 0],
            [1, 0, 1, 0],
            [0, 1, 1, 1],
        ],
        dtype=bool,
    )
    assert np.array_equal(matrix.to_dense(), expected)


def test_zero_rows() -> None:
    bits = np.zeros((3, 100), dtype=bool)
    bits[0, 99] = True
    bits[1, 10] = True
    matrix = BitMatrix.from_dense(bits)
    assert matrix.zero_rows(99).tolist() == [True, False, True]
    assert matrix.zero_rows(100).tolist() == [False, False, True]
    assert matrix.zero_rows(0).tolist() == [True, True, True]
    assert matrix.row_is_zero(0, 64)
    assert not matrix.row_is_zero(0, 100)
    assert not matrix.row_is_zero(1, 11)
    assert matrix.row_is_zero(1, 10)


def test_copy_is_independent() -> None:
    matrix = BitMatrix(2, 2)
    other = matrix.copy()
    other.set(0, 0, True)
    assert not matrix.get(0, 0)
    assert matrix != other
    other.set(0, 0, False)
    assert matrix == other
