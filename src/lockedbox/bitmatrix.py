from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

WORD_BITS = 64


def _low_mask(nbits: int) -> np.uint64:
    return np.uint64((1 << nbits) - 1)


def pack_rows(bits: NDArray[np.bool_], n_words: int) -> NDArray[np.uint64]:
    """Pack a (rows, cols) bool array into (rows, n_words) uint64 words.

    Bit j of a row lands in word j // 64 at position j % 64.
    """
    rows, cols = bits.shape
    assert cols <= n_words * WORD_BITS, "not enough words for the columns"
    padded = np.zeros((rows, n_words * WORD_BITS), dtype=bool)
    padded[:, :cols] = bits
    packed = np.packbits(padded, axis=1, bitorder="little")
    return packed.view("<u8").astype(np.uint64)


class BitMatrix:
    """Matrix over GF(2) whose rows are packed into uint64 words.

    Row operations (swap, XOR) touch ceil(cols / 64) words per row, which is
    what makes elimination on a few thousand unknowns practical.
    """

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Expected a positive shape, got {(rows, cols)}")
        self.rows = int(rows)
        self.cols = int(cols)
        self.n_words = (self.cols + WORD_BITS - 1) // WORD_BITS
        self.words = np.zeros((self.rows, self.n_words), dtype=np.uint64)

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    @staticmethod
    def from_dense(bits) -> "BitMatrix":
        bits = np.asarray(bits, dtype=bool)
        if bits.ndim != 2:
            raise ValueError(f"Expected a 2D array, got shape {bits.shape}")
        matrix = BitMatrix(*bits.shape)
        matrix.words[:] = pack_rows(bits, matrix.n_words)
        return matrix

    def to_dense(self) -> NDArray[np.bool_]:
        as_bytes = self.words.astype("<u8").view(np.uint8)
        bits = np.unpackbits(as_bytes, axis=1, bitorder="little")
        return bits[:, : self.cols].astype(bool)

    def copy(self) -> "BitMatrix":
        other = BitMatrix(self.rows, self.cols)
        other.words[:] = self.words
        return other

    def _locate(self, j: int) -> tuple[int, np.uint64]:
        if not 0 <= j < self.cols:
            raise IndexError(f"Column {j} out of range for {self.cols} columns")
        word, bit = divmod(j, WORD_BITS)
        return word, np.uint64(bit)

    def get(self, i: int, j: int) -> bool:
        word, bit = self._locate(j)
        return bool((self.words[i, word] >> bit) & np.uint64(1))

    def set(self, i: int, j: int, value: bool) -> None:
        word, bit = self._locate(j)
        mask = np.uint64(1) << bit
        if value:
            self.words[i, word] |= mask
        else:
            self.words[i, word] &= ~mask

    def flip(self, i: int, j: int) -> None:
        word, bit = self._locate(j)
        self.words[i, word] ^= np.uint64(1) << bit

    def column(self, j: int) -> NDArray[np.bool_]:
        """Bit j of every row, as a bool vector of length ``rows``."""
        word, bit = self._locate(j)
        return ((self.words[:, word] >> bit) & np.uint64(1)).astype(bool)

    def swap_rows(self, a: int, b: int) -> None:
        if a != b:
            self.words[[a, b]] = self.words[[b, a]]

    def xor_row_into(self, targets: NDArray[np.bool_], src: int) -> None:
        """XOR row ``src`` into every row selected by the bool mask ``targets``."""
        assert not targets[src], "source row must not be one of the targets"
        self.words[targets] ^= self.words[src]

    def zero_rows(self, stop: int) -> NDArray[np.bool_]:
        """Rows whose first ``stop`` bits are all zero."""
        assert 0 <= stop <= self.cols
        full, rem = divmod(stop, WORD_BITS)
        zero = ~np.any(self.words[:, :full], axis=1)
        if rem:
            zero &= (self.words[:, full] & _low_mask(rem)) == 0
        return zero

    def row_is_zero(self, i: int, stop: int) -> bool:
        assert 0 <= stop <= self.cols
        full, rem = divmod(stop, WORD_BITS)
        if np.any(self.words[i, :full]):
            return False
        return not rem or not (self.words[i, full] & _low_mask(rem))

    def __eq__(self, other) -> bool:
        if not isinstance(other, BitMatrix):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self.words, other.words)
        )

    def __repr__(self):
        return f"BitMatrix(rows={self.rows}, cols={self.cols})"
