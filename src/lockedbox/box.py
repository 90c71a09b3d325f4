from __future__ import annotations

import numpy as np

from .errors import InvalidDimensions


class SecureBox:
    """Grid of lock cells (True = locked) with the row-and-column toggle."""

    def __init__(self, y_size: int, x_size: int, state: np.ndarray | None = None):
        if y_size < 1 or x_size < 1:
            raise InvalidDimensions(
                f"Box needs at least one row and one column, got {y_size}x{x_size}"
            )
        self.y_size = int(y_size)
        self.x_size = int(x_size)
        if state is None:
            self.state = np.zeros((self.y_size, self.x_size), dtype=bool)
        else:
            state = np.asarray(state)
            if state.shape != (self.y_size, self.x_size):
                raise ValueError(
                    f"Expected state of shape {(self.y_size, self.x_size)}, got {state.shape}"
                )
            self.state = state.astype(bool, copy=True)

    def toggle(self, row: int, col: int) -> None:
        """Flip (row, col), then its whole row, then its whole column.

        The pressed cell is flipped three times, so every cell sharing the
        row or the column ends up flipped exactly once.
        """
        if not (0 <= row < self.y_size and 0 <= col < self.x_size):
            raise IndexError(
                f"Cell {(row, col)} outside a {self.y_size}x{self.x_size} box"
            )
        self.state[row, col] ^= True
        self.state[row, :] ^= True
        self.state[:, col] ^= True

    def is_locked(self) -> bool:
        return bool(self.state.any())

    def get_state(self) -> np.ndarray:
        return self.state.copy()

    read_state = get_state

    def shuffle(self, rng: np.random.Generator, max_toggles: int = 1000) -> int:
        """Apply a random number (below ``max_toggles``) of random toggles.

        Returns how many toggles were applied. The result is always reachable
        from the all-unlocked box.
        """
        n_toggles = int(rng.integers(max_toggles)) if max_toggles > 0 else 0
        for _ in range(n_toggles):
            self.toggle(int(rng.integers(self.y_size)), int(rng.integers(self.x_size)))
        return n_toggles

    def copy(self) -> "SecureBox":
        return SecureBox(self.y_size, self.x_size, self.state)

    def to_flat(self) -> np.ndarray:
        return self.state.reshape(-1)

    def count_locked(self) -> int:
        return int(self.state.sum())

    def __repr__(self):
        return f"SecureBox({self.y_size}x{self.x_size}, locked={self.count_locked()})"

    def __str__(self) -> str:
        return "\n".join(
            "".join("1" if cell else "0" for cell in row) for row in self.state
        )
