from typing import Iterable, List

import numpy as np


class WaveState:
    """
    Wave class to track possible patterns for each cell
    """
    def __init__(self, width: int, height: int, num_patterns: int) -> None:
        """
        Initialize the wave with all patterns possible in all cells

        Args:
            width: Grid width
            height: Grid height
            num_patterns: Number of patterns in the catalog
        """
        self.width = width
        self.height = height
        self.num_patterns = num_patterns

        # Wave data: data[y, x, pattern] = True if pattern is possible at (y, x)
        self.data = np.ones((height, width, num_patterns), dtype=bool)

    @classmethod
    def from_data(cls, data: np.ndarray) -> "WaveState":
        """Wrap a copy of an existing (height, width, num_patterns) array"""
        height, width, num_patterns = data.shape
        wave = cls(width, height, num_patterns)
        wave.data = np.array(data, dtype=bool, copy=True)
        return wave

    def domain(self, x: int, y: int) -> List[int]:
        """Pattern IDs still possible at (x, y), ascending"""
        return np.flatnonzero(self.data[y, x]).tolist()

    def entropy(self, x: int, y: int) -> int:
        return int(np.count_nonzero(self.data[y, x]))

    def entropies(self) -> np.ndarray:
        """Domain sizes for the whole grid, shape (height, width)"""
        return np.sum(self.data, axis=2)

    def is_collapsed(self, x: int, y: int) -> bool:
        return self.entropy(x, y) == 1

    def is_fully_collapsed(self) -> bool:
        return bool(np.all(self.entropies() == 1))

    def has_contradiction(self) -> bool:
        return bool(np.any(self.entropies() == 0))

    def total_domain_size(self) -> int:
        return int(np.count_nonzero(self.data))

    def collapse(self, x: int, y: int, pattern_id: int) -> bool:
        """
        Commit cell (x, y) to a single pattern.

        Returns False, leaving the wave untouched, if the pattern is not
        in the cell's domain.
        """
        if not 0 <= pattern_id < self.num_patterns or not self.data[y, x, pattern_id]:
            return False
        self.data[y, x] = False
        self.data[y, x, pattern_id] = True
        return True

    def restrict(self, x: int, y: int, allowed: Iterable[int]) -> bool:
        """
        Intersect the domain of (x, y) with the allowed pattern IDs.

        Returns True if the domain shrank.
        """
        mask = np.zeros(self.num_patterns, dtype=bool)
        mask[list(allowed)] = True
        before = self.data[y, x].copy()
        self.data[y, x] &= mask
        return bool(np.any(before != self.data[y, x]))

    def seed_border(self, allowed: List[int]) -> None:
        """
        Restrict the outermost ring of cells to the allowed pattern IDs.
        No-op when the list is empty.
        """
        if not allowed or self.width == 0 or self.height == 0:
            return
        mask = np.zeros(self.num_patterns, dtype=bool)
        mask[allowed] = True
        self.data[0, :] &= mask
        self.data[-1, :] &= mask
        self.data[:, 0] &= mask
        self.data[:, -1] &= mask

    def copy(self) -> "WaveState":
        """Fully independent copy of the domain grid"""
        return WaveState.from_data(self.data)

    def __repr__(self) -> str:
        return f"WaveState(width={self.width}, height={self.height}, patterns={self.num_patterns})"
