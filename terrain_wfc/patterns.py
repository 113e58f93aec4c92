"""
Pattern learning for WFC.

Patterns are square windows cut from a sample grid. A catalog holds the
deduplicated patterns (plus their rotations) in discovery order, and the
pattern ID is the index into that order. Two patterns may sit next to each
other when the edge strips they would share are identical.
"""
from typing import Dict, Iterable, Iterator, List, Optional

import numpy as np
from numpy.typing import NDArray

from terrain_wfc.grid import Grid, Tile

# Constants for directions: up, right, down, left
UP, RIGHT, DOWN, LEFT = 0, 1, 2, 3
DIRECTIONS_X = np.array([0, 1, 0, -1])
DIRECTIONS_Y = np.array([-1, 0, 1, 0])
DIRECTION_NAMES = "URDL"


def get_opposite_direction(direction: int) -> int:
    """Get the opposite direction (0-3)"""
    return (direction + 2) % 4


class Pattern:
    """
    Immutable NxN block of tile values. Equality and hashing use the cell
    content, so two windows with the same tiles are the same pattern.
    """

    __slots__ = ("cells", "_key")

    def __init__(self, cells: NDArray) -> None:
        cells = np.array(cells, dtype=np.int8)
        if cells.ndim != 2 or cells.shape[0] != cells.shape[1]:
            raise ValueError(f"Pattern must be square, got shape {cells.shape}")
        cells.setflags(write=False)
        self.cells = cells
        self._key = (cells.shape[0], cells.tobytes())

    @property
    def size(self) -> int:
        return self.cells.shape[0]

    def center(self) -> Tile:
        c = self.size // 2
        return Tile(int(self.cells[c, c]))

    def rotated(self, k: int = 1) -> "Pattern":
        """Return this pattern rotated by k quarter turns"""
        return Pattern(np.rot90(self.cells, k))

    def is_uniform(self, tile: Tile) -> bool:
        return bool(np.all(self.cells == int(tile)))

    def edge(self, direction: int) -> NDArray:
        """The strip of cells facing the given direction"""
        if direction == UP:
            return self.cells[0, :]
        if direction == RIGHT:
            return self.cells[:, -1]
        if direction == DOWN:
            return self.cells[-1, :]
        return self.cells[:, 0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        rows = ["".join("#" if v == Tile.WALL else "." for v in row) for row in self.cells]
        return f"Pattern({'/'.join(rows)})"


def compatible(a: Pattern, b: Pattern, direction: int) -> bool:
    """
    True if pattern b may be placed next to pattern a in the given direction.

    For direction RIGHT the last column of a must equal the first column of b,
    and likewise for the other three directions.
    """
    return bool(np.array_equal(a.edge(direction), b.edge(get_opposite_direction(direction))))


def build_compatibility(patterns: List[Pattern]) -> NDArray:
    """
    Build the adjacency table for a list of patterns.

    Returns:
        np.ndarray: boolean array of shape (num_patterns, 4, num_patterns)
                    where table[a, d, b] == compatible(a, b, d)
    """
    num_patterns = len(patterns)
    table = np.zeros((num_patterns, 4, num_patterns), dtype=bool)
    if num_patterns == 0:
        return table

    edges = [np.stack([p.edge(d) for p in patterns]) for d in range(4)]

    # Only UP and RIGHT are compared; DOWN and LEFT are the transposed relation
    for direction in (UP, RIGHT):
        opposite = get_opposite_direction(direction)
        facing = edges[direction][:, None, :] == edges[opposite][None, :, :]
        table[:, direction, :] = facing.all(axis=2)
        table[:, opposite, :] = table[:, direction, :].T

    return table


class PatternCatalog:
    """
    Ordered, deduplicated list of patterns. A pattern's ID is its index.
    """

    def __init__(self, pattern_size: int) -> None:
        self.pattern_size = pattern_size
        self._patterns: List[Pattern] = []
        self._ids: Dict[Pattern, int] = {}
        self._compatibility: Optional[NDArray] = None

    @classmethod
    def extract(cls, sample: Grid, pattern_size: int) -> "PatternCatalog":
        """
        Learn patterns from a sample grid.

        Slides a pattern_size x pattern_size window over every top-left
        position in row-major order (no wrapping). Each window is added if
        new, followed by its three quarter-turn rotations if new.

        If the sample is too small to hold a single window, the catalog is
        seeded with one all-wall and one all-floor pattern instead.
        """
        if pattern_size < 1:
            raise ValueError(f"pattern_size must be >= 1, got {pattern_size}")

        catalog = cls(pattern_size)
        cells = sample.cells
        for y in range(sample.height - pattern_size + 1):
            for x in range(sample.width - pattern_size + 1):
                pattern = Pattern(cells[y:y + pattern_size, x:x + pattern_size])
                catalog.add(pattern)
                for k in (1, 2, 3):
                    catalog.add(pattern.rotated(k))

        if len(catalog) == 0:
            catalog.add(Pattern(np.full((pattern_size, pattern_size), int(Tile.WALL))))
            catalog.add(Pattern(np.full((pattern_size, pattern_size), int(Tile.FLOOR))))

        return catalog

    @classmethod
    def from_patterns(cls, patterns: Iterable) -> "PatternCatalog":
        """Build a catalog from arrays or Patterns, keeping first occurrences"""
        patterns = [p if isinstance(p, Pattern) else Pattern(p) for p in patterns]
        if not patterns:
            raise ValueError("at least one pattern is required")
        catalog = cls(patterns[0].size)
        for pattern in patterns:
            if pattern.size != catalog.pattern_size:
                raise ValueError(
                    f"mixed pattern sizes: {pattern.size} != {catalog.pattern_size}"
                )
            catalog.add(pattern)
        return catalog

    def add(self, pattern: Pattern) -> int:
        """Insert a pattern if it is new. Returns its ID either way."""
        pattern_id = self._ids.get(pattern)
        if pattern_id is None:
            pattern_id = len(self._patterns)
            self._patterns.append(pattern)
            self._ids[pattern] = pattern_id
            self._compatibility = None
        return pattern_id

    def index_of(self, pattern: Pattern) -> Optional[int]:
        return self._ids.get(pattern)

    def wall_pattern_ids(self) -> List[int]:
        """IDs of patterns made entirely of wall"""
        return [i for i, p in enumerate(self._patterns) if p.is_uniform(Tile.WALL)]

    @property
    def compatibility(self) -> NDArray:
        if self._compatibility is None:
            self._compatibility = build_compatibility(self._patterns)
        return self._compatibility

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)

    def __getitem__(self, pattern_id: int) -> Pattern:
        return self._patterns[pattern_id]

    def __repr__(self) -> str:
        return f"PatternCatalog(size={self.pattern_size}, patterns={len(self)})"
