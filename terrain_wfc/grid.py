from enum import IntEnum
from typing import Callable, Iterator, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np
from numpy.typing import NDArray


class Tile(IntEnum):
    WALL = 0
    FLOOR = 1

    def is_wall(self) -> bool:
        return self is Tile.WALL

    def is_floor(self) -> bool:
        return self is Tile.FLOOR


# Characters used by Grid.__str__ and Grid.from_strings
TILE_CHARS = {Tile.WALL: "#", Tile.FLOOR: "."}
CHAR_TILES = {char: tile for tile, char in TILE_CHARS.items()}


class Grid:
    """
    2D grid of tiles. Cells are stored in a numpy array indexed [y, x],
    the same layout used for wave data.
    """

    def __init__(self, width: int, height: int, fill: Tile = Tile.WALL) -> None:
        self.width = width
        self.height = height
        self.cells = np.full((height, width), int(fill), dtype=np.int8)

    @classmethod
    def from_strings(cls, rows: Sequence[str]) -> "Grid":
        """
        Build a grid from text rows, '#' for wall and '.' for floor.
        Unknown characters are read as wall.
        """
        height = len(rows)
        width = max((len(row) for row in rows), default=0)
        grid = cls(width, height)
        for y, row in enumerate(rows):
            for x, char in enumerate(row):
                grid.set(x, y, CHAR_TILES.get(char, Tile.WALL))
        return grid

    @classmethod
    def from_array(cls, array: NDArray) -> "Grid":
        height, width = array.shape
        grid = cls(width, height)
        grid.cells[:, :] = array
        return grid

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[Tile]:
        if not self.in_bounds(x, y):
            return None
        return Tile(int(self.cells[y, x]))

    def set(self, x: int, y: int, tile: Tile) -> bool:
        if not self.in_bounds(x, y):
            return False
        self.cells[y, x] = int(tile)
        return True

    def fill(self, tile: Tile) -> None:
        self.cells[:, :] = int(tile)

    def fill_rect(self, x: int, y: int, w: int, h: int, tile: Tile) -> None:
        """Fill a rectangle, clipped to the grid bounds"""
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, self.width), min(y + h, self.height)
        if x0 < x1 and y0 < y1:
            self.cells[y0:y1, x0:x1] = int(tile)

    def count(self, predicate: Callable[[Tile], bool]) -> int:
        return sum(1 for _, _, tile in self.iter() if predicate(tile))

    def iter(self) -> Iterator[Tuple[int, int, Tile]]:
        """Yield (x, y, tile) in row-major order"""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y, Tile(int(self.cells[y, x]))

    def to_array(self) -> NDArray:
        return self.cells.copy()

    def to_strings(self) -> List[str]:
        return [
            "".join(TILE_CHARS[Tile(int(v))] for v in row)
            for row in self.cells
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.cells.shape == other.cells.shape and np.array_equal(self.cells, other.cells)

    def __str__(self) -> str:
        return "\n".join(self.to_strings())

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"


@runtime_checkable
class Algorithm(Protocol):
    """Protocol shared by every generator: fill a grid in place from a seed."""

    def generate(self, grid: Grid, seed: int):
        ...

    def name(self) -> str:
        ...
