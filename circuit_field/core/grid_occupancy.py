"""Grid cells and the bookkeeping of which ones are claimed by wires."""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .alea_prng import AleaPRNG


@dataclass(eq=False)
class Cell:
    """A grid position. Identity is the object itself; one per (x, y)."""

    x: int
    y: int
    available: bool = True

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)


def grid_dimensions(viewport_width: float, viewport_height: float, cell_size: float) -> Tuple[int, int]:
    """Grid size covering a viewport, with one extra cell on each axis."""
    width = math.ceil(viewport_width / cell_size) + 1
    height = math.ceil(viewport_height / cell_size) + 1
    return width, height


class GridOccupancy:
    """
    Cell grid plus the pool of cells still available for seeding wires.

    Only strictly interior cells ever enter the pool, so the outer ring
    of the grid is never claimed and wires stay clear of the edges.
    The pool supports O(1) uniform picks and removals by swapping the
    removed entry with the last one.
    """

    def __init__(self, width: int = 0, height: int = 0):
        self.width = 0
        self.height = 0
        self.cells: List[List[Cell]] = []
        self._pool: List[Cell] = []
        self._pool_index: Dict[Tuple[int, int], int] = {}
        if width and height:
            self.build(width, height)

    def build(self, width: int, height: int) -> None:
        """Allocate ``width x height`` fresh cells, all available."""
        if width < 1 or height < 1:
            raise ValueError(f"Grid must have cells, got {width}x{height}")

        self.width = width
        self.height = height
        self.cells = [[Cell(x, y) for y in range(height)] for x in range(width)]

        self._pool = [
            self.cells[x][y]
            for x in range(1, width - 1)
            for y in range(1, height - 1)
        ]
        self._pool_index = {cell.position: i for i, cell in enumerate(self._pool)}

    @property
    def available_count(self) -> int:
        return len(self._pool)

    def cell(self, x: int, y: int) -> Cell:
        return self.cells[x][y]

    def is_interior(self, x: int, y: int) -> bool:
        return 0 < x < self.width - 1 and 0 < y < self.height - 1

    def is_available(self, x: int, y: int) -> bool:
        """Availability of any in-bounds cell; False outside the grid."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        return self.cells[x][y].available

    def is_interior_and_available(self, x: int, y: int) -> bool:
        return self.is_interior(x, y) and self.cells[x][y].available

    def claim(self, cell: Cell) -> None:
        """Mark ``cell`` as taken by a wire and drop it from the pool."""
        if not cell.available:
            raise ValueError(f"Cell {cell.position} is already claimed")
        cell.available = False

        index = self._pool_index.pop(cell.position, None)
        if index is None:
            return
        last = self._pool.pop()
        if last is not cell:
            self._pool[index] = last
            self._pool_index[last.position] = index

    def pick_random_available(self, prng: AleaPRNG) -> Optional[Cell]:
        """Uniformly chosen available cell, or None when the pool is empty."""
        if not self._pool:
            return None
        return self._pool[prng.random_int(len(self._pool))]

    def claimed_cells(self) -> List[Cell]:
        return [cell for column in self.cells for cell in column if not cell.available]
