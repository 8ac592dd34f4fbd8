"""Grid storage and boundary rules for the falling sand automata."""

import numpy as np
from typing import Dict, List

from .cell import CellState, Coord
from .errors import InvalidDimensions, OutOfBounds


class CellGrid:
    """
    Row-major 2D grid of cell materials.

    Coordinate convention: (row, col) with row 0 at the top and rows
    increasing downwards, so gravity points towards larger rows.
    Every coordinate outside the grid reads as WALL. That wall is
    virtual: it is never stored and can never be written.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise InvalidDimensions(width, height)
        self.width = width
        self.height = height
        self.cells = np.full((height, width), CellState.EMPTY, dtype=np.uint8)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get(self, row: int, col: int) -> CellState:
        """Return the material at (row, col), WALL when out of range."""
        if not self.in_bounds(row, col):
            return CellState.WALL
        return CellState(int(self.cells[row, col]))

    def set(self, row: int, col: int, state: CellState) -> None:
        """Write a material. Raises OutOfBounds for the virtual wall."""
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col)
        if not CellState(state).is_storable:
            raise OutOfBounds(row, col, "WALL is reserved for the border")
        self.cells[row, col] = state

    def swap(self, a: Coord, b: Coord) -> None:
        """Exchange the contents of two in-range cells."""
        cells = self.cells
        cells[a.row, a.col], cells[b.row, b.col] = (
            cells[b.row, b.col], cells[a.row, a.col]
        )

    def paint_square(self, center_x: int, center_y: int, radius: int,
                     state: CellState = CellState.DIRT) -> int:
        """
        Fill the half-open square [cy-r, cy+r) x [cx-r, cx+r) with ``state``.

        Cells falling outside the grid are skipped. Returns the number
        of cells written.
        """
        if not CellState(state).is_storable:
            raise OutOfBounds(center_y, center_x,
                              "WALL is reserved for the border")
        # Clamp to grid boundaries
        row_start = max(0, center_y - radius)
        row_end = min(self.height, center_y + radius)
        col_start = max(0, center_x - radius)
        col_end = min(self.width, center_x + radius)
        if row_start >= row_end or col_start >= col_end:
            return 0
        self.cells[row_start:row_end, col_start:col_end] = state
        return (row_end - row_start) * (col_end - col_start)

    def neighbours(self, coord: Coord) -> List[Coord]:
        """Moore neighbourhood of ``coord`` clipped to the grid, row-major."""
        result = []
        for row in range(max(coord.row - 1, 0),
                         min(coord.row + 2, self.height)):
            for col in range(max(coord.col - 1, 0),
                             min(coord.col + 2, self.width)):
                if row != coord.row or col != coord.col:
                    result.append(Coord(row, col))
        return result

    def neighbours_all(self, coord: Coord, state: CellState) -> bool:
        """Whether every in-grid neighbour of ``coord`` holds ``state``."""
        return all(self.cells[n.row, n.col] == state
                   for n in self.neighbours(coord))

    def is_water_surface(self, coord: Coord) -> bool:
        """
        A cell sits on a water surface when some neighbour in the row
        above is not water and some neighbour in the row below is water.
        """
        above = coord.row - 1
        below = coord.row + 1
        cols = range(max(coord.col - 1, 0), min(coord.col + 2, self.width))

        found_non_water = above >= 0 and any(
            self.cells[above, c] != CellState.WATER for c in cols
        )
        found_water = below < self.height and any(
            self.cells[below, c] == CellState.WATER for c in cols
        )
        return found_non_water and found_water

    def count(self, state: CellState) -> int:
        return int(np.count_nonzero(self.cells == state))

    def counts(self) -> Dict[str, int]:
        """Number of cells holding each storable material."""
        return {
            s.name.lower(): self.count(s) for s in CellState if s.is_storable
        }
