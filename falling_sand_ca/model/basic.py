"""Double-buffered gravity-only automaton."""

import numpy as np
from typing import Dict

from .cell import CellState
from .grid import CellGrid


class BasicAutomaton:
    """
    Single rule automaton: dirt falls one row into empty space.

    Every next state is derived from a read-only snapshot of the current
    grid and written into a separate pending buffer, which replaces the
    current buffer only after the whole grid has been evaluated. No cell
    can observe a neighbour's already-updated value within a tick, so no
    grain falls twice per tick and visitation order is irrelevant.
    """

    def __init__(self, width: int, height: int):
        self.grid = CellGrid(width, height)
        self.width = width
        self.height = height
        self.pending = self.grid.cells.copy()
        self.tick_count = 0
        self.last_tick_stats: Dict[str, int] = {
            'moves': 0, 'evaporated': 0, 'condensed': 0
        }

    def get(self, row: int, col: int) -> CellState:
        return self.grid.get(row, col)

    def set(self, row: int, col: int, state: CellState) -> None:
        # Outside a tick the current buffer is the active one, so writes
        # made between ticks survive the next commit.
        self.grid.set(row, col, state)

    def paint_square(self, center_x: int, center_y: int, radius: int,
                     state: CellState = CellState.DIRT) -> int:
        return self.grid.paint_square(center_x, center_y, radius, state)

    def _compute_next(self, current: np.ndarray, pending: np.ndarray) -> int:
        """Fill ``pending`` from ``current``; returns the number of falls."""
        pending[...] = current

        # falls[i, j]: dirt at row i lands on empty row i + 1. The bottom
        # row has the wall below it and is never a source.
        falls = (current[:-1] == CellState.DIRT) & (current[1:] == CellState.EMPTY)
        pending[:-1][falls] = CellState.EMPTY
        pending[1:][falls] = CellState.DIRT
        return int(np.count_nonzero(falls))

    def tick(self) -> None:
        """Advance the grid by one step."""
        moves = self._compute_next(self.grid.cells, self.pending)

        # Commit: swap buffers
        self.grid.cells, self.pending = self.pending, self.grid.cells
        self.tick_count += 1
        self.last_tick_stats = {'moves': moves, 'evaporated': 0, 'condensed': 0}
