"""Single-buffer, move-once automaton for dirt, water and steam."""

import numpy as np
from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from .cell import Angle, CellState, Coord, DISPLACEMENT, MAX_ANGLE_RANK
from .grid import CellGrid


# Strides drawn per phase-transition sweep
NUM_JUMPS = 10

# Base stride of the evaporation walk before temperature is applied
EVAPORATION_BASE_STRIDE = 100

# Extra stride added to every evaporation step; throttles the water cycle
DEFAULT_WATER_CYCLE_DELAY = 500

DEFAULT_TEMPERATURE = 30


class GranularAutomaton:
    """
    Multi-material automaton updated in place.

    Movement is resolved angle by angle, from straight down to sideways.
    Within one tick a cell can be the destination of at most one
    successful move; destinations are recorded in a visited set that
    lives for the duration of the tick.

    After movement two sampled sweeps convert surface water into steam
    and the interior of steam pockets back into water. Sampling density
    is governed by ``temperature``; evaporation is further throttled by
    ``water_cycle_delay``.
    """

    def __init__(self, width: int, height: int,
                 temperature: int = DEFAULT_TEMPERATURE,
                 water_cycle_delay: int = DEFAULT_WATER_CYCLE_DELAY,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        if temperature < 0:
            raise ValueError(f"temperature must be >= 0, got {temperature}")
        if water_cycle_delay < 0:
            raise ValueError(
                f"water_cycle_delay must be >= 0, got {water_cycle_delay}"
            )
        self.grid = CellGrid(width, height)
        self.width = width
        self.height = height
        self.temperature = temperature
        self.water_cycle_delay = water_cycle_delay
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        # Cheap left/right alternation instead of a draw per attempt
        self.move_left_first = True

        self.tick_count = 0
        self.last_moves: List[Tuple[Coord, Coord]] = []
        self.last_tick_stats: Dict[str, int] = {
            'moves': 0, 'evaporated': 0, 'condensed': 0
        }

    def get(self, row: int, col: int) -> CellState:
        return self.grid.get(row, col)

    def set(self, row: int, col: int, state: CellState) -> None:
        self.grid.set(row, col, state)

    def paint_square(self, center_x: int, center_y: int, radius: int,
                     state: CellState = CellState.DIRT) -> int:
        return self.grid.paint_square(center_x, center_y, radius, state)

    def _try_push(self, source: Coord, dest: Coord,
                  visited: Set[Coord]) -> bool:
        """Swap ``source`` into ``dest`` if the destination gives way."""
        if not self.grid.in_bounds(dest.row, dest.col) or dest in visited:
            return False
        cells = self.grid.cells
        if not DISPLACEMENT[cells[source.row, source.col],
                            cells[dest.row, dest.col]]:
            return False
        self.grid.swap(source, dest)
        return True

    def update_cell(self, coord: Coord, angle: Angle,
                    visited: Set[Coord]) -> Optional[Coord]:
        """
        Try to move the content of ``coord`` along ``angle``.

        Returns the destination on success, None otherwise.
        """
        state = CellState(int(self.grid.cells[coord.row, coord.col]))
        if angle.exceeds(state.max_angle):
            return None

        dy = -angle.dy if state.reverse_gravity else angle.dy
        dx = -angle.dx if self.move_left_first else angle.dx
        self.move_left_first = not self.move_left_first

        next_row = coord.row + dy
        for lateral in (dx, -dx):
            dest = Coord(next_row, coord.col + lateral)
            if self._try_push(coord, dest, visited):
                return dest
        return None

    def _candidates(self, angle: Angle) -> deque:
        """Row-major coordinates whose material may move at ``angle``."""
        movable = MAX_ANGLE_RANK[self.grid.cells] >= angle.rank
        rows, cols = np.nonzero(movable)
        return deque(Coord(int(r), int(c)) for r, c in zip(rows, cols))

    def _move_pass(self, angle: Angle, visited: Set[Coord]) -> None:
        to_check = self._candidates(angle)
        while to_check:
            coord = to_check.popleft()
            if coord in visited:
                continue
            dest = self.update_cell(coord, angle, visited)
            if dest is not None:
                visited.add(dest)
                self.last_moves.append((coord, dest))
                to_check.extend(self.grid.neighbours(dest))

    def _draw_jumps(self, base: int) -> List[int]:
        """Random walk strides centred on ``base`` with spread ``temperature``."""
        t = self.temperature
        jumps = []
        for _ in range(NUM_JUMPS):
            variation = t - int(self.rng.integers(2 * t)) if t > 0 else 0
            jumps.append(max(1, base + variation))
        return jumps

    def _sweep(self, jumps: List[int], current_jump: int,
               source: CellState, target: CellState,
               condition) -> Tuple[int, int]:
        """
        Walk the grid in raster order with variable strides, converting
        sampled ``source`` cells that satisfy ``condition`` to ``target``.

        Returns (conversions, next stride index).
        """
        width = self.width
        cells = self.grid.cells
        converted = 0
        i = 0
        total = width * self.height
        while i < total:
            coord = Coord(i // width, i % width)
            if cells[coord.row, coord.col] == source and condition(coord):
                cells[coord.row, coord.col] = target
                converted += 1
            i += jumps[current_jump]
            current_jump = (current_jump + 1) % NUM_JUMPS
        return converted, current_jump

    def _phase_transitions(self) -> Tuple[int, int]:
        t = self.temperature

        # Water -> steam, at the surface only
        jumps = self._draw_jumps(
            EVAPORATION_BASE_STRIDE - t + self.water_cycle_delay
        )
        evaporated, current_jump = self._sweep(
            jumps, 0, CellState.WATER, CellState.STEAM,
            self.grid.is_water_surface
        )

        # Steam -> water, inside steam pockets only
        jumps = self._draw_jumps(t)
        condensed, _ = self._sweep(
            jumps, current_jump, CellState.STEAM, CellState.WATER,
            lambda coord: self.grid.neighbours_all(coord, CellState.STEAM)
        )
        return evaporated, condensed

    def tick(self) -> None:
        """
        Execute one discrete time step.

        1. One move pass per angle, straight down first
        2. Evaporate sampled surface water
        3. Condense sampled steam pocket interiors
        """
        visited: Set[Coord] = set()
        self.last_moves = []

        for angle in Angle.moves():
            self._move_pass(angle, visited)

        evaporated, condensed = self._phase_transitions()

        self.tick_count += 1
        self.last_tick_stats = {
            'moves': len(self.last_moves),
            'evaporated': evaporated,
            'condensed': condensed,
        }
