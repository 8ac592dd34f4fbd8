"""Simulation driver for the falling sand automata."""

import numpy as np
from typing import Dict, TYPE_CHECKING

from .automaton import SteppingAutomaton, create_automaton
from .cell import CellState
from .state import SimulationState, snapshot

if TYPE_CHECKING:
    from ..config import SimulationConfig, RegionSpec


class SimulationEngine:
    """
    Owns one automaton and advances it in discrete ticks.

    Implements:
    1. Automaton construction from config
    2. Initial layout painting
    3. Tick loop with state snapshots
    4. Brush writes between ticks
    """

    def __init__(self, config: "SimulationConfig"):
        self.config = config
        self.rng = np.random.default_rng(config.seed)

        grid = config.grid
        options = {}
        if config.automaton.kind == 'granular':
            options = {
                'temperature': config.automaton.temperature,
                'water_cycle_delay': config.automaton.water_cycle_delay,
                'rng': self.rng,
            }
        self.automaton: SteppingAutomaton = create_automaton(
            config.automaton.kind, grid.width, grid.height, **options
        )
        self._setup_layout()

        # Metrics tracking
        self.total_moves = 0
        self.total_evaporated = 0
        self.total_condensed = 0
        self.initial_counts = self.automaton.grid.counts()

    def _setup_layout(self) -> None:
        """Paint initial material regions from config."""
        for region in self.config.layout.regions:
            self._paint_region(region)

    def _paint_region(self, region: "RegionSpec") -> None:
        data = region.data
        if region.region_type == "square":
            self.paint_square(data['center_x'], data['center_y'],
                              data['radius'], region.material)
        elif region.region_type == "rectangle":
            grid = self.automaton.grid
            x_end = min(data['x'] + data['width'], grid.width)
            y_end = min(data['y'] + data['height'], grid.height)
            x = max(0, data['x'])
            y = max(0, data['y'])
            for row in range(y, y_end):
                for col in range(x, x_end):
                    self.automaton.set(row, col, region.material)

    def paint_square(self, center_x: int, center_y: int, radius: int,
                     state: CellState = CellState.DIRT) -> int:
        """Brush write; cells outside the grid are skipped."""
        return self.automaton.paint_square(center_x, center_y, radius, state)

    def get(self, row: int, col: int) -> CellState:
        return self.automaton.get(row, col)

    @property
    def current_step(self) -> int:
        """Ticks completed so far."""
        return self.automaton.tick_count

    def step(self) -> SimulationState:
        """Advance the automaton one tick and return a snapshot."""
        self.automaton.tick()

        stats = self.automaton.last_tick_stats
        self.total_moves += stats['moves']
        self.total_evaporated += stats['evaporated']
        self.total_condensed += stats['condensed']

        return self._create_state_snapshot()

    def _create_state_snapshot(self) -> SimulationState:
        return snapshot(self.current_step, self.automaton.grid.cells,
                        self.automaton.last_tick_stats)

    def is_finished(self) -> bool:
        """Check if simulation should terminate."""
        return self.current_step >= self.config.max_steps

    def get_summary(self) -> Dict:
        """Get summary statistics for the simulation."""
        return {
            'total_steps': self.current_step,
            'initial_counts': dict(self.initial_counts),
            'final_counts': self.automaton.grid.counts(),
            'total_moves': self.total_moves,
            'avg_moves': self.total_moves / max(1, self.current_step),
            'total_evaporated': self.total_evaporated,
            'total_condensed': self.total_condensed,
        }
