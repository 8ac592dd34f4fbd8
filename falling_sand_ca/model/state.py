"""State snapshot dataclass for the falling sand simulation."""

from dataclasses import dataclass
from typing import List, Dict
import numpy as np
from scipy import ndimage

from .cell import CellState


# 8-connected structuring element for body labelling
_MOORE = np.ones((3, 3), dtype=bool)


def count_bodies(cells: np.ndarray, state: CellState) -> int:
    """Number of 8-connected regions holding ``state``."""
    _, num = ndimage.label(cells == state, structure=_MOORE)
    return int(num)


@dataclass
class SimulationState:
    """Complete snapshot of simulation state at a given time step."""
    step: int
    cells: np.ndarray         # Copy of the material grid
    metrics: Dict[str, float]  # material counts, moves, conversions

    def material_counts(self) -> Dict[str, int]:
        return {
            s.name.lower(): int(self.metrics.get(s.name.lower(), 0))
            for s in CellState if s.is_storable
        }

    def to_csv_rows(self) -> List[Dict]:
        """Convert to CSV-compatible format."""
        return [
            {
                "step": self.step,
                "material": material,
                "count": count
            }
            for material, count in self.material_counts().items()
        ]


def snapshot(step: int, cells: np.ndarray,
             tick_stats: Dict[str, int]) -> SimulationState:
    """Create snapshot of ``cells`` with per-material and per-tick metrics."""
    metrics: Dict[str, float] = {}
    for s in CellState:
        if s.is_storable:
            metrics[s.name.lower()] = int(np.count_nonzero(cells == s))
    metrics['water_bodies'] = count_bodies(cells, CellState.WATER)
    metrics['dirt_piles'] = count_bodies(cells, CellState.DIRT)
    metrics.update(tick_stats)
    return SimulationState(step=step, cells=cells.copy(), metrics=metrics)
