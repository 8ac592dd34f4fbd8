"""Rendering of material grids to PNG snapshots and GIF animations."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from matplotlib.patches import Patch
from pathlib import Path
from typing import List, TYPE_CHECKING
from PIL import Image
import io

from ..model.cell import CellState

if TYPE_CHECKING:
    from ..model.state import SimulationState


class Visualizer:
    """
    Maps materials to colours and renders them with matplotlib.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    # Color scheme, indexed by material
    COLORS = {
        CellState.EMPTY: '#6464FF',  # Sky blue
        CellState.WALL: '#000000',   # Black
        CellState.DIRT: '#962800',   # Brown
        CellState.WATER: '#1F4FBF',  # Deep blue
        CellState.STEAM: '#D8DCE6',  # Pale gray
    }

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.frames: List[Image.Image] = []
        self.palette = np.array(
            [to_rgb(self.COLORS[s]) for s in CellState], dtype=np.float64
        )

    def to_rgb(self, cells: np.ndarray) -> np.ndarray:
        """Colour lookup: [H, W] material grid -> [H, W, 3] RGB floats."""
        return self.palette[cells]

    def _create_figure(self, state: "SimulationState") -> plt.Figure:
        """Create matplotlib figure for state visualization."""
        aspect = self.width / self.height
        fig_height = 6
        fig_width = max(6, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        # Row 0 is the top of the terrarium
        ax.imshow(self.to_rgb(state.cells), origin='upper', aspect='equal',
                  interpolation='nearest')

        counts = state.material_counts()
        ax.set_title(f"Step {state.step} | Dirt: {counts['dirt']} | "
                     f"Water: {counts['water']} | Steam: {counts['steam']}")
        ax.set_xticks([])
        ax.set_yticks([])

        legend_elements = [
            Patch(facecolor=self.COLORS[s], edgecolor='black',
                  label=s.name.capitalize())
            for s in (CellState.DIRT, CellState.WATER, CellState.STEAM)
        ]
        ax.legend(handles=legend_elements, loc='upper right', fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, state: "SimulationState") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(state)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, state: "SimulationState", output_path: Path) -> None:
        """Save single PNG image of current state."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )
