"""Summary report generation for the falling sand simulation."""

from typing import List, Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.state import SimulationState


class Reporter:
    """Generates summary statistics and formatted text report."""

    def __init__(self, config_path: str, seed: Optional[int],
                 automaton_kind: str):
        self.config_path = config_path
        self.seed = seed
        self.automaton_kind = automaton_kind
        self.step_metrics: List[Dict] = []
        self.peak_moves = 0
        self.settled_at: Optional[int] = None
        self.total_evaporated = 0
        self.total_condensed = 0

    def update(self, state: "SimulationState") -> None:
        """Accumulate metrics per step."""
        self.step_metrics.append(state.metrics.copy())

        moves = int(state.metrics.get('moves', 0))
        if moves > self.peak_moves:
            self.peak_moves = moves

        self.total_evaporated += int(state.metrics.get('evaporated', 0))
        self.total_condensed += int(state.metrics.get('condensed', 0))

        # First step after which nothing moved or changed phase
        changed = (moves or state.metrics.get('evaporated', 0)
                   or state.metrics.get('condensed', 0))
        if changed:
            self.settled_at = None
        elif self.settled_at is None:
            self.settled_at = state.step

    def generate_summary(self, final_state: "SimulationState",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        metrics = final_state.metrics
        counts = final_state.material_counts()
        total_cells = sum(counts.values())
        steps = max(1, final_state.step)
        avg_moves = sum(m.get('moves', 0) for m in self.step_metrics) / steps

        lines = [
            "",
            "=" * 80,
            "                    FALLING SAND CA SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path}",
            f"Automaton:     {self.automaton_kind}",
            f"Random Seed:   {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Total Steps:           {final_state.step}",
            f"Average Moves:         {avg_moves:.1f} per step",
            f"Peak Moves:            {self.peak_moves} in one step",
            f"Evaporated:            {self.total_evaporated} cells",
            f"Condensed:             {self.total_condensed} cells",
            "",
            "FINAL MATERIALS",
            "-" * 40,
        ]
        for material, count in counts.items():
            share = (count / total_cells * 100) if total_cells > 0 else 0
            lines.append(f"{material.capitalize():<10} {count:>8} ({share:.1f}%)")

        lines += [
            "",
            "STRUCTURE",
            "-" * 40,
            f"Water Bodies:          {int(metrics.get('water_bodies', 0))}",
            f"Dirt Piles:            {int(metrics.get('dirt_piles', 0))}",
            f"[{'X' if self.settled_at is not None else ' '}] Settled"
            + (f" since step {self.settled_at}" if self.settled_at is not None else ""),
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        # Output file paths
        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'simulation_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'simulation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
