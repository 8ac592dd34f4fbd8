"""Configuration dataclasses and YAML loader for the falling sand simulation."""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.automaton import AUTOMATON_KINDS
from .model.cell import CellState
from .model.granular import DEFAULT_TEMPERATURE, DEFAULT_WATER_CYCLE_DELAY


@dataclass
class GridConfig:
    width: int
    height: int


@dataclass
class AutomatonConfig:
    kind: str = "granular"  # "basic" or "granular"
    temperature: int = DEFAULT_TEMPERATURE
    water_cycle_delay: int = DEFAULT_WATER_CYCLE_DELAY


@dataclass
class RegionSpec:
    region_type: str  # "square" or "rectangle"
    material: CellState
    data: Dict[str, int]


@dataclass
class LayoutConfig:
    regions: List[RegionSpec] = field(default_factory=list)


@dataclass
class SimulationConfig:
    grid: GridConfig
    max_steps: int
    automaton: AutomatonConfig = field(default_factory=AutomatonConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    gif_every: int = 5
    quiet: bool = False
    seed: Optional[int] = None
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def _parse_material(name: str) -> CellState:
    material = CellState.from_name(name)
    if not material.is_storable:
        raise ValueError(f"Material cannot be placed in the grid: {name}")
    return material


def _parse_regions(regions_raw: List[Dict]) -> List[RegionSpec]:
    """Parse paint region specifications from raw YAML data."""
    regions = []
    for r in regions_raw:
        region_type = r.get('type', 'square')
        if region_type == 'square':
            data = {
                'center_x': r['center_x'],
                'center_y': r['center_y'],
                'radius': r['radius']
            }
        elif region_type == 'rectangle':
            data = {
                'x': r['x'],
                'y': r['y'],
                'width': r['width'],
                'height': r['height']
            }
        else:
            raise ValueError(f"Unknown region type: {region_type}")
        regions.append(RegionSpec(
            region_type=region_type,
            material=_parse_material(r.get('material', 'dirt')),
            data=data
        ))
    return regions


def _parse_automaton(raw: Dict[str, Any]) -> AutomatonConfig:
    automaton = AutomatonConfig(
        kind=raw.get('kind', 'granular'),
        temperature=raw.get('temperature', DEFAULT_TEMPERATURE),
        water_cycle_delay=raw.get('water_cycle_delay',
                                  DEFAULT_WATER_CYCLE_DELAY)
    )
    if automaton.kind not in AUTOMATON_KINDS:
        raise ValueError(f"Unknown automaton kind: {automaton.kind}")
    return automaton


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f)

    grid = GridConfig(
        width=raw['grid']['width'],
        height=raw['grid']['height']
    )

    automaton = _parse_automaton(raw.get('automaton', {}))

    layout_raw = raw.get('layout', {})
    layout = LayoutConfig(
        regions=_parse_regions(layout_raw.get('regions', []))
    )

    sim_raw = raw['simulation']

    # Parse export config (optional)
    export_raw = raw.get('export', {})
    gif_every = export_raw.get('gif_every', 5)
    if gif_every < 1:
        raise ValueError(f"gif_every must be >= 1, got {gif_every}")

    return SimulationConfig(
        grid=grid,
        max_steps=sim_raw['max_steps'],
        automaton=automaton,
        layout=layout,
        seed=sim_raw.get('seed'),
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False),
        gif_every=gif_every
    )
