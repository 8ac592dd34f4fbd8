"""
Pytest configuration and fixtures for falling sand tests.
"""

import numpy as np
import pytest

from falling_sand_ca.config import (
    GridConfig, LayoutConfig, RegionSpec, SimulationConfig,
)
from falling_sand_ca.model.basic import BasicAutomaton
from falling_sand_ca.model.cell import CellState
from falling_sand_ca.model.granular import GranularAutomaton


def fill_random(automaton, rng: np.random.Generator,
                materials=(CellState.EMPTY, CellState.DIRT,
                           CellState.WATER, CellState.STEAM)) -> None:
    """Fill every cell of ``automaton`` with a random material."""
    values = rng.choice([int(m) for m in materials],
                        size=(automaton.height, automaton.width))
    automaton.grid.cells[...] = values.astype(np.uint8)


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for random layouts."""
    return np.random.default_rng(12345)


@pytest.fixture
def basic_3x3() -> BasicAutomaton:
    """3x3 basic automaton, all empty."""
    return BasicAutomaton(3, 3)


@pytest.fixture
def granular_3x3() -> GranularAutomaton:
    """3x3 granular automaton with a fixed seed."""
    return GranularAutomaton(3, 3, seed=42)


@pytest.fixture
def small_config() -> SimulationConfig:
    """Small granular simulation with a dirt square over a water pool."""
    return SimulationConfig(
        grid=GridConfig(width=20, height=15),
        max_steps=5,
        layout=LayoutConfig(regions=[
            RegionSpec(region_type='rectangle', material=CellState.WATER,
                       data={'x': 0, 'y': 10, 'width': 20, 'height': 5}),
            RegionSpec(region_type='square', material=CellState.DIRT,
                       data={'center_x': 8, 'center_y': 4, 'radius': 2}),
        ]),
        seed=7,
    )
