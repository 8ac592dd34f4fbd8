"""
Tests for the double-buffered gravity automaton.
"""

import numpy as np
import pytest

from falling_sand_ca.model.basic import BasicAutomaton
from falling_sand_ca.model.cell import CellState
from falling_sand_ca.model.errors import InvalidDimensions, OutOfBounds

from conftest import fill_random


def dirt_rows(automaton, col=0):
    return [r for r in range(automaton.height)
            if automaton.get(r, col) is CellState.DIRT]


class TestScenarios:
    """Tests for worked tick sequences."""

    def test_single_grain_falls_to_floor(self, basic_3x3):
        """Dirt falls one row per tick and rests on the bottom wall."""
        basic_3x3.set(0, 1, CellState.DIRT)

        basic_3x3.tick()
        assert basic_3x3.get(1, 1) is CellState.DIRT
        assert basic_3x3.get(0, 1) is CellState.EMPTY

        basic_3x3.tick()
        assert basic_3x3.get(2, 1) is CellState.DIRT
        assert basic_3x3.get(1, 1) is CellState.EMPTY

        basic_3x3.tick()
        assert basic_3x3.get(2, 1) is CellState.DIRT
        assert basic_3x3.grid.count(CellState.DIRT) == 1

    def test_bounded_fall(self):
        """A grain above k empty cells moves exactly one row per tick."""
        automaton = BasicAutomaton(1, 6)
        automaton.set(0, 0, CellState.DIRT)
        for t in range(1, 6):
            automaton.tick()
            assert dirt_rows(automaton) == [t]

    def test_stacked_grains_use_previous_state(self):
        """The upper grain only sees the lower grain's pre-tick position."""
        automaton = BasicAutomaton(1, 4)
        automaton.set(0, 0, CellState.DIRT)
        automaton.set(1, 0, CellState.DIRT)

        automaton.tick()
        assert dirt_rows(automaton) == [0, 2]
        automaton.tick()
        assert dirt_rows(automaton) == [1, 3]
        automaton.tick()
        assert dirt_rows(automaton) == [2, 3]

    def test_paint_between_ticks_survives(self, basic_3x3):
        """Brush writes made between ticks are part of the next tick."""
        basic_3x3.tick()
        basic_3x3.paint_square(center_x=1, center_y=1, radius=1)
        assert basic_3x3.grid.count(CellState.DIRT) == 4

        basic_3x3.tick()
        assert basic_3x3.grid.count(CellState.DIRT) == 4
        assert basic_3x3.get(2, 0) is CellState.DIRT
        assert basic_3x3.get(2, 1) is CellState.DIRT


class TestInvariants:
    """Tests for properties that hold on every tick."""

    def test_no_op_stability(self):
        """A grid with no dirt above empty space never changes."""
        automaton = BasicAutomaton(4, 4)
        automaton.grid.cells[3, :] = CellState.DIRT
        automaton.grid.cells[2, 1] = CellState.DIRT
        automaton.grid.cells[0, 0] = CellState.WATER
        automaton.grid.cells[1, 3] = CellState.STEAM
        before = automaton.grid.cells.copy()

        automaton.tick()

        assert np.array_equal(automaton.grid.cells, before)
        assert automaton.last_tick_stats['moves'] == 0

    def test_mass_conservation(self, rng):
        """Dirt count never changes."""
        automaton = BasicAutomaton(12, 9)
        fill_random(automaton, rng, materials=(CellState.EMPTY, CellState.DIRT))
        initial = automaton.grid.count(CellState.DIRT)

        for _ in range(20):
            automaton.tick()
            assert automaton.grid.count(CellState.DIRT) == initial

    def test_settles(self, rng):
        """After height ticks no dirt rests above empty space."""
        automaton = BasicAutomaton(8, 6)
        fill_random(automaton, rng, materials=(CellState.EMPTY, CellState.DIRT))

        for _ in range(automaton.height):
            automaton.tick()
        automaton.tick()

        assert automaton.last_tick_stats['moves'] == 0

    def test_other_materials_untouched(self):
        """Only dirt follows the gravity rule."""
        automaton = BasicAutomaton(2, 3)
        automaton.set(0, 0, CellState.WATER)
        automaton.set(0, 1, CellState.STEAM)
        automaton.tick()
        assert automaton.get(0, 0) is CellState.WATER
        assert automaton.get(0, 1) is CellState.STEAM

    def test_wall_immutability(self, basic_3x3):
        """The border reads as wall and rejects writes on every tick."""
        basic_3x3.set(0, 0, CellState.DIRT)
        for _ in range(4):
            basic_3x3.tick()
            for row, col in [(-1, 1), (3, 1), (1, -1), (1, 3)]:
                assert basic_3x3.get(row, col) is CellState.WALL
                with pytest.raises(OutOfBounds):
                    basic_3x3.set(row, col, CellState.DIRT)

    def test_move_count(self):
        """Tick statistics report the number of falls."""
        automaton = BasicAutomaton(3, 3)
        automaton.grid.cells[0, :] = CellState.DIRT
        automaton.tick()
        assert automaton.last_tick_stats['moves'] == 3
        assert automaton.tick_count == 1


def test_invalid_dimensions():
    """Non-positive dimensions are rejected."""
    with pytest.raises(InvalidDimensions):
        BasicAutomaton(0, 3)
