"""
Tests for the simulation engine, snapshots and exporters.
"""

import csv

import numpy as np

from falling_sand_ca.config import AutomatonConfig
from falling_sand_ca.export.csv_writer import CSVWriter
from falling_sand_ca.export.reporter import Reporter
from falling_sand_ca.export.visualizer import Visualizer
from falling_sand_ca.model.automaton import create_automaton
from falling_sand_ca.model.basic import BasicAutomaton
from falling_sand_ca.model.cell import CellState
from falling_sand_ca.model.engine import SimulationEngine
from falling_sand_ca.model.granular import GranularAutomaton
from falling_sand_ca.model.state import count_bodies

import pytest


class TestCreateAutomaton:
    """Tests for the automaton factory."""

    def test_basic(self):
        """'basic' builds the double-buffered automaton."""
        assert isinstance(create_automaton('basic', 4, 3), BasicAutomaton)

    def test_granular_options(self):
        """'granular' forwards its options."""
        automaton = create_automaton('granular', 4, 3, temperature=70, seed=1)
        assert isinstance(automaton, GranularAutomaton)
        assert automaton.temperature == 70

    def test_unknown_kind(self):
        """Unknown kinds are rejected."""
        with pytest.raises(ValueError, match="Unknown automaton kind"):
            create_automaton('quantum', 4, 3)


class TestSimulationEngine:
    """Tests for the driver loop."""

    def test_layout_painted(self, small_config):
        """Regions from config are painted before the first tick."""
        engine = SimulationEngine(small_config)
        counts = engine.automaton.grid.counts()
        assert counts['water'] == 100
        assert counts['dirt'] == 16
        assert engine.get(4, 8) is CellState.DIRT

    def test_runs_to_max_steps(self, small_config):
        """The engine stops after max_steps ticks."""
        engine = SimulationEngine(small_config)
        states = []
        while not engine.is_finished():
            states.append(engine.step())

        assert len(states) == small_config.max_steps
        assert states[-1].step == small_config.max_steps
        assert engine.automaton.tick_count == small_config.max_steps
        assert engine.current_step == engine.automaton.tick_count

    def test_summary_conserves_dirt(self, small_config):
        """Dirt is neither created nor destroyed."""
        engine = SimulationEngine(small_config)
        while not engine.is_finished():
            engine.step()

        summary = engine.get_summary()
        assert summary['final_counts']['dirt'] == summary['initial_counts']['dirt']
        assert summary['total_steps'] == small_config.max_steps
        assert summary['total_moves'] > 0

    def test_brush(self, small_config):
        """The brush paints dirt and clips at the border."""
        engine = SimulationEngine(small_config)
        written = engine.paint_square(center_x=0, center_y=0, radius=2)
        assert written == 4
        assert engine.get(0, 0) is CellState.DIRT

    def test_basic_engine(self, small_config):
        """The basic automaton can drive the same config."""
        small_config.automaton = AutomatonConfig(kind='basic')
        engine = SimulationEngine(small_config)
        state = engine.step()
        assert isinstance(engine.automaton, BasicAutomaton)
        assert state.metrics['evaporated'] == 0

    def test_seeded_runs_match(self, small_config):
        """Same seed, same trajectory."""
        finals = []
        for _ in range(2):
            engine = SimulationEngine(small_config)
            while not engine.is_finished():
                state = engine.step()
            finals.append(state.cells)
        assert np.array_equal(finals[0], finals[1])


class TestSnapshot:
    """Tests for state snapshots."""

    def test_snapshot_is_copy(self, small_config):
        """Snapshots do not alias the live grid."""
        engine = SimulationEngine(small_config)
        state = engine.step()
        engine.automaton.grid.cells[...] = CellState.EMPTY
        assert np.count_nonzero(state.cells == CellState.WATER) > 0

    def test_csv_rows(self, small_config):
        """One CSV row per storable material."""
        engine = SimulationEngine(small_config)
        rows = engine.step().to_csv_rows()
        assert [r['material'] for r in rows] == ['empty', 'dirt', 'water', 'steam']
        assert sum(r['count'] for r in rows) == 20 * 15

    def test_count_bodies(self):
        """Diagonally touching cells form one body."""
        cells = np.zeros((4, 4), dtype=np.uint8)
        cells[0, 0] = CellState.WATER
        cells[1, 1] = CellState.WATER
        cells[3, 3] = CellState.WATER
        assert count_bodies(cells, CellState.WATER) == 2


class TestExport:
    """Tests for CSV, image and report output."""

    def test_csv_writer(self, small_config, tmp_path):
        """CSV log has a header and four rows per step."""
        engine = SimulationEngine(small_config)
        path = tmp_path / 'log.csv'
        with CSVWriter(path) as writer:
            for _ in range(3):
                writer.append(engine.step())

        with open(path, newline='') as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 12
        assert rows[0]['step'] == '1'

    def test_visualizer_colours(self):
        """Material grid maps to an RGB image."""
        visualizer = Visualizer(3, 2)
        cells = np.array([[0, 2, 3], [4, 0, 0]], dtype=np.uint8)
        rgb = visualizer.to_rgb(cells)
        assert rgb.shape == (2, 3, 3)
        assert not np.array_equal(rgb[0, 1], rgb[0, 2])

    def test_snapshot_and_gif(self, small_config, tmp_path):
        """PNG snapshot and GIF are written to disk."""
        engine = SimulationEngine(small_config)
        visualizer = Visualizer(20, 15)
        state = None
        for _ in range(2):
            state = engine.step()
            visualizer.buffer_frame(state)

        visualizer.save_snapshot(state, tmp_path / 'final.png')
        visualizer.generate_gif(tmp_path / 'anim.gif')
        assert (tmp_path / 'final.png').exists()
        assert (tmp_path / 'anim.gif').exists()

    def test_report(self, small_config, tmp_path):
        """Summary report lists the final materials."""
        engine = SimulationEngine(small_config)
        reporter = Reporter('inline', small_config.seed, 'granular')
        while not engine.is_finished():
            state = engine.step()
            reporter.update(state)

        report = reporter.generate_summary(state, tmp_path, True, False, False)
        assert "FALLING SAND CA SIMULATION REPORT" in report
        assert "Dirt" in report
        assert "Snapshot:   (disabled)" in report
