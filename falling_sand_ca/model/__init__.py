"""Model package for the falling sand simulation."""

from .errors import AutomatonError, InvalidDimensions, OutOfBounds
from .cell import Angle, CellState, Coord, can_displace
from .grid import CellGrid
from .basic import BasicAutomaton
from .granular import GranularAutomaton
from .automaton import SteppingAutomaton, create_automaton
from .state import SimulationState
from .engine import SimulationEngine

__all__ = [
    'AutomatonError',
    'InvalidDimensions',
    'OutOfBounds',
    'Angle',
    'CellState',
    'Coord',
    'can_displace',
    'CellGrid',
    'BasicAutomaton',
    'GranularAutomaton',
    'SteppingAutomaton',
    'create_automaton',
    'SimulationState',
    'SimulationEngine',
]
