"""Falling sand cellular automata: dirt, water and steam on a 2D grid."""

__version__ = "0.1.0"

from .model import (
    BasicAutomaton,
    CellState,
    GranularAutomaton,
    InvalidDimensions,
    OutOfBounds,
    create_automaton,
)

__all__ = [
    'BasicAutomaton',
    'CellState',
    'GranularAutomaton',
    'InvalidDimensions',
    'OutOfBounds',
    'create_automaton',
    '__version__',
]
