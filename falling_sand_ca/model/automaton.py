"""Common stepping interface and construction of the automata."""

from typing import Dict, Protocol, Union

from .basic import BasicAutomaton
from .cell import CellState
from .granular import GranularAutomaton
from .grid import CellGrid


class SteppingAutomaton(Protocol):
    """What a driver needs from an automaton: read, write, advance."""

    width: int
    height: int
    grid: CellGrid
    tick_count: int
    last_tick_stats: Dict[str, int]

    def get(self, row: int, col: int) -> CellState: ...

    def set(self, row: int, col: int, state: CellState) -> None: ...

    def paint_square(self, center_x: int, center_y: int, radius: int,
                     state: CellState = CellState.DIRT) -> int: ...

    def tick(self) -> None: ...


AUTOMATON_KINDS = ('basic', 'granular')


def create_automaton(kind: str, width: int, height: int,
                     **options) -> Union[BasicAutomaton, GranularAutomaton]:
    """
    Build an automaton by name.

    ``options`` are forwarded to GranularAutomaton (temperature,
    water_cycle_delay, seed, rng) and ignored by BasicAutomaton, which
    has no tunable parameters.
    """
    if kind == 'basic':
        return BasicAutomaton(width, height)
    elif kind == 'granular':
        return GranularAutomaton(width, height, **options)
    raise ValueError(
        f"Unknown automaton kind: {kind} (expected one of {AUTOMATON_KINDS})"
    )
