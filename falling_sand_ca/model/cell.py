"""Cell materials, movement angles and the displacement rule."""

from enum import Enum, IntEnum
from typing import List, NamedTuple

import numpy as np


class Coord(NamedTuple):
    """Grid coordinate, row first. Hashable, used directly as a set key."""
    row: int
    col: int


class Angle(Enum):
    """
    Candidate movement directions, tried each tick from most vertical to
    most lateral.

    Each value is (rank, dy, dx). A material only attempts angles whose
    rank does not exceed the rank of its own ``max_angle``; this models
    the angle of repose of a powder and the free flow of a fluid.
    NONE is a sentinel threshold for materials that never move.
    """
    NONE = (0, 0, 0)
    DOWN = (1, 1, 0)
    DIAGONAL = (2, 1, 1)
    SIDEWAYS = (3, 0, 1)

    def __init__(self, rank: int, dy: int, dx: int):
        self.rank = rank
        self.dy = dy
        self.dx = dx

    def exceeds(self, threshold: "Angle") -> bool:
        """True if this angle is more lateral than ``threshold`` allows."""
        return self.rank > threshold.rank

    @classmethod
    def moves(cls) -> List["Angle"]:
        """All real movement angles in rank order, sentinel excluded."""
        return sorted((a for a in cls if a is not cls.NONE),
                      key=lambda a: a.rank)


class CellState(IntEnum):
    """Material held by a single cell. Values are stored in uint8 grids."""
    EMPTY = 0
    WALL = 1
    DIRT = 2
    WATER = 3
    STEAM = 4

    @property
    def max_angle(self) -> Angle:
        return _PROPERTIES[self][0]

    @property
    def reverse_gravity(self) -> bool:
        return _PROPERTIES[self][1]

    @property
    def density(self) -> int:
        return _PROPERTIES[self][2]

    @property
    def is_fluid(self) -> bool:
        return _PROPERTIES[self][3]

    @property
    def is_storable(self) -> bool:
        """WALL only exists as the virtual border and is never stored."""
        return self is not CellState.WALL

    @classmethod
    def from_name(cls, name: str) -> "CellState":
        if not isinstance(name, str):
            raise ValueError(f"Material name must be a string, got {name!r}")
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown material: {name}") from None


# state -> (max_angle, reverse_gravity, density, is_fluid)
_PROPERTIES = {
    CellState.EMPTY: (Angle.NONE, False, 0, False),
    CellState.WALL: (Angle.NONE, False, 0, False),
    CellState.DIRT: (Angle.DIAGONAL, False, 3, False),
    CellState.WATER: (Angle.SIDEWAYS, False, 2, True),
    CellState.STEAM: (Angle.SIDEWAYS, True, 1, True),
}


def can_displace(source: CellState, target: CellState) -> bool:
    """
    Whether ``source`` may move into a cell currently holding ``target``.

    Falling materials sink into anything lighter. Rising materials
    bubble up through heavier fluids but cannot lift solids. Walls
    neither move nor give way.
    """
    if source is CellState.WALL or target is CellState.WALL:
        return False
    if target is CellState.EMPTY:
        return True
    if source is CellState.EMPTY:
        return False
    if source.reverse_gravity:
        return target.is_fluid and target.density > source.density
    return source.density > target.density


def _build_displacement_table() -> np.ndarray:
    size = max(CellState) + 1
    table = np.zeros((size, size), dtype=bool)
    for source in CellState:
        for target in CellState:
            table[source, target] = can_displace(source, target)
    return table


# DISPLACEMENT[source, target] mirrors can_displace for raw grid values
DISPLACEMENT = _build_displacement_table()

# Lookup of raw uint8 value -> movement threshold rank
MAX_ANGLE_RANK = np.array([s.max_angle.rank for s in CellState], dtype=np.int8)
