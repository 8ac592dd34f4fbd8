"""Exceptions raised by the falling sand automata."""


class AutomatonError(Exception):
    """Base class for automaton contract violations."""


class InvalidDimensions(AutomatonError, ValueError):
    """Grid width or height is not positive."""

    def __init__(self, width: int, height: int):
        super().__init__(
            f"Grid dimensions must be positive, got {width}x{height}"
        )
        self.width = width
        self.height = height


class OutOfBounds(AutomatonError, IndexError):
    """Write targeting the virtual wall around the grid."""

    def __init__(self, row: int, col: int, reason: str = "outside the grid"):
        super().__init__(f"Cannot alter cell ({row}, {col}): {reason}")
        self.row = row
        self.col = col
