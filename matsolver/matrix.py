"""
MatSolver — the ``Matrix`` value type and small grid helpers.
"""

import numbers
from dataclasses import dataclass

import numpy as np

from matsolver.errors import InvalidOperation


@dataclass(frozen=True)
class Matrix:
    """A named, immutable rectangular grid of floats.

    ``data`` is stored as a tuple of row tuples so a published matrix can
    never be changed in place, neither by the engine nor by its callers.
    """

    name: str
    data: tuple

    def __post_init__(self):
        object.__setattr__(self, "data", _freeze(self.data, self.name))

    @classmethod
    def from_rows(cls, name: str, rows) -> "Matrix":
        """Build a matrix from any nested sequence (lists, tuples, arrays)."""
        return cls(name, rows)

    @property
    def rows(self) -> int:
        return len(self.data)

    @property
    def cols(self) -> int:
        return len(self.data[0])

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    def to_list(self) -> list[list[float]]:
        """Return a fresh, mutable copy of the grid."""
        return [list(row) for row in self.data]

    def to_array(self) -> np.ndarray:
        return np.array(self.data, dtype=float)


def _freeze(rows, name: str) -> tuple:
    """Validate *rows* and copy them into a tuple of float tuples."""
    if isinstance(rows, np.ndarray):
        rows = rows.tolist()
    try:
        grid = [list(row) for row in rows]
    except TypeError:
        raise InvalidOperation(f"Matrix {name} must be a list of rows.")
    if not grid or not grid[0]:
        raise InvalidOperation(f"Matrix {name} must have at least one row and one column.")
    width = len(grid[0])
    frozen = []
    for i, row in enumerate(grid, 1):
        if len(row) != width:
            raise InvalidOperation(
                f"Matrix {name} is not rectangular: row {i} has {len(row)} "
                f"values, expected {width}."
            )
        for value in row:
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidOperation(f"Matrix {name} contains a non-numeric value: {value!r}")
        frozen.append(tuple(float(v) for v in row))
    return tuple(frozen)


def identity(size: int) -> list[list[float]]:
    """Return the ``size`` x ``size`` identity grid."""
    return [[1.0 if i == j else 0.0 for j in range(size)] for i in range(size)]


def zeros(rows: int, cols: int) -> list[list[float]]:
    """Return a ``rows`` x ``cols`` grid of zeros."""
    return [[0.0] * cols for _ in range(rows)]


def as_context(matrices) -> dict[str, Matrix]:
    """Normalise the caller's matrices into a ``name -> Matrix`` mapping.

    Accepts a list of ``Matrix`` objects or a mapping of name to grid.
    """
    if isinstance(matrices, dict):
        return {
            name: value if isinstance(value, Matrix) else Matrix(name, value)
            for name, value in matrices.items()
        }
    context = {}
    for m in matrices:
        if not isinstance(m, Matrix):
            raise InvalidOperation(f"Expected a Matrix, got {type(m).__name__}.")
        context[m.name] = m
    return context
