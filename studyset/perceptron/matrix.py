"""A dense two-dimensional matrix of floats with the usual algebra."""

from __future__ import annotations

import math
import random
from numbers import Real

import numpy as np

_TOLERANCE = 1e-7


def _minor(data: np.ndarray, row: int, col: int) -> np.ndarray:
    return np.delete(np.delete(data, row, axis=0), col, axis=1)


def _det(data: np.ndarray) -> float:
    size = len(data)
    if size == 1:
        return float(data[0, 0])
    if size == 2:
        return float(data[0, 0] * data[1, 1] - data[0, 1] * data[1, 0])
    return sum(
        (-1) ** row * data[row, 0] * _det(_minor(data, row, 0)) for row in range(size)
    )


class Matrix:
    """A rows-by-columns matrix, zero-filled on creation."""

    __hash__ = None

    def __init__(self, rows: int = 2, cols: int = 2) -> None:
        if rows <= 0 or cols <= 0:
            raise ValueError("matrix dimensions must be positive")
        self._data = np.zeros((rows, cols))

    @classmethod
    def from_rows(cls, rows) -> Matrix:
        """Build a matrix from nested sequences of numbers."""
        data = np.array(rows, dtype=float)
        if data.ndim != 2:
            raise ValueError("rows must form a two-dimensional table")
        matrix = cls(*data.shape)
        matrix._data = data
        return matrix

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    def to_array(self) -> np.ndarray:
        """Return a copy of the values as a numpy array."""
        return self._data.copy()

    def tolist(self) -> list[list[float]]:
        """Return the values as nested lists."""
        return self._data.tolist()

    def __repr__(self) -> str:
        return f"Matrix.from_rows({self.tolist()!r})"

    # checks

    def _require_same_size(self, other: Matrix) -> None:
        if self._data.shape != other._data.shape:
            raise ValueError("matrices have different sizes")

    def _require_square(self) -> None:
        if self.rows != self.cols:
            raise ValueError("matrix must be square")

    @staticmethod
    def _require_finite(number: Real) -> float:
        if not math.isfinite(number):
            raise ValueError("number value is incorrect")
        return float(number)

    def _index(self, index) -> tuple[int, int]:
        row, col = index
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError("matrix index out of range")
        return row, col

    # comparison and element access

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self._data.shape != other._data.shape:
            return False
        return bool(np.all(np.abs(self._data - other._data) < _TOLERANCE))

    def __getitem__(self, index) -> float:
        return float(self._data[self._index(index)])

    def __setitem__(self, index, value: float) -> None:
        self._data[self._index(index)] = value

    # arithmetic

    def __add__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_size(other)
        return Matrix.from_rows(self._data + other._data)

    def __sub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_size(other)
        return Matrix.from_rows(self._data - other._data)

    def _product(self, other) -> np.ndarray | None:
        if isinstance(other, Matrix):
            if self.cols != other.rows:
                raise ValueError(
                    "columns of the first matrix do not equal rows of the second"
                )
            return self._data @ other._data
        if isinstance(other, Real) and not isinstance(other, bool):
            return self._data * self._require_finite(other)
        return None

    def __mul__(self, other) -> Matrix:
        product = self._product(other)
        if product is None:
            return NotImplemented
        return Matrix.from_rows(product)

    def __rmul__(self, other) -> Matrix:
        if isinstance(other, Real) and not isinstance(other, bool):
            return Matrix.from_rows(self._data * self._require_finite(other))
        return NotImplemented

    def __iadd__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_size(other)
        self._data += other._data
        return self

    def __isub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_size(other)
        self._data -= other._data
        return self

    def __imul__(self, other) -> Matrix:
        product = self._product(other)
        if product is None:
            return NotImplemented
        self._data = product
        return self

    # linear algebra

    def transpose(self) -> Matrix:
        """Return the transposed matrix."""
        return Matrix.from_rows(self._data.T.copy())

    def determinant(self) -> float:
        """Return the determinant by cofactor expansion along the first column."""
        self._require_square()
        return _det(self._data)

    def calc_complements(self) -> Matrix:
        """Return the matrix of algebraic complements (cofactors)."""
        self._require_square()
        size = self.rows
        if size == 1:
            return Matrix.from_rows([[1.0]])
        return Matrix.from_rows(
            [
                [(-1) ** (row + col) * _det(_minor(self._data, row, col)) for col in range(size)]
                for row in range(size)
            ]
        )

    def inverse(self) -> Matrix:
        """Return the inverse matrix."""
        determinant = self.determinant()
        if determinant == 0:
            raise ValueError("matrix determinant is 0")
        return self.calc_complements().transpose() * (1 / determinant)

    def randomize(self, rng: random.Random | None = None) -> None:
        """Fill with random multiples of 0.001 between -1 and 1."""
        rng = rng if rng is not None else random.Random()
        count = self.rows * self.cols
        values = [rng.randrange(2001) - 1000 for _ in range(count)]
        self._data = np.array(values, dtype=float).reshape(self.rows, self.cols) * 0.001