"""
dmtgeom/matrix.py - Dense matrix algebra v1.0

A fixed-shape 2-D matrix of floats backed by a numpy array.

Every algebraic operation returns a fresh Matrix that shares no storage
with its operands, so chained expressions behave like value arithmetic.
Shapes are checked eagerly; there is no broadcasting and no implicit
shape coercion. Only element assignment mutates a matrix.
"""

from __future__ import annotations
from typing import Any, Iterator, List, Sequence, Tuple
import numbers
import logging

import numpy as np

from .errors import DimensionMismatch, IndexOutOfRange, InvalidArgument
from .lengths import Length

logger = logging.getLogger("dmtgeom.matrix")


def _check_dimension(argument: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgument(argument, value, "must be an integer")
    if value <= 0:
        raise InvalidArgument(argument, value, "must be positive")
    return int(value)


def _check_scalar(value: Any) -> float:
    if isinstance(value, Length):
        return value.value
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgument("scalar", value, "must be a real number")
    return float(value)


class Matrix:
    """
    Dense row-major matrix.

    Usage:
        a = Matrix.identity(3).multiply(3)
        b = Matrix.identity(3).multiply(2)
        c = a.hadamard_product(b)   # 6 on the diagonal
        c.set(0, 1, 4.0)
        c[0, 1]                     # 4.0
    """

    __array_ufunc__ = None
    __hash__ = None  # mutable

    def __init__(self, rows: int, cols: int, fill_value: float = 0.0):
        rows = _check_dimension("rows", rows)
        cols = _check_dimension("cols", cols)
        self._data = np.full((rows, cols), _check_scalar(fill_value), dtype=np.float64)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def create(cls, rows: int, cols: int, fill_value: float) -> "Matrix":
        """Matrix of the given shape with every entry set to fill_value."""
        return cls(rows, cols, fill_value)

    @classmethod
    def identity(cls, order: int) -> "Matrix":
        """Square matrix with 1 on the main diagonal and 0 elsewhere."""
        order = _check_dimension("order", order)
        return cls._wrap(np.identity(order, dtype=np.float64))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """Matrix from nested row sequences."""
        rows = [list(row) for row in rows]
        if not rows or not rows[0]:
            raise InvalidArgument("rows", rows, "must contain at least one entry")
        width = len(rows[0])
        for row in rows:
            if len(row) != width:
                raise InvalidArgument("rows", rows, "all rows must have the same length")
        return cls._wrap(np.array([[_check_scalar(v) for v in row] for row in rows], dtype=np.float64))

    @classmethod
    def _wrap(cls, array: np.ndarray) -> "Matrix":
        # Takes ownership of array; callers pass freshly allocated data only
        matrix = cls.__new__(cls)
        matrix._data = array
        return matrix

    # -------------------------------------------------------------------------
    # Shape and access
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    def _check_index(self, i: Any, j: Any) -> None:
        for value in (i, j):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise IndexOutOfRange(i, j, self.shape)
        # No wrap-around for negative indices
        if not (0 <= i < self.rows and 0 <= j < self.cols):
            raise IndexOutOfRange(i, j, self.shape)

    def get(self, i: int, j: int) -> float:
        """Entry at row i, column j."""
        self._check_index(i, j)
        return float(self._data[i, j])

    def set(self, i: int, j: int, value: float) -> None:
        """Assign the entry at row i, column j."""
        self._check_index(i, j)
        self._data[i, j] = _check_scalar(value)

    def __getitem__(self, key: Tuple[int, int]) -> float:
        i, j = self._split_key(key)
        return self.get(i, j)

    def __setitem__(self, key: Tuple[int, int], value: float) -> None:
        i, j = self._split_key(key)
        self.set(i, j, value)

    def _split_key(self, key: Any) -> Tuple[Any, Any]:
        if not isinstance(key, tuple) or len(key) != 2:
            raise InvalidArgument("index", key, "expected a (row, column) pair")
        return key

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    def multiply(self, scalar: float) -> "Matrix":
        """New matrix with every entry multiplied by scalar."""
        return self._wrap(self._data * _check_scalar(scalar))

    def hadamard_product(self, other: "Matrix") -> "Matrix":
        """New matrix of entry-wise products; shapes must be equal."""
        self._require_same_shape("Hadamard Product", other)
        return self._wrap(self._data * other._data)

    def add(self, other: "Matrix") -> "Matrix":
        self._require_same_shape("addition", other)
        return self._wrap(self._data + other._data)

    def subtract(self, other: "Matrix") -> "Matrix":
        self._require_same_shape("subtraction", other)
        return self._wrap(self._data - other._data)

    def matmul(self, other: "Matrix") -> "Matrix":
        """Matrix product; self.cols must equal other.rows."""
        self._require_matrix(other)
        if self.cols != other.rows:
            raise DimensionMismatch("matrix product", self.shape, other.shape)
        return self._wrap(self._data @ other._data)

    def multiply_vector(self, vector: Sequence[float]) -> List[float]:
        """Product with a column vector of length cols."""
        values = [_check_scalar(v) for v in vector]
        if len(values) != self.cols:
            raise DimensionMismatch("matrix-vector product", self.shape, (len(values),))
        return (self._data @ np.array(values, dtype=np.float64)).tolist()

    def transpose(self) -> "Matrix":
        return self._wrap(self._data.T.copy())

    def copy(self) -> "Matrix":
        return self._wrap(self._data.copy())

    def _require_matrix(self, other: Any) -> None:
        if not isinstance(other, Matrix):
            raise InvalidArgument("operand", other, "must be a Matrix")

    def _require_same_shape(self, operation: str, other: "Matrix") -> None:
        self._require_matrix(other)
        if self.shape != other.shape:
            raise DimensionMismatch(operation, self.shape, other.shape)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_list(self) -> List[List[float]]:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        """Copy of the entries as a float64 array."""
        return self._data.copy()

    def __iter__(self) -> Iterator[List[float]]:
        return iter(self.to_list())

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __mul__(self, other: Any) -> "Matrix":
        if isinstance(other, Matrix):
            return NotImplemented
        try:
            scalar = _check_scalar(other)
        except InvalidArgument:
            return NotImplemented
        return self.multiply(scalar)

    __rmul__ = __mul__

    def __matmul__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.matmul(other)

    def __add__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> "Matrix":
        return self.multiply(-1.0)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __repr__(self) -> str:
        return f"Matrix({self.to_list()!r})"
