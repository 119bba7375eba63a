import torch
from typing import TYPE_CHECKING, Dict, Tuple

from ._coo import SparseCooMatrix
from ._csc import SparseCscMatrix
from ._csr import SparseCsrMatrix
from ._matrix import MatrixLike
from ..errors import ColRangeError, RowRangeError
from ..utils.misc import DEFAULT_DTYPE, INDEX_DTYPE

if TYPE_CHECKING:
    from ._types import MatrixType


class SparseDokMatrix:
    """
    A Dictionary Of Keys sparse matrix: a mapping from (row, col) to value.

    Good for building matrices incrementally, element by element; convert to
    CSR or CSC once built for arithmetic. Zero values are never stored.

    Args:
        rows (int): Number of rows.
        cols (int): Number of columns.
        dtype (torch.dtype, optional): dtype of the tensors produced by conversions.
            Defaults to DEFAULT_DTYPE.
    """
    def __init__(self, rows: int, cols: int, dtype: torch.dtype = DEFAULT_DTYPE):
        if rows < 0:
            raise RowRangeError(f"Number of rows must be non-negative, got {rows}.")
        if cols < 0:
            raise ColRangeError(f"Number of columns must be non-negative, got {cols}.")
        self._rows = rows
        self._cols = cols
        self.dtype = dtype
        self._elements: Dict[Tuple[int, int], float] = {}

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._cols

    @property
    def nnz(self) -> int:
        return len(self._elements)

    def _check(self, row: int, col: int) -> None:
        if not 0 <= row < self._rows:
            raise RowRangeError(f"row index {row} out of range [0, {self._rows}).")
        if not 0 <= col < self._cols:
            raise ColRangeError(f"col index {col} out of range [0, {self._cols}).")

    def at(self, row: int, col: int) -> float:
        self._check(row, col)
        return self._elements.get((row, col), 0.0)

    def set(self, row: int, col: int, value: float) -> None:
        """Sets the element at (`row`, `col`). Setting 0 removes the entry."""
        self._check(row, col)
        if value == 0:
            self._elements.pop((row, col), None)
        else:
            self._elements[(row, col)] = float(value)

    def to_dense(self) -> torch.Tensor:
        dense = torch.zeros(self.shape, dtype=self.dtype)
        for (i, j), v in self._elements.items():
            dense[i, j] = v
        return dense

    def to_coo(self) -> SparseCooMatrix:
        """Converts to a COO matrix with freshly allocated tensors, in row-major order."""
        keys = sorted(self._elements)
        rows = torch.tensor([i for i, _ in keys], dtype=INDEX_DTYPE)
        cols = torch.tensor([j for _, j in keys], dtype=INDEX_DTYPE)
        values = torch.tensor([self._elements[k] for k in keys], dtype=self.dtype)
        return SparseCooMatrix(values, rows, cols, self.shape)

    def to_csr(self) -> SparseCsrMatrix:
        return self.to_coo().to_csr()

    def to_csc(self) -> SparseCscMatrix:
        return self.to_coo().to_csc()

    def to_dok(self) -> 'SparseDokMatrix':
        return self

    def to_type(self, matrix_type: 'MatrixType') -> MatrixLike:
        return matrix_type.convert(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape}, nnz={self.nnz})"
