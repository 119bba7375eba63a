import torch
from typing import TYPE_CHECKING, Tuple

from ._coo import SparseCooMatrix
from ._csc import SparseCscMatrix
from ._csr import SparseCsrMatrix
from ._dok import SparseDokMatrix
from ._matrix import MatrixLike
from ..errors import ColRangeError, RowRangeError
from ..utils.misc import INDEX_DTYPE

if TYPE_CHECKING:
    from ._types import MatrixType


class SparseDiaMatrix:
    """
    A diagonal matrix: only the main diagonal is stored.

    `SparseCsrMatrix.multiply` recognises square diagonal operands and scales the
    other operand instead of running a general product.

    Args:
        rows (int): Number of rows.
        cols (int): Number of columns.
        values (torch.Tensor): The diagonal values. Shape: (min(rows, cols),)
    """
    def __init__(self, rows: int, cols: int, values: torch.Tensor):
        if rows < 0:
            raise RowRangeError(f"Number of rows must be non-negative, got {rows}.")
        if cols < 0:
            raise ColRangeError(f"Number of columns must be non-negative, got {cols}.")
        if not (values.ndim == 1 and values.shape[0] == min(rows, cols)):
            raise ValueError(f"values must be a 1D tensor of length {min(rows, cols)}, got shape {tuple(values.shape)}.")
        self._rows = rows
        self._cols = cols
        self.values = values

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._cols

    @property
    def nnz(self) -> int:
        return self.values.numel()

    @property
    def is_square(self) -> bool:
        return self._rows == self._cols

    def diagonal(self) -> torch.Tensor:
        """Returns the diagonal values (the backing tensor, not a copy)."""
        return self.values

    def at(self, row: int, col: int) -> float:
        if not 0 <= row < self._rows:
            raise RowRangeError(f"row index {row} out of range [0, {self._rows}).")
        if not 0 <= col < self._cols:
            raise ColRangeError(f"col index {col} out of range [0, {self._cols}).")
        if row != col:
            return 0.0
        return self.values[row].item()

    def to_dense(self) -> torch.Tensor:
        dense = torch.zeros(self.shape, dtype=self.values.dtype, device=self.values.device)
        dense.diagonal().copy_(self.values)
        return dense

    def to_coo(self) -> SparseCooMatrix:
        """Converts to COO format. The index tensors are fresh; `values` is shared."""
        idx = torch.arange(self.nnz, dtype=INDEX_DTYPE, device=self.values.device)
        return SparseCooMatrix(self.values, idx, idx.clone(), self.shape)

    def to_csr(self) -> SparseCsrMatrix:
        return self.to_coo().to_csr()

    def to_csc(self) -> SparseCscMatrix:
        return self.to_coo().to_csc()

    def to_dok(self) -> SparseDokMatrix:
        dok = SparseDokMatrix(self._rows, self._cols, dtype=self.values.dtype)
        for i, v in enumerate(self.values.tolist()):
            dok.set(i, i, v)
        return dok

    def to_type(self, matrix_type: 'MatrixType') -> MatrixLike:
        return matrix_type.convert(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape}, values={self.values})"
