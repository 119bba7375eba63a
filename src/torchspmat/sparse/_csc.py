import logging
import torch
from typing import TYPE_CHECKING, Tuple

from ._compressed import _CompressedSparse
from ._csr import SparseCsrMatrix
from ._matrix import MatrixLike
from ..errors import ColRangeError, RowRangeError

if TYPE_CHECKING:
    from ._coo import SparseCooMatrix
    from ._dok import SparseDokMatrix
    from ._types import MatrixType

logger = logging.getLogger(__name__)


class SparseCscMatrix(_CompressedSparse):
    """
    Represents a sparse matrix in Compressed Sparse Column (CSC) format.

    The column-major sibling of `SparseCsrMatrix`: `indptr` compresses the column
    indices, so the entries of column ``j`` are ``ind[indptr[j]:indptr[j + 1]]``
    (their rows) and the matching slice of `data`. A CSC matrix is the transpose
    of a CSR matrix over the same tensors.

    Args:
        rows (int): Number of rows.
        cols (int): Number of columns.
        indptr (torch.Tensor): Compressed column pointers. Shape: (cols + 1,)
        ind (torch.Tensor): Row index of each stored entry. Shape: (nnz,)
        data (torch.Tensor): Value of each stored entry. Shape: (nnz,)

    The supplied tensors become the backing storage of the matrix without a copy.
    The `ccol_indices`, `row_indices` and `values` properties mirror the accessors
    of a torch sparse CSC tensor and return `indptr`, `ind` and `data` themselves.

    Raises:
        RowRangeError: If `rows` is negative.
        ColRangeError: If `cols` is negative.
    """
    _major_error = ColRangeError
    _minor_error = RowRangeError
    _major_name = "cols"
    _minor_name = "rows"

    def __init__(self, rows: int, cols: int,
                 indptr: torch.Tensor, ind: torch.Tensor, data: torch.Tensor):
        if rows < 0:
            raise RowRangeError(f"Number of rows must be non-negative, got {rows}.")
        if cols < 0:
            raise ColRangeError(f"Number of columns must be non-negative, got {cols}.")
        super().__init__(cols, rows, indptr, ind, data)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._j, self._i

    @property
    def ccol_indices(self) -> torch.Tensor:
        return self.indptr

    @property
    def row_indices(self) -> torch.Tensor:
        return self.ind

    @property
    def values(self) -> torch.Tensor:
        return self.data

    def at(self, row: int, col: int) -> float:
        """
        Returns the element at (`row`, `col`), or 0.0 if nothing is stored there.

        Raises:
            RowRangeError, ColRangeError: If the coordinates fall outside the matrix.
        """
        return self._at(col, row)

    def col_nnz(self, col: int) -> int:
        """Number of entries stored in `col`. Raises ColRangeError if `col` is out of range."""
        return self._segment_nnz(col)

    def transpose(self) -> SparseCsrMatrix:
        """
        Returns the transpose as a CSR matrix sharing the same backing tensors.
        Changes to either matrix are visible in the other.
        """
        return SparseCsrMatrix(self._i, self._j, self.indptr, self.ind, self.data)

    T = property(transpose)

    def to_dense(self) -> torch.Tensor:
        """Converts the matrix to a dense tensor that does not share storage with it."""
        dense = torch.zeros(self.shape, dtype=self.data.dtype, device=self.data.device)
        dense[self.ind, self._major_indices()] = self.data
        return dense

    def to_dok(self) -> 'SparseDokMatrix':
        """Converts the matrix to an independent DOK matrix, dropping explicitly stored zeros."""
        from ._dok import SparseDokMatrix
        dok = SparseDokMatrix(self._j, self._i, dtype=self.data.dtype)
        for j, i, v in zip(self._major_indices().tolist(), self.ind.tolist(), self.data.tolist()):
            dok.set(i, j, v)
        return dok

    def to_coo(self) -> 'SparseCooMatrix':
        """
        Converts the matrix to COOrdinate format.

        Only the column indices are freshly allocated; the COO matrix's `row_indices`
        and `values` ARE this matrix's `ind` and `data`, so reordering the COO
        entries (e.g. `SparseCooMatrix.to_csr`) corrupts this matrix.
        """
        from ._coo import SparseCooMatrix
        return SparseCooMatrix(values=self.data, row_indices=self.ind,
                               col_indices=self._major_indices(), shape=self.shape)

    def to_csr(self) -> SparseCsrMatrix:
        """
        Converts the matrix to CSR format through a COO intermediate.

        The result shares `data` with this matrix, and the conversion sorts the shared
        tensors into row-major order in place: this matrix is corrupted afterwards.
        """
        logger.debug("CSC -> CSR through COO reorders the shared data of a %dx%d matrix in place", *self.shape)
        return self.to_coo().to_csr()

    def to_csc(self) -> 'SparseCscMatrix':
        return self

    def to_type(self, matrix_type: 'MatrixType') -> MatrixLike:
        return matrix_type.convert(self)

    def to_torch_sparse_csc(self) -> torch.Tensor:
        """Converts this SparseCscMatrix to a PyTorch sparse CSC tensor sharing its tensors."""
        return torch.sparse_csc_tensor(
            ccol_indices=self.indptr,
            row_indices=self.ind,
            values=self.data,
            size=self.shape,
            device=self.data.device,
            dtype=self.data.dtype
        )

    @classmethod
    def from_torch_sparse_csc(cls, tensor: torch.Tensor) -> 'SparseCscMatrix':
        """
        Creates a SparseCscMatrix from a PyTorch sparse CSC tensor.

        Raises:
            ValueError: If the input tensor is not a sparse CSC tensor.
        """
        if tensor.layout != torch.sparse_csc:
            raise ValueError("Input tensor must be a sparse CSC tensor.")
        rows, cols = tensor.shape
        return cls(rows, cols, tensor.ccol_indices(), tensor.row_indices(), tensor.values())

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"shape={self.shape}, "
                f"indptr={self.indptr}, "
                f"ind={self.ind}, "
                f"data={self.data})")
