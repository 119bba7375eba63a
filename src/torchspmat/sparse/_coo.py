import torch
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from ._csc import SparseCscMatrix
from ._csr import SparseCsrMatrix
from ._matrix import MatrixLike
from ..utils.misc import INDEX_DTYPE

if TYPE_CHECKING:
    from ._dok import SparseDokMatrix
    from ._types import MatrixType

@dataclass(eq=False)
class SparseCooMatrix:
    """
    Represents a sparse matrix in Coordinate (COO) format.

    Attributes:
        values (torch.Tensor): A 1D tensor containing the stored values of the sparse matrix.
            Shape: (nnz,)
        row_indices (torch.Tensor): A 1D tensor containing the row indices of the stored values.
            Shape: (nnz,)
        col_indices (torch.Tensor): A 1D tensor containing the column indices of the stored values.
            Shape: (nnz,)
        shape (Tuple[int, int]): A tuple representing the dimensions (rows, cols) of the sparse matrix.

    The tensors are used as given, and the conversions to compressed formats reorder
    them in place. When they were obtained from a compressed matrix's ``to_coo``,
    that reorders the compressed matrix's storage as well.
    """
    values: torch.Tensor
    row_indices: torch.Tensor
    col_indices: torch.Tensor
    shape: Tuple[int, int]

    def __post_init__(self):
        # Basic validation
        if not (self.values.ndim == 1 and
                self.row_indices.ndim == 1 and
                self.col_indices.ndim == 1):
            raise ValueError("values, row_indices, and col_indices must be 1D tensors.")
        if not (self.values.shape[0] == self.row_indices.shape[0] == self.col_indices.shape[0]):
            raise ValueError("values, row_indices, and col_indices must have the same length (nnz).")
        if not (len(self.shape) == 2 and self.shape[0] >= 0 and self.shape[1] >= 0):
            raise ValueError("Shape must be a 2-tuple of non-negative integers (rows, cols).")
        self.shape = (int(self.shape[0]), int(self.shape[1]))
        if self.row_indices.numel() > 0: # Check only if there are stored elements
            if not (self.row_indices.min() >= 0 and self.col_indices.min() >= 0 and
                    self.row_indices.max() < self.shape[0] and self.col_indices.max() < self.shape[1]):
                raise ValueError("Row/column indices are out of bounds for the given shape.")

    @classmethod
    def from_dense(cls, dense: torch.Tensor) -> 'SparseCooMatrix':
        """
        Creates a SparseCooMatrix holding the non-zero elements of a dense 2D tensor,
        in row-major order. The result does not share storage with `dense`.
        """
        if dense.ndim != 2:
            raise ValueError(f"Dense input must be a 2D tensor, got {dense.ndim}D.")
        indices = (dense != 0).nonzero().to(INDEX_DTYPE)
        row_indices = indices[:, 0].contiguous()
        col_indices = indices[:, 1].contiguous()
        return cls(dense[row_indices, col_indices], row_indices, col_indices, tuple(dense.shape))

    @property
    def nnz(self) -> int:
        return self.values.numel()

    def to_dense(self) -> torch.Tensor:
        """
        Converts the sparse COO matrix to a dense PyTorch tensor.
        Duplicate coordinates are summed.

        Returns:
            torch.Tensor: The dense representation of the matrix.
                Shape: (self.shape[0], self.shape[1])
        """
        return self.to_torch_sparse_coo().to_dense()

    def to_torch_sparse_coo(self) -> torch.Tensor:
        """
        Converts this SparseCooMatrix to a PyTorch sparse COO tensor.

        Returns:
            torch.Tensor: A PyTorch sparse COO tensor.
        """
        return torch.sparse_coo_tensor(
            indices=torch.stack([self.row_indices, self.col_indices]),
            values=self.values,
            size=self.shape,
            device=self.values.device, # Ensure device consistency
            dtype=self.values.dtype   # Ensure dtype consistency
        )

    @classmethod
    def from_torch_sparse_coo(cls, tensor: torch.Tensor) -> 'SparseCooMatrix':
        """
        Creates a SparseCooMatrix from a PyTorch sparse COO tensor.

        Args:
            tensor (torch.Tensor): A PyTorch sparse COO tensor.
                It is coalesced first.

        Returns:
            SparseCooMatrix: An instance of SparseCooMatrix.

        The result holds views of the coalesced tensor's indices and values. When
        `tensor` is already coalesced that is `tensor` itself, so `to_csc` (which
        sorts by column in place) leaves `tensor` flagged as coalesced with its
        indices no longer in row-major order. Clone `tensor` first to avoid that.

        Raises:
            ValueError: If the input tensor is not a sparse COO tensor.
        """
        if tensor.layout != torch.sparse_coo:
            raise ValueError("Input tensor must be a PyTorch sparse COO tensor.")

        tensor_coalesced = tensor.coalesce()
        indices = tensor_coalesced.indices()
        return cls(tensor_coalesced.values(), indices[0], indices[1], tuple(tensor_coalesced.shape))

    def sort_by_row(self) -> 'SparseCooMatrix':
        """Stable in-place sort of the entries by row index. Returns self."""
        self._reorder(torch.sort(self.row_indices, stable=True).indices)
        return self

    def sort_by_col(self) -> 'SparseCooMatrix':
        """Stable in-place sort of the entries by column index. Returns self."""
        self._reorder(torch.sort(self.col_indices, stable=True).indices)
        return self

    def _reorder(self, order: torch.Tensor) -> None:
        # copy_ writes through to any matrix sharing these tensors
        self.row_indices.copy_(self.row_indices[order])
        self.col_indices.copy_(self.col_indices[order])
        self.values.copy_(self.values[order])

    def _compressed_indptr(self, major: torch.Tensor, major_dim: int) -> torch.Tensor:
        indptr = torch.zeros(major_dim + 1, dtype=INDEX_DTYPE, device=major.device)
        indptr[1:] = torch.cumsum(torch.bincount(major, minlength=major_dim), dim=0)
        return indptr

    def to_csr(self) -> SparseCsrMatrix:
        """
        Converts to CSR format. The entries are sorted by row in place and the result
        shares `col_indices` and `values` with this matrix.
        """
        self.sort_by_row()
        rows, cols = self.shape
        indptr = self._compressed_indptr(self.row_indices, rows)
        return SparseCsrMatrix(rows, cols, indptr, self.col_indices, self.values)

    def to_csc(self) -> SparseCscMatrix:
        """
        Converts to CSC format. The entries are sorted by column in place and the result
        shares `row_indices` and `values` with this matrix.
        """
        self.sort_by_col()
        rows, cols = self.shape
        indptr = self._compressed_indptr(self.col_indices, cols)
        return SparseCscMatrix(rows, cols, indptr, self.row_indices, self.values)

    def to_dok(self) -> 'SparseDokMatrix':
        """Converts to an independent DOK matrix. Duplicate coordinates are summed."""
        from ._dok import SparseDokMatrix
        dok = SparseDokMatrix(self.shape[0], self.shape[1], dtype=self.values.dtype)
        for i, j, v in zip(self.row_indices.tolist(), self.col_indices.tolist(), self.values.tolist()):
            dok.set(i, j, dok.at(i, j) + v)
        return dok

    def to_coo(self) -> 'SparseCooMatrix':
        return self

    def to_type(self, matrix_type: 'MatrixType') -> MatrixLike:
        return matrix_type.convert(self)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"values={self.values}, "
                f"row_indices={self.row_indices}, "
                f"col_indices={self.col_indices}, "
                f"shape={self.shape})")
