import logging
import torch
from typing import TYPE_CHECKING, Tuple

from ._compressed import _CompressedSparse, compress_dense
from ._matrix import MatrixLike, as_dense, dims
from ..errors import ColRangeError, RowRangeError, ShapeError
from ..utils.misc import DEFAULT_DTYPE, INDEX_DTYPE

if TYPE_CHECKING:
    from ._coo import SparseCooMatrix
    from ._csc import SparseCscMatrix
    from ._dia import SparseDiaMatrix
    from ._dok import SparseDokMatrix
    from ._types import MatrixType

logger = logging.getLogger(__name__)


class SparseCsrMatrix(_CompressedSparse):
    """
    Represents a sparse matrix in Compressed Sparse Row (CSR) format.

    Rather than storing the row index of every stored entry, the row indices are
    compressed into `indptr`: the entries of row ``i`` are
    ``ind[indptr[i]:indptr[i + 1]]`` (their columns) and the matching slice of `data`.
    CSR is poor for building matrices incrementally but good for arithmetic;
    build a `SparseDokMatrix` or `SparseCooMatrix` first and convert.

    Args:
        rows (int): Number of rows.
        cols (int): Number of columns.
        indptr (torch.Tensor): Compressed row pointers. Shape: (rows + 1,)
        ind (torch.Tensor): Column index of each stored entry. Shape: (nnz,)
        data (torch.Tensor): Value of each stored entry. Shape: (nnz,)

    The supplied tensors become the backing storage of the matrix without a copy.
    Their structure is not validated; see `validate`. The `crow_indices`,
    `col_indices` and `values` properties mirror the accessors of a torch sparse
    CSR tensor and return `indptr`, `ind` and `data` themselves.

    Raises:
        RowRangeError: If `rows` is negative.
        ColRangeError: If `cols` is negative.
    """
    def __init__(self, rows: int, cols: int,
                 indptr: torch.Tensor, ind: torch.Tensor, data: torch.Tensor):
        if rows < 0:
            raise RowRangeError(f"Number of rows must be non-negative, got {rows}.")
        if cols < 0:
            raise ColRangeError(f"Number of columns must be non-negative, got {cols}.")
        super().__init__(rows, cols, indptr, ind, data)

    @classmethod
    def empty(cls, rows: int, cols: int, dtype: torch.dtype = DEFAULT_DTYPE) -> 'SparseCsrMatrix':
        """Creates an all-zero matrix with no stored entries, e.g. as a `multiply` receiver."""
        return cls(rows, cols,
                   torch.zeros(max(rows, 0) + 1, dtype=INDEX_DTYPE),
                   torch.empty(0, dtype=INDEX_DTYPE),
                   torch.empty(0, dtype=dtype))

    @property
    def shape(self) -> Tuple[int, int]:
        return self._i, self._j

    @property
    def crow_indices(self) -> torch.Tensor:
        return self.indptr

    @property
    def col_indices(self) -> torch.Tensor:
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
        return self._at(row, col)

    def row_nnz(self, row: int) -> int:
        """
        Number of entries stored in `row`.

        Raises:
            RowRangeError: If `row` is out of range.
        """
        return self._segment_nnz(row)

    def transpose(self) -> 'SparseCscMatrix':
        """
        Returns the transpose as a CSC matrix sharing the same backing tensors:
        rows become columns and vice versa. Changes to either matrix are visible
        in the other.
        """
        from ._csc import SparseCscMatrix
        return SparseCscMatrix(self._j, self._i, self.indptr, self.ind, self.data)

    T = property(transpose)

    def to_dense(self) -> torch.Tensor:
        """
        Converts the matrix to a dense PyTorch tensor. The result does not share
        storage with the matrix.

        Returns:
            torch.Tensor: The dense representation of the matrix.
                Shape: (rows, cols)
        """
        dense = torch.zeros(self.shape, dtype=self.data.dtype, device=self.data.device)
        dense[self._major_indices(), self.ind] = self.data
        return dense

    def to_dok(self) -> 'SparseDokMatrix':
        """
        Converts the matrix to Dictionary Of Keys format. The result does not share
        storage with the matrix, and explicitly stored zeros are dropped.
        """
        from ._dok import SparseDokMatrix
        dok = SparseDokMatrix(self._i, self._j, dtype=self.data.dtype)
        for i, j, v in zip(self._major_indices().tolist(), self.ind.tolist(), self.data.tolist()):
            dok.set(i, j, v)
        return dok

    def to_coo(self) -> 'SparseCooMatrix':
        """
        Converts the matrix to COOrdinate format.

        Only the row indices are freshly allocated; the COO matrix's `col_indices`
        and `values` ARE this matrix's `ind` and `data`. Reordering the COO entries
        (as `SparseCooMatrix.to_csc` does) reorders them here too, leaving this
        matrix inconsistent with its `indptr`. Clone the result if you need an
        independent copy.
        """
        from ._coo import SparseCooMatrix
        return SparseCooMatrix(values=self.data, row_indices=self._major_indices(),
                               col_indices=self.ind, shape=self.shape)

    def to_csr(self) -> 'SparseCsrMatrix':
        return self

    def to_csc(self) -> 'SparseCscMatrix':
        """
        Converts the matrix to CSC format through a COO intermediate.

        The result shares `data` with this matrix, and the conversion sorts the shared
        tensors into column-major order in place: this matrix is corrupted afterwards.
        """
        logger.debug("CSR -> CSC through COO reorders the shared data of a %dx%d matrix in place", *self.shape)
        return self.to_coo().to_csc()

    def to_type(self, matrix_type: 'MatrixType') -> MatrixLike:
        """Converts the matrix to the format selected by `matrix_type`."""
        return matrix_type.convert(self)

    def to_torch_sparse_csr(self) -> torch.Tensor:
        """
        Converts this SparseCsrMatrix to a PyTorch sparse CSR tensor.

        Returns:
            torch.Tensor: A PyTorch sparse CSR tensor.
        """
        return torch.sparse_csr_tensor(
            crow_indices=self.indptr,
            col_indices=self.ind,
            values=self.data,
            size=self.shape,
            device=self.data.device,
            dtype=self.data.dtype
        )

    @classmethod
    def from_torch_sparse_csr(cls, tensor: torch.Tensor) -> 'SparseCsrMatrix':
        """
        Creates a SparseCsrMatrix from a PyTorch sparse CSR tensor.

        Args:
            tensor (torch.Tensor): A PyTorch sparse CSR tensor.

        Returns:
            SparseCsrMatrix: An instance of SparseCsrMatrix.

        Raises:
            ValueError: If the input tensor is not a sparse CSR tensor.
        """
        if tensor.layout != torch.sparse_csr:
            raise ValueError("Input tensor must be a sparse CSR tensor.")
        rows, cols = tensor.shape
        return cls(rows, cols, tensor.crow_indices(), tensor.col_indices(), tensor.values())

    def multiply(self, a: MatrixLike, b: MatrixLike) -> None:
        """
        Computes the matrix product ``a @ b`` and stores it in this matrix,
        replacing its dimensions and backing tensors.

        Only exactly non-zero results are stored. There is no tolerance, so values
        that nearly cancel are kept as small non-zero entries.

        Raises:
            ShapeError: If the columns of `a` do not match the rows of `b`. The
                matrix is left unmodified.
        """
        from ._dia import SparseDiaMatrix

        ar, ac = dims(a)
        br, bc = dims(b)
        if ac != br:
            raise ShapeError(f"Cannot multiply a {ar}x{ac} matrix by a {br}x{bc} matrix.")

        if isinstance(a, SparseDiaMatrix) and a.is_square:
            logger.debug("multiply: diagonal fast path, diagonal on the left (%dx%d @ %dx%d)", ar, ac, br, bc)
            self._mul_dia(a, b, trans=False)
            return
        if isinstance(b, SparseDiaMatrix) and b.is_square:
            logger.debug("multiply: diagonal fast path, diagonal on the right (%dx%d @ %dx%d)", ar, ac, br, bc)
            self._mul_dia(b, a, trans=True)
            return

        if isinstance(a, SparseCsrMatrix):
            logger.debug("multiply: CSR rows against dense columns (%dx%d @ %dx%d)", ar, ac, br, bc)
            rhs = as_dense(b)
            dtype = torch.promote_types(a.data.dtype, rhs.dtype)
            rhs = rhs.to(device=a.data.device, dtype=dtype)
            out = torch.zeros((ar, bc), dtype=dtype, device=a.data.device)
            # Row i accumulates data[k] * b[ind[k], :] over its stored entries k.
            out.index_add_(0, a._major_indices(), a.data.to(dtype).unsqueeze(1) * rhs[a.ind])
        else:
            logger.debug("multiply: dense rows against dense columns (%dx%d @ %dx%d)", ar, ac, br, bc)
            lhs = as_dense(a)
            rhs = as_dense(b)
            dtype = torch.promote_types(lhs.dtype, rhs.dtype)
            out = lhs.to(dtype) @ rhs.to(device=lhs.device, dtype=dtype)

        self._i, self._j = ar, bc
        self.indptr, self.ind, self.data = compress_dense(out)

    def _mul_dia(self, dia: 'SparseDiaMatrix', other: MatrixLike, trans: bool) -> None:
        """
        Stores the product of the diagonal matrix `dia` and `other` in this matrix.
        If `trans` is True, `other` was the left hand operand and each element is
        scaled by the diagonal value of its column; otherwise by that of its row.
        """
        raw = dia.diagonal()
        rows, cols = dims(other)

        if isinstance(other, SparseCsrMatrix):
            majors = other._major_indices()
            scale = raw.to(other.data.device)[other.ind if trans else majors]
            v = other.data * scale
            keep = v != 0
            indptr = torch.zeros(rows + 1, dtype=INDEX_DTYPE, device=other.data.device)
            indptr[1:] = torch.cumsum(torch.bincount(majors[keep], minlength=rows), dim=0)
            self._i, self._j = rows, cols
            self.indptr, self.ind, self.data = indptr, other.ind[keep], v[keep]
            return

        dense = as_dense(other)
        raw = raw.to(dense.device)
        scaled = dense * (raw.unsqueeze(0) if trans else raw.unsqueeze(1))
        self._i, self._j = rows, cols
        self.indptr, self.ind, self.data = compress_dense(scaled)

    def __matmul__(self, other: MatrixLike) -> 'SparseCsrMatrix':
        result = SparseCsrMatrix.empty(0, 0, dtype=self.data.dtype)
        result.multiply(self, other)
        return result

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"shape={self.shape}, "
                f"indptr={self.indptr}, "
                f"ind={self.ind}, "
                f"data={self.data})")
