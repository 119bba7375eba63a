# Sparse matrix formats for torchspmat

from ._matrix import Matrix, as_dense
from ._csr import SparseCsrMatrix
from ._csc import SparseCscMatrix
from ._coo import SparseCooMatrix
from ._dok import SparseDokMatrix
from ._dia import SparseDiaMatrix
from ._types import MatrixType

__all__ = [
    "Matrix",
    "as_dense",
    "SparseCsrMatrix",
    "SparseCscMatrix",
    "SparseCooMatrix",
    "SparseDokMatrix",
    "SparseDiaMatrix",
    "MatrixType",
]
