# Top-level __init__.py for torchspmat package

# Sparse formats
from .sparse import (
    Matrix, as_dense,
    SparseCsrMatrix, SparseCscMatrix,
    SparseCooMatrix, SparseDokMatrix, SparseDiaMatrix,
    MatrixType,
)

# Errors
from .errors import SparseMatrixError, RowRangeError, ColRangeError, ShapeError

# Configuration
from .utils.misc import DEFAULT_DTYPE, INDEX_DTYPE

__all__ = [
    "Matrix", "as_dense",
    "SparseCsrMatrix", "SparseCscMatrix",
    "SparseCooMatrix", "SparseDokMatrix", "SparseDiaMatrix",
    "MatrixType",
    "SparseMatrixError", "RowRangeError", "ColRangeError", "ShapeError",
    "DEFAULT_DTYPE", "INDEX_DTYPE",
]

__version__ = "0.1.0"
