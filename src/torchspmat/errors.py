class SparseMatrixError(Exception):
    """Base class for errors raised by torchspmat matrices."""


class RowRangeError(SparseMatrixError, IndexError):
    """
    Raised when a row index falls outside ``[0, rows)``, or when a matrix is
    constructed with a negative number of rows.
    """


class ColRangeError(SparseMatrixError, IndexError):
    """
    Raised when a column index falls outside ``[0, cols)``, or when a matrix is
    constructed with a negative number of columns.
    """


class ShapeError(SparseMatrixError, ValueError):
    """Raised when the operands of a matrix product have incompatible dimensions."""
