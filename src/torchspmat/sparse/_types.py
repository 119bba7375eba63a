import enum
import torch

from ._coo import SparseCooMatrix
from ._matrix import MatrixLike


class MatrixType(enum.Enum):
    """
    Selects a matrix format for generic conversions, e.g.
    ``csr.to_type(MatrixType.DENSE)`` or ``MatrixType.CSC.convert(dok)``.
    """
    DENSE = "dense"
    DOK = "dok"
    COO = "coo"
    CSR = "csr"
    CSC = "csc"

    def convert(self, matrix: MatrixLike) -> MatrixLike:
        """
        Converts `matrix` to this format, following the sharing rules of the
        source format's ``to_*`` method. Dense tensors convert through
        `SparseCooMatrix.from_dense`, or are returned as they are for DENSE.
        """
        if isinstance(matrix, torch.Tensor):
            if self is MatrixType.DENSE:
                return matrix
            matrix = SparseCooMatrix.from_dense(matrix)
        return getattr(matrix, f"to_{self.value}")()
