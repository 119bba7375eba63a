import torch
from typing import Tuple, Type

from ..errors import ColRangeError, RowRangeError
from ..utils.misc import INDEX_DTYPE


class _CompressedSparse:
    """
    Storage shared by the compressed sparse formats (CSR and CSC).

    The core only knows a "major" and a "minor" axis. CSR maps them to
    (rows, cols) and CSC to (cols, rows); the subclasses remap public
    (row, col) coordinates before calling into the core.

    Attributes:
        indptr (torch.Tensor): Compressed major-axis pointers. ``indptr[k]`` is the number of
            stored entries before major index ``k``. Shape: (major_dim + 1,)
        ind (torch.Tensor): Minor-axis index of each stored entry. Shape: (nnz,)
        data (torch.Tensor): Value of each stored entry, aligned with `ind`. Shape: (nnz,)

    The three tensors are used as backing storage as given: they are never
    copied, so writes through either the tensors or the matrix are visible to both.
    """
    _major_error: Type[IndexError] = RowRangeError
    _minor_error: Type[IndexError] = ColRangeError
    _major_name = "rows"
    _minor_name = "cols"

    def __init__(self, major_dim: int, minor_dim: int,
                 indptr: torch.Tensor, ind: torch.Tensor, data: torch.Tensor):
        self._i = major_dim
        self._j = minor_dim
        self.indptr = indptr
        self.ind = ind
        self.data = data

    @property
    def nnz(self) -> int:
        """Number of stored entries, explicitly stored zeros included."""
        return self.data.numel()

    def _at(self, major: int, minor: int) -> float:
        if not 0 <= major < self._i:
            raise self._major_error(f"{self._major_name[:-1]} index {major} out of range [0, {self._i}).")
        if not 0 <= minor < self._j:
            raise self._minor_error(f"{self._minor_name[:-1]} index {minor} out of range [0, {self._j}).")

        # TODO: binary search once segments are guaranteed to be sorted.
        start, end = int(self.indptr[major]), int(self.indptr[major + 1])
        hits = (self.ind[start:end] == minor).nonzero()
        if hits.numel() == 0:
            return 0.0
        return self.data[start + int(hits[0])].item()

    def _segment_nnz(self, major: int) -> int:
        if not 0 <= major < self._i:
            raise self._major_error(f"{self._major_name[:-1]} index {major} out of range [0, {self._i}).")
        return int(self.indptr[major + 1] - self.indptr[major])

    def _major_indices(self) -> torch.Tensor:
        """
        Expands `indptr` into a freshly allocated tensor holding the major index
        of every stored entry. Shape: (nnz,)
        """
        counts = (self.indptr[1:] - self.indptr[:-1]).to(INDEX_DTYPE)
        majors = torch.arange(self._i, dtype=INDEX_DTYPE, device=self.indptr.device)
        return torch.repeat_interleave(majors, counts)

    def validate(self) -> None:
        """
        Checks the structural invariants of the backing tensors.

        Construction never validates, so lookups on malformed storage are
        undefined; call this to fail early instead.

        Raises:
            ValueError: If any invariant is violated.
        """
        if not (self.data.ndim == 1 and self.ind.ndim == 1 and self.indptr.ndim == 1):
            raise ValueError("data, ind, and indptr must be 1D tensors.")

        if not (self.data.shape[0] == self.ind.shape[0]):
            raise ValueError("data and ind must have the same length (nnz).")

        if not (self.indptr.shape[0] == self._i + 1):
            raise ValueError(f"indptr must have length num_{self._major_name} + 1 ({self._i + 1}), "
                             f"got {self.indptr.shape[0]}.")

        if not (self.indptr[0] == 0):
            raise ValueError("First element of indptr must be 0.")
        if not (self.indptr[-1] == self.data.shape[0]):
            raise ValueError(f"Last element of indptr must be nnz ({self.data.shape[0]}), got {int(self.indptr[-1])}.")
        if not torch.all(self.indptr[:-1] <= self.indptr[1:]):
            raise ValueError("indptr must be monotonically non-decreasing.")

        if self.ind.numel() > 0:
            if not (self.ind.min() >= 0 and self.ind.max() < self._j):
                raise ValueError(f"Indices are out of bounds for {self._j} {self._minor_name}.")


def compress_dense(dense: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """
    Builds row-major compressed (indptr, ind, data) tensors holding the exactly
    non-zero elements of a dense 2D tensor, in row-then-column order.
    """
    mask = dense != 0
    indptr = torch.zeros(dense.shape[0] + 1, dtype=INDEX_DTYPE, device=dense.device)
    indptr[1:] = torch.cumsum(mask.sum(dim=1), dim=0)
    ind = mask.nonzero()[:, 1].to(INDEX_DTYPE)
    data = dense[mask]
    return indptr, ind, data
