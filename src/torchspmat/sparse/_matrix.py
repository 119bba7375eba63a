import torch
from typing import Protocol, Tuple, Union, runtime_checkable

from ..utils.misc import DEFAULT_DTYPE


@runtime_checkable
class Matrix(Protocol):
    """
    The minimal capability every matrix operand must offer: its dimensions and
    random access to single elements. All sparse formats in this package
    satisfy it; dense operands are plain 2D ``torch.Tensor`` objects instead.
    """
    @property
    def shape(self) -> Tuple[int, int]: ...

    def at(self, row: int, col: int) -> float: ...


MatrixLike = Union[torch.Tensor, Matrix]


def dims(m: MatrixLike) -> Tuple[int, int]:
    """
    Returns the (rows, cols) dimensions of a dense tensor or a sparse matrix.

    Raises:
        ValueError: If `m` is a tensor that is not 2D.
    """
    if isinstance(m, torch.Tensor) and m.ndim != 2:
        raise ValueError(f"Dense operands must be 2D tensors, got {m.ndim}D.")
    rows, cols = m.shape
    return int(rows), int(cols)


def as_dense(m: MatrixLike) -> torch.Tensor:
    """
    Materializes any matrix operand as a dense 2D tensor.

    Dense tensors are returned as they are (no copy). Formats offering
    ``to_dense`` use it; anything else is read element by element through ``at``.
    """
    if isinstance(m, torch.Tensor):
        dims(m)
        return m
    if hasattr(m, "to_dense"):
        return m.to_dense()
    rows, cols = dims(m)
    dense = torch.zeros((rows, cols), dtype=DEFAULT_DTYPE)
    for i in range(rows):
        for j in range(cols):
            dense[i, j] = m.at(i, j)
    return dense
