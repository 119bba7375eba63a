import logging
import torch
from torchspmat.sparse import SparseDokMatrix, SparseDiaMatrix, SparseCsrMatrix, MatrixType
from torchspmat.utils.misc import DEFAULT_DTYPE

logging.basicConfig(level=logging.DEBUG) # Shows which multiply algorithm is selected

# 1. Build a matrix element by element, then compress it
dok = SparseDokMatrix(3, 4)
dok.set(0, 0, 1.0)
dok.set(0, 2, 2.0)
dok.set(1, 1, 3.0)
dok.set(2, 0, 4.0)
dok.set(2, 2, 5.0)
a = dok.to_csr()
print("CSR:", a)
print("Dense:\n", a.to_dense())
print("Stored in row 2:", a.row_nnz(2))

# 2. Transposing is free: the CSC view shares a's tensors
a_t = a.transpose()
print("Transpose shape:", a_t.shape, "shares data:", a_t.data is a.data)

# 3. Multiply by a dense matrix and by a diagonal matrix
b = torch.tensor([[1.0, 0.0], [0.0, 1.0], [1.0, 0.0], [0.0, 0.0]], dtype=DEFAULT_DTYPE)
c = SparseCsrMatrix.empty(0, 0)
c.multiply(a, b)
print("A @ B:\n", c.to_dense())

d = SparseDiaMatrix(3, 3, torch.tensor([2.0, 0.0, -1.0], dtype=DEFAULT_DTYPE))
c.multiply(d, a)
print("D @ A:\n", c.to_dense(), "\nnnz:", c.nnz)
assert torch.equal(c.to_dense(), d.to_dense() @ a.to_dense())

# 4. Conversions through COO share storage: clone first to keep `a` intact
independent = SparseCsrMatrix(*a.shape, a.indptr.clone(), a.ind.clone(), a.data.clone())
csc = independent.to_type(MatrixType.CSC)
print("CSC dense matches:", torch.equal(csc.to_dense(), a.to_dense()))
