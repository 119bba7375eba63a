import torch
import unittest
from torchspmat.sparse import SparseCooMatrix, SparseCsrMatrix, SparseCscMatrix, SparseDokMatrix

class TestSparseCooMatrix(unittest.TestCase):

    def setUp(self):
        """Set up common data for tests."""
        self.v = torch.tensor([1.0, 2.0, 3.0, 4.0, 5.0], dtype=torch.float64)
        self.r = torch.tensor([0, 0, 1, 2, 2], dtype=torch.long)
        self.c = torch.tensor([0, 2, 1, 0, 2], dtype=torch.long)
        self.s = (3, 4)
        self.expected_dense = torch.tensor([
            [1.0, 0.0, 2.0, 0.0],
            [0.0, 3.0, 0.0, 0.0],
            [4.0, 0.0, 5.0, 0.0]
        ], dtype=torch.float64)

        # Data for creating from torch sparse tensor
        indices_torch = torch.tensor([[0, 0, 1, 2, 2], [0, 2, 1, 0, 2]], dtype=torch.long)
        values_torch = torch.tensor([10., 20., 30., 40., 50.], dtype=torch.float64)
        self.torch_sparse_tensor_alt = torch.sparse_coo_tensor(indices_torch, values_torch, self.s).coalesce()
        self.expected_dense_alt = self.expected_dense * 10

    def test_coo_matrix_creation(self):
        """Tests basic creation of SparseCooMatrix."""
        coo_matrix = SparseCooMatrix(
            values=self.v,
            row_indices=self.r,
            col_indices=self.c,
            shape=self.s
        )
        self.assertIs(coo_matrix.values, self.v)
        self.assertIs(coo_matrix.row_indices, self.r)
        self.assertIs(coo_matrix.col_indices, self.c)
        self.assertEqual(coo_matrix.shape, self.s)
        self.assertEqual(coo_matrix.nnz, 5)

    def test_coo_to_dense(self):
        """Tests conversion of SparseCooMatrix to a dense tensor."""
        coo_matrix = SparseCooMatrix(self.v, self.r, self.c, self.s)
        self.assertTrue(torch.equal(coo_matrix.to_dense(), self.expected_dense))

    def test_coo_from_dense(self):
        coo_matrix = SparseCooMatrix.from_dense(self.expected_dense)
        self.assertTrue(torch.equal(coo_matrix.values, self.v))
        self.assertTrue(torch.equal(coo_matrix.row_indices, self.r))
        self.assertTrue(torch.equal(coo_matrix.col_indices, self.c))
        self.assertEqual(coo_matrix.shape, self.s)
        with self.assertRaisesRegex(ValueError, "2D tensor"):
            SparseCooMatrix.from_dense(self.v)

    def test_coo_to_torch_sparse_coo(self):
        """Tests conversion to PyTorch's sparse COO tensor."""
        coo_matrix = SparseCooMatrix(self.v, self.r, self.c, self.s)
        torch_sparse_coo = coo_matrix.to_torch_sparse_coo()
        self.assertEqual(torch_sparse_coo.layout, torch.sparse_coo)
        self.assertTrue(torch.equal(torch_sparse_coo.to_dense(), self.expected_dense))

        torch_sparse_coo_coalesced = torch_sparse_coo.coalesce()
        self.assertTrue(torch.equal(torch_sparse_coo_coalesced.values(), self.v))
        expected_indices = torch.stack([self.r, self.c])
        self.assertTrue(torch.equal(torch_sparse_coo_coalesced.indices(), expected_indices))
        self.assertEqual(tuple(torch_sparse_coo_coalesced.shape), self.s)

    def test_coo_from_torch_sparse_coo(self):
        """Tests creation from PyTorch's sparse COO tensor."""
        torch_sparse_tensor = self.torch_sparse_tensor_alt
        coo_from_torch = SparseCooMatrix.from_torch_sparse_coo(torch_sparse_tensor)

        self.assertTrue(torch.equal(coo_from_torch.values, torch_sparse_tensor.values()))
        self.assertTrue(torch.equal(coo_from_torch.row_indices, torch_sparse_tensor.indices()[0]))
        self.assertTrue(torch.equal(coo_from_torch.col_indices, torch_sparse_tensor.indices()[1]))
        self.assertEqual(coo_from_torch.shape, tuple(torch_sparse_tensor.shape))
        self.assertTrue(torch.equal(coo_from_torch.to_dense(), self.expected_dense_alt))

        with self.assertRaisesRegex(ValueError, "must be a PyTorch sparse COO tensor"):
            SparseCooMatrix.from_torch_sparse_coo(self.expected_dense)

    def test_from_torch_sparse_coo_shares_coalesced_indices(self):
        """Sorting a COO built from a coalesced tensor reorders that tensor's indices."""
        t = torch.sparse_coo_tensor(torch.tensor([[0, 1], [1, 0]]), torch.tensor([1.0, 2.0]), (2, 2)).coalesce()
        csc_matrix = SparseCooMatrix.from_torch_sparse_coo(t).to_csc()
        self.assertTrue(torch.equal(t.indices(), torch.tensor([[1, 0], [0, 1]])))
        self.assertTrue(torch.equal(t.values(), torch.tensor([2.0, 1.0])))
        self.assertTrue(torch.equal(csc_matrix.to_dense(), torch.tensor([[0.0, 1.0], [2.0, 0.0]])))

        t = torch.sparse_coo_tensor(torch.tensor([[0, 1], [1, 0]]), torch.tensor([1.0, 2.0]), (2, 2)).coalesce()
        SparseCooMatrix.from_torch_sparse_coo(t.clone()).to_csc()
        self.assertTrue(torch.equal(t.indices(), torch.tensor([[0, 1], [1, 0]])))

    def test_coo_validation_errors(self):
        """Tests that appropriate ValueErrors are raised for invalid inputs."""
        v, r, c, s = self.v, self.r, self.c, self.s

        with self.assertRaisesRegex(ValueError, "must be 1D tensors"):
            SparseCooMatrix(torch.tensor([[1.], [2.]]), r, c, s)
        with self.assertRaisesRegex(ValueError, "must have the same length"):
            SparseCooMatrix(v[:-1], r, c, s)
        with self.assertRaisesRegex(ValueError, "Shape must be a 2-tuple"):
            SparseCooMatrix(v, r, c, (3,))
        with self.assertRaisesRegex(ValueError, "Shape must be a 2-tuple"):
            SparseCooMatrix(v, r, c, (-1, 4))
        with self.assertRaisesRegex(ValueError, "out of bounds"):
            SparseCooMatrix(v, torch.tensor([0, 0, 1, 2, 3]), c, s) # Row index 3 is out for shape (3,4)
        with self.assertRaisesRegex(ValueError, "out of bounds"):
            SparseCooMatrix(v, r, torch.tensor([0, 0, 1, 0, 4]), s) # Col index 4 is out for shape (3,4)

        # Non-coalesced input to from_torch_sparse_coo is coalesced first
        indices_non_coalesced = torch.tensor([[0, 0, 0], [0, 1, 0]], dtype=torch.long)
        values_non_coalesced = torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64)
        torch_sparse_non_coalesced = torch.sparse_coo_tensor(indices_non_coalesced, values_non_coalesced, (2, 2))
        coo_from_non_coalesced = SparseCooMatrix.from_torch_sparse_coo(torch_sparse_non_coalesced)
        self.assertTrue(torch.equal(coo_from_non_coalesced.to_dense(), torch_sparse_non_coalesced.to_dense()))
        self.assertEqual(coo_from_non_coalesced.nnz, 2) # nnz reduced

    def test_sort_is_in_place_and_stable(self):
        coo_matrix = SparseCooMatrix(self.v, self.r, self.c, self.s)
        self.assertIs(coo_matrix.sort_by_col(), coo_matrix)
        self.assertIs(coo_matrix.values, self.v)
        self.assertTrue(torch.equal(self.c, torch.tensor([0, 0, 1, 2, 2])))
        self.assertTrue(torch.equal(self.r, torch.tensor([0, 2, 1, 0, 2])))
        self.assertTrue(torch.equal(self.v, torch.tensor([1.0, 4.0, 3.0, 2.0, 5.0])))

        coo_matrix.sort_by_row()
        self.assertTrue(torch.equal(self.v, torch.tensor([1.0, 2.0, 3.0, 4.0, 5.0])))
        self.assertTrue(torch.equal(coo_matrix.to_dense(), self.expected_dense))

    def test_to_csr(self):
        # entries deliberately out of row order
        v = torch.tensor([4.0, 1.0, 3.0])
        r = torch.tensor([2, 0, 1])
        c = torch.tensor([0, 0, 1])
        csr_matrix = SparseCooMatrix(v, r, c, self.s).to_csr()
        self.assertIsInstance(csr_matrix, SparseCsrMatrix)
        self.assertTrue(torch.equal(csr_matrix.indptr, torch.tensor([0, 1, 2, 3])))
        self.assertIs(csr_matrix.data, v)
        self.assertIs(csr_matrix.ind, c)
        self.assertTrue(torch.equal(v, torch.tensor([1.0, 3.0, 4.0])))
        self.assertEqual(csr_matrix.at(2, 0), 4.0)
        csr_matrix.validate()

    def test_to_csc(self):
        csc_matrix = SparseCooMatrix(self.v, self.r, self.c, self.s).to_csc()
        self.assertIsInstance(csc_matrix, SparseCscMatrix)
        self.assertTrue(torch.equal(csc_matrix.indptr, torch.tensor([0, 2, 3, 5, 5])))
        self.assertIs(csc_matrix.ind, self.r)
        self.assertIs(csc_matrix.data, self.v)
        self.assertTrue(torch.equal(csc_matrix.to_dense(), self.expected_dense))
        csc_matrix.validate()

    def test_to_dok_sums_duplicates(self):
        coo_matrix = SparseCooMatrix(torch.tensor([1.0, 2.0, -1.0]), torch.tensor([0, 0, 1]),
                                     torch.tensor([1, 1, 0]), (2, 2))
        dok = coo_matrix.to_dok()
        self.assertIsInstance(dok, SparseDokMatrix)
        self.assertEqual(dok.at(0, 1), 3.0)
        self.assertEqual(dok.at(1, 0), -1.0)
        self.assertEqual(dok.nnz, 2)
        self.assertTrue(torch.equal(dok.to_dense(), coo_matrix.to_dense()))

    def test_empty_coo_matrix(self):
        """Tests handling of empty SparseCooMatrix."""
        empty_coo = SparseCooMatrix(
            values=torch.empty(0, dtype=torch.float64),
            row_indices=torch.empty(0, dtype=torch.long),
            col_indices=torch.empty(0, dtype=torch.long),
            shape=(5, 5)
        )
        self.assertEqual(empty_coo.nnz, 0)
        self.assertEqual(empty_coo.shape, (5, 5))
        self.assertTrue(torch.equal(empty_coo.to_dense(), torch.zeros(5, 5, dtype=torch.float64)))

        torch_sparse_empty = empty_coo.to_torch_sparse_coo()
        self.assertEqual(torch_sparse_empty.layout, torch.sparse_coo)
        self.assertEqual(torch_sparse_empty._nnz(), 0)

        csr_matrix = empty_coo.to_csr()
        self.assertTrue(torch.equal(csr_matrix.indptr, torch.zeros(6, dtype=torch.long)))
        self.assertEqual(csr_matrix.nnz, 0)

        # Test from_torch_sparse_coo with an empty sparse tensor
        empty_torch_coo = torch.sparse_coo_tensor(size=(3, 3), dtype=torch.float64) # nnz = 0
        coo_from_empty_torch = SparseCooMatrix.from_torch_sparse_coo(empty_torch_coo)
        self.assertEqual(coo_from_empty_torch.nnz, 0)
        self.assertEqual(coo_from_empty_torch.shape, (3, 3))

    @unittest.skipIf(not torch.cuda.is_available(), "CUDA not available")
    def test_coo_cuda(self):
        """Tests CUDA functionality for SparseCooMatrix."""
        coo_cuda = SparseCooMatrix(self.v.cuda(), self.r.cuda(), self.c.cuda(), self.s)
        expected_dense_cuda = self.expected_dense.cuda()

        dense_cuda = coo_cuda.to_dense()
        self.assertEqual(dense_cuda.device.type, 'cuda')
        self.assertTrue(torch.equal(dense_cuda, expected_dense_cuda))
        self.assertTrue(torch.equal(coo_cuda.to_csr().to_dense(), expected_dense_cuda))

    def test_coo_dtype(self):
        """Tests dtype handling for SparseCooMatrix."""
        coo_f32 = SparseCooMatrix(self.v.to(torch.float32), self.r, self.c, self.s)
        self.assertEqual(coo_f32.to_dense().dtype, torch.float32)
        self.assertEqual(coo_f32.to_torch_sparse_coo().dtype, torch.float32)
        self.assertEqual(coo_f32.to_csr().data.dtype, torch.float32)

if __name__ == '__main__':
    unittest.main()
