"""
Tests for ArrayFactors construction, materialization and replacement.
"""

import numpy as np
import pytest

from arrayfactors import (
    ArrayFactorsError,
    ArrayFactors,
    DimIndices,
    DimensionMismatchError,
    OwnershipError,
    PromotionError,
    UnassignedDimensionError,
)


class TestConstruction:
    def test_default_ownership(self):
        af = ArrayFactors([[1, 2, 3], [4, 5]])

        assert af.size == (3, 2)
        assert af.ndim == 2
        assert len(af) == 2
        assert af.di == DimIndices([[0], [1]])

    def test_default_equals_explicit(self):
        factors = [np.array([1.0, 2.0]), np.array([3.0, 4.0, 5.0]), np.array([6.0, 7.0])]
        default = ArrayFactors(factors)
        explicit = ArrayFactors(factors, DimIndices([[0], [1], [2]]))

        assert default.size == explicit.size
        assert default.di == explicit.di
        assert np.array_equal(default.to_array(), explicit.to_array())

    def test_raw_dims_wrapped(self):
        af = ArrayFactors([[1, 2, 3], [[4, 5], [6, 7]]], [1, [0, 2]])

        assert isinstance(af.di, DimIndices)
        assert af.size == (2, 3, 2)

    def test_shared_dimension_same_size(self):
        af = ArrayFactors([np.ones((2, 3)), np.ones((3, 4))], [[0, 1], [1, 2]])
        assert af.size == (2, 3, 4)

    def test_shared_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError) as exc:
            ArrayFactors([np.ones((2, 3)), np.ones((4, 4))], [[0, 1], [1, 2]])

        assert exc.value.dim == 1
        assert exc.value.expected == 3
        assert exc.value.found == 4
        assert "dimension 1: 3 and 4" in str(exc.value)

    def test_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            ArrayFactors([np.ones(2), np.ones(3)], [[0], [0]])

    def test_rank_mismatch_raises(self):
        with pytest.raises(OwnershipError) as exc:
            ArrayFactors([np.ones(2), np.ones((2, 2))], [[0], [1]])
        assert exc.value.factor == 1

    def test_factor_count_mismatch_raises(self):
        with pytest.raises(OwnershipError):
            ArrayFactors([np.ones(2)], [[0], [1]])

    def test_unassigned_dimension_raises(self):
        with pytest.raises(UnassignedDimensionError):
            ArrayFactors([np.ones(2), np.ones(3)], [[0], [2]])

    def test_duplicate_in_factor_raises(self):
        with pytest.raises(OwnershipError):
            ArrayFactors([np.ones((2, 2))], [[0, 0]])

    def test_no_factors_raises(self):
        with pytest.raises(OwnershipError):
            ArrayFactors([])

    def test_non_numeric_raises(self):
        with pytest.raises(PromotionError):
            ArrayFactors([np.array(["a", "b"]), np.array([1, 2])])

    def test_ragged_factor_raises(self):
        with pytest.raises(ArrayFactorsError):
            ArrayFactors([[[1, 2], [3]], [4, 5]])

    def test_huge_identifier_raises(self):
        with pytest.raises(UnassignedDimensionError) as exc:
            ArrayFactors([[1, 2], [3, 4]], [[0], [5_000_000]])
        assert len(exc.value.missing) == 10

    def test_input_not_aliased(self):
        a = np.array([1.0, 2.0])
        af = ArrayFactors([a, np.array([3.0])])
        a[0] = 100.0

        assert af[0][0] == 1.0
        with pytest.raises(ValueError):
            af[0][0] = 5.0


class TestPromotion:
    def test_int_float(self):
        af = ArrayFactors([np.array([1, 2, 3], dtype=np.int64), np.array([0.5, 1.5])])
        M = af.to_array()

        assert af.dtype == np.float64
        assert M.dtype == np.float64
        assert np.allclose(M, np.outer([1, 2, 3], [0.5, 1.5]))
        assert all(f.dtype == np.float64 for f in af.factors)

    def test_int_only(self):
        af = ArrayFactors([[1, 2, 3], [4, 5]])
        assert af.dtype.kind == "i"
        assert af.to_array().dtype == af.dtype

    def test_complex(self):
        af = ArrayFactors([np.array([1j, 2]), np.array([1.0, 2.0])])
        assert af.dtype.kind == "c"
        assert np.allclose(af.to_array(), [[1j, 2j], [2, 4]])


class TestMaterialize:
    def test_outer_product_example(self):
        af = ArrayFactors([[1, 2, 3], [4, 5]])
        M = af.to_array()

        assert M.shape == (3, 2)
        assert M.tolist() == [[4, 5], [8, 10], [12, 15]]

    def test_three_vectors(self):
        af = ArrayFactors([[1, 2, 3], [4, 5], [6, 7]])
        M = af.to_array()

        assert M.shape == (3, 2, 2)
        assert M[:, :, 0].tolist() == [[24, 30], [48, 60], [72, 90]]
        assert M[:, :, 1].tolist() == [[28, 35], [56, 70], [84, 105]]

    def test_outer_product_matches_einsum(self):
        rng = np.random.default_rng(0)
        a, b, c = rng.random(3), rng.random(4), rng.random(2)
        af = ArrayFactors([a, b, c])

        assert np.allclose(af.to_array(), np.einsum("i,j,k->ijk", a, b, c))

    def test_non_contiguous_example(self):
        A = np.array([1, 2, 3])
        B = np.array([[4, 5], [6, 7]])
        af = ArrayFactors([A, B], DimIndices([1, [0, 2]]))
        M = af.to_array()

        assert af.size == (2, 3, 2)
        assert M.shape == (2, 3, 2)
        for i in range(2):
            for j in range(3):
                for k in range(2):
                    assert M[i, j, k] == B[i, k] * A[j]
        assert M[:, :, 0].tolist() == [[4, 8, 12], [6, 12, 18]]
        assert M[:, :, 1].tolist() == [[5, 10, 15], [7, 14, 21]]

    def test_transposed_ownership(self):
        B = np.arange(6).reshape(3, 2)
        af = ArrayFactors([B], [[1, 0]])

        assert af.size == (2, 3)
        assert np.array_equal(af.to_array(), B.T)

    def test_shared_dimension_product(self):
        A = np.array([[1.0, 2.0], [3.0, 4.0]])
        B = np.array([[5.0, 6.0, 7.0], [8.0, 9.0, 10.0]])
        af = ArrayFactors([A, B], [[0, 1], [1, 2]])

        assert np.allclose(af.to_array(), np.einsum("ij,jk->ijk", A, B))

    def test_repeated_calls_identical(self):
        rng = np.random.default_rng(1)
        af = ArrayFactors([rng.random(5), rng.random((4, 3))], [[0], [2, 1]])

        first = af.to_array()
        second = af.to_array()
        assert np.array_equal(first, second)
        assert first is not second

    def test_result_is_writable_copy(self):
        af = ArrayFactors([[1.0, 2.0], [3.0]])
        M = af.to_array()
        M[0, 0] = -1.0

        assert af.to_array()[0, 0] == 3.0

    def test_numpy_protocol(self):
        af = ArrayFactors([[1, 2], [3, 4]])

        assert np.array_equal(np.asarray(af), af.to_array())
        assert np.asarray(af, dtype=np.float32).dtype == np.float32

    def test_no_copy_conversion_raises(self):
        af = ArrayFactors([[1, 2], [3, 4]])
        with pytest.raises(ValueError):
            af.__array__(copy=False)
        assert np.array_equal(af.__array__(copy=True), af.to_array())

    def test_align_margins_shapes(self):
        af = ArrayFactors([[1, 2, 3], [[4, 5], [6, 7]]], [1, [0, 2]])
        aligned = af.align_margins()

        assert [a.shape for a in aligned] == [(2, 3, 2), (2, 3, 2)]

    def test_scalar_factor(self):
        af = ArrayFactors([np.array(2.0), np.array([1.0, 3.0])], [[], [0]])
        assert af.to_array().tolist() == [2.0, 6.0]


class TestReplacement:
    def test_set_factor(self):
        af = ArrayFactors([[1.0, 2.0], [3.0, 4.0]])
        af.set_factor(1, [10.0, 20.0])

        assert af.to_array().tolist() == [[10.0, 20.0], [20.0, 40.0]]

    def test_set_factor_casts_int(self):
        af = ArrayFactors([[1.0, 2.0], [3.0, 4.0]])
        af.set_factor(0, [1, 1])

        assert af[0].dtype == np.float64

    def test_set_factor_wrong_shape_raises(self):
        af = ArrayFactors([[1.0, 2.0], [3.0, 4.0]])
        with pytest.raises(DimensionMismatchError):
            af.set_factor(0, [1.0, 2.0, 3.0])
        with pytest.raises(OwnershipError):
            af.set_factor(0, [[1.0, 2.0]])

    def test_set_factor_lossy_kind_raises(self):
        af = ArrayFactors([[1, 2], [3, 4]])
        with pytest.raises(PromotionError):
            af.set_factor(0, [0.5, 0.5])

    def test_set_factor_index_raises(self):
        af = ArrayFactors([[1, 2]])
        with pytest.raises(IndexError):
            af.set_factor(3, [1, 2])

    def test_replace_factor_keeps_original(self):
        af = ArrayFactors([[1, 2], [3, 4]])
        new = af.replace_factor(0, [0, 1])

        assert af.to_array().tolist() == [[3, 4], [6, 8]]
        assert new.to_array().tolist() == [[0, 0], [3, 4]]
        assert new.di == af.di
        assert new.size == af.size

    def test_factor_shape(self):
        af = ArrayFactors([[1, 2, 3], [[4, 5], [6, 7]]], [1, [0, 2]])
        assert af.factor_shape(0) == (3,)
        assert af.factor_shape(1) == (2, 2)


class TestDiagnostics:
    def test_str(self):
        af = ArrayFactors([[1, 2, 3], [[4, 5], [6, 7]]], [1, [0, 2]])
        text = str(af)

        assert text.startswith("Factors for 3D array of size (2, 3, 2):")
        assert "  [1]: [1 2 3]" in text
        assert "  [0, 2]: [[4 5]" in text

    def test_repr(self):
        af = ArrayFactors([[1, 2, 3], [4, 5]])
        assert repr(af).startswith("ArrayFactors(size=(3, 2)")
