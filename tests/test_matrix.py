import random

import numpy as np
import pytest

from studyset.perceptron.matrix import Matrix

SQUARE = [[2, 5, 7], [6, 3, 4], [5, -2, -3]]


def test_default_is_two_by_two_zeros():
    matrix = Matrix()
    assert (matrix.rows, matrix.cols) == (2, 2)
    assert matrix.tolist() == [[0.0, 0.0], [0.0, 0.0]]


@pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (-1, 2)])
def test_rejects_non_positive_size(rows, cols):
    with pytest.raises(ValueError):
        Matrix(rows, cols)


def test_set_and_get_item():
    matrix = Matrix(2, 3)
    matrix[1, 2] = 4.5
    assert matrix[1, 2] == 4.5
    assert matrix[0, 0] == 0.0


@pytest.mark.parametrize("index", [(2, 0), (0, 3), (-1, 0), (0, -1)])
def test_index_out_of_range(index):
    matrix = Matrix(2, 3)
    with pytest.raises(IndexError):
        _ = matrix[index]
    with pytest.raises(IndexError):
        matrix[index] = 1.0
    assert matrix.tolist() == [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]


def test_add_then_subtract_round_trip():
    a = Matrix.from_rows([[1, 2], [3, 4]])
    b = Matrix.from_rows([[0.5, -1], [7, 2]])
    assert (a + b) - b == a
    assert a + b == b + a


def test_add_size_mismatch():
    with pytest.raises(ValueError):
        Matrix(2, 2) + Matrix(2, 3)
    with pytest.raises(ValueError):
        Matrix(2, 2) - Matrix(3, 2)


def test_in_place_add_keeps_object():
    a = Matrix.from_rows([[1, 2], [3, 4]])
    original = a
    a += Matrix.from_rows([[1, 1], [1, 1]])
    assert a is original
    assert a == Matrix.from_rows([[2, 3], [4, 5]])
    a -= Matrix.from_rows([[1, 1], [1, 1]])
    assert a == Matrix.from_rows([[1, 2], [3, 4]])


def test_multiply_by_identity():
    a = Matrix.from_rows(SQUARE)
    identity = Matrix.from_rows(np.eye(3))
    assert a * identity == a
    assert identity * a == a


def test_matrix_product_shape():
    product = Matrix(2, 3) * Matrix(3, 4)
    assert (product.rows, product.cols) == (2, 4)


def test_matrix_product_mismatch():
    with pytest.raises(ValueError):
        Matrix(2, 3) * Matrix(2, 3)


def test_in_place_matrix_product_changes_shape():
    a = Matrix(2, 3)
    a *= Matrix(3, 5)
    assert (a.rows, a.cols) == (2, 5)


def test_scalar_product_both_sides():
    a = Matrix.from_rows([[1, -2], [3, 4]])
    assert 2 * a == a + a
    assert a * 2 == a + a
    a *= 3
    assert a == Matrix.from_rows([[3, -6], [9, 12]])


@pytest.mark.parametrize("number", [float("nan"), float("inf"), float("-inf")])
def test_scalar_product_rejects_non_finite(number):
    with pytest.raises(ValueError):
        Matrix(2, 2) * number


def test_equality_tolerance():
    a = Matrix.from_rows([[1.0]])
    assert a == Matrix.from_rows([[1.0 + 1e-8]])
    assert not a == Matrix.from_rows([[1.0 + 1e-6]])
    assert not Matrix(2, 2) == Matrix(2, 3)


def test_transpose():
    a = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
    t = a.transpose()
    assert (t.rows, t.cols) == (3, 2)
    assert t[2, 0] == a[0, 2]
    assert t.transpose() == a


def test_determinant_two_by_two():
    assert Matrix.from_rows([[1, 2], [3, 4]]).determinant() == pytest.approx(-2.0)


def test_determinant_invariants():
    a = Matrix.from_rows(SQUARE)
    assert a.transpose().determinant() == pytest.approx(a.determinant())
    assert Matrix.from_rows(np.eye(4)).determinant() == pytest.approx(1.0)
    singular = Matrix.from_rows([[1, 2, 3], [1, 2, 3], [4, 5, 6]])
    assert singular.determinant() == pytest.approx(0.0)


def test_determinant_requires_square():
    with pytest.raises(ValueError):
        Matrix(2, 3).determinant()


def test_complements_give_adjugate():
    a = Matrix.from_rows(SQUARE)
    adjugate = a.calc_complements().transpose()
    expected = Matrix.from_rows(np.eye(3)) * a.determinant()
    assert a * adjugate == expected


def test_complements_of_one_by_one():
    assert Matrix.from_rows([[5.0]]).calc_complements().tolist() == [[1.0]]


def test_complements_require_square():
    with pytest.raises(ValueError):
        Matrix(3, 2).calc_complements()


def test_inverse_times_matrix_is_identity():
    a = Matrix.from_rows(SQUARE)
    identity = Matrix.from_rows(np.eye(3))
    assert a * a.inverse() == identity
    assert a.inverse() * a == identity


def test_inverse_of_singular_matrix():
    with pytest.raises(ValueError):
        Matrix.from_rows([[1, 2], [2, 4]]).inverse()


def test_randomize_range_and_repeatability():
    first, second = Matrix(10, 10), Matrix(10, 10)
    first.randomize(random.Random(3))
    second.randomize(random.Random(3))
    assert first == second
    values = first.to_array()
    assert np.all(np.abs(values) <= 1.0)
    assert np.allclose(values * 1000, np.round(values * 1000))