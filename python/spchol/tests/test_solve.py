#!/usr/bin/env python3
# =============================================================================
#     File: test_solve.py
#  Created: 2025-07-10 09:12
#   Author: Bernie Roesler
#
"""
Unit tests for the triangular and Cholesky solve functions.
"""
# =============================================================================

import pytest
import numpy as np
import scipy.linalg as la

from numpy.testing import assert_allclose
from scipy import sparse

from .helpers import (
    generate_random_lower_triangular,
    generate_random_spd_matrices
)

import spchol

ATOL = 1e-12


@pytest.mark.parametrize("L", generate_random_lower_triangular())
@pytest.mark.parametrize("K", [None, 1, 3])
def test_triangular_solve(L, K):
    """Compare the triangular solves with the dense solver."""
    N = L.shape[0]
    rng = np.random.default_rng(N)
    b = rng.random(N) if K is None else rng.random((N, K))

    x = spchol.lsolve(L, b)
    expect = la.solve_triangular(L.toarray(), b, lower=True)
    assert x.shape == b.shape
    assert_allclose(x, expect, atol=ATOL, rtol=1e-10)

    x = spchol.ltsolve(L, b)
    expect = la.solve_triangular(L.toarray(), b, lower=True, trans='T')
    assert x.shape == b.shape
    assert_allclose(x, expect, atol=ATOL, rtol=1e-10)


def test_triangular_solve_in_place():
    L = sparse.csc_array(np.array([[2.0, 0.0], [1.0, 4.0]]))
    b = np.array([2.0, 9.0])
    out = spchol.spsolve_csc_lower_triangular(L, b)
    assert out is b
    assert_allclose(b, [1.0, 2.0])

    b = np.array([4.0, 8.0])
    spchol.spsolve_csc_lower_triangular(L, b, trans=True)
    assert_allclose(b, [1.0, 2.0])


def test_triangular_solve_copies():
    """lsolve and ltsolve do not modify their input."""
    L = sparse.csc_array(np.array([[2.0, 0.0], [1.0, 4.0]]))
    b = np.array([2, 9])  # integers are converted
    x = spchol.lsolve(L, b)
    assert_allclose(x, [1.0, 2.0])
    assert b.tolist() == [2, 9]


@pytest.mark.parametrize(
    "L",
    [
        pytest.param(
            sparse.csc_array(np.array([[1.0, 1.0], [0.0, 1.0]])),
            id='upper'
        ),
        pytest.param(
            sparse.csc_array(np.array([[1.0, 0.0], [1.0, 0.0]])),
            id='missing_diagonal'
        ),
        pytest.param(
            sparse.csc_array(
                (np.r_[1.0, 1.0, 0.0], np.r_[0, 1, 1], np.r_[0, 2, 3]),
                shape=(2, 2)
            ),
            id='explicit_zero_diagonal'
        ),
        pytest.param(sparse.csc_array((2, 3)), id='not_square'),
    ]
)
@pytest.mark.parametrize("trans", [False, True])
def test_triangular_solve_invalid(L, trans):
    with pytest.raises(ValueError):
        spchol.spsolve_csc_lower_triangular(L, np.ones(2), trans=trans)


def test_triangular_solve_bad_rhs():
    L = sparse.eye_array(3, format='csc')

    with pytest.raises(ValueError):
        spchol.spsolve_csc_lower_triangular(L, np.ones(2))

    with pytest.raises(ValueError):
        spchol.spsolve_csc_lower_triangular(L, np.ones((3, 2, 1)))

    with pytest.raises(TypeError):
        spchol.spsolve_csc_lower_triangular(L, np.ones(3, dtype=int))

    with pytest.raises(TypeError):
        spchol.spsolve_csc_lower_triangular(L, [1.0, 1.0, 1.0])


@pytest.mark.parametrize("A", generate_random_spd_matrices(N_trials=20))
def test_chol_solve(A):
    """Test the Cholesky solve with a known solution."""
    N = A.shape[0]
    expect = np.arange(1, N + 1, dtype=float)
    b = A @ expect

    x = spchol.chol_solve(A, b)
    assert x.shape == (N,)
    assert_allclose(A @ x, b, atol=ATOL * abs(A).max() * N)


def test_solve_mut():
    """Test the in-place solve."""
    A = spchol.davis_example_chol()
    chol = spchol.CscCholesky.factor(A)

    b = np.ones((11, 2))
    out = chol.solve_mut(b)

    assert out is b
    assert_allclose(A @ b, np.ones((11, 2)), atol=ATOL)


def test_solve_many_columns():
    """More right-hand sides than rows are allowed."""
    A = spchol.spd_example()
    B = np.arange(35.0).reshape(5, 7)
    X = spchol.CscCholesky.factor(A).solve(B)
    assert_allclose(A @ X, B, atol=ATOL)


def test_solve_wrong_rows():
    chol = spchol.CscCholesky.factor(spchol.spd_example())

    with pytest.raises(ValueError):
        chol.solve(np.ones(3))

    with pytest.raises(ValueError):
        chol.solve(np.ones((3, 5)))


def test_solve_corrupt_factor():
    """A failed triangular solve on a factor is an internal error."""
    chol = spchol.CscCholesky.factor(spchol.spd_example())
    chol.L.data[0] = 0.0

    with pytest.raises(RuntimeError):
        chol.solve(np.ones(5))

# =============================================================================
# =============================================================================
