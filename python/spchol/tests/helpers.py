#!/usr/bin/env python3
# =============================================================================
#     File: helpers.py
#  Created: 2025-07-09 09:02
#   Author: Bernie Roesler
#
"""Helper functions for the spchol tests."""
# =============================================================================

import pytest

import numpy as np

from scipy import sparse


# -----------------------------------------------------------------------------
#         Matrix Generators
# -----------------------------------------------------------------------------
def random_spd_matrix(rng, N, density):
    """Create a random, diagonally dominant, symmetric positive definite
    matrix."""
    B = sparse.random_array(
        (N, N),
        density=density,
        format='csc',
        rng=rng,
        data_sampler=rng.normal
    )
    S = B + B.T
    d = abs(S).sum(axis=0) + 1 + rng.random(N)
    A = S + sparse.diags_array(d)
    return sparse.csc_array(A)


def generate_random_spd_matrices(seed=565656, N_trials=50, N_max=40,
                                 d_scale=0.2):
    """Generate a list of random sparse SPD matrices of maximum size N x N."""
    rng = np.random.default_rng(seed)

    for trial in range(N_trials):
        N = rng.integers(1, N_max, endpoint=True)
        d = d_scale * rng.random()  # density

        A = random_spd_matrix(rng, N, d)

        yield pytest.param(
            A,
            id=f"random_{trial:02d}::{A.shape}::{A.nnz}",
            marks=pytest.mark.random
        )


def generate_random_lower_triangular(seed=565656, N_trials=50, N_max=40):
    """Generate a list of random, square, lower-triangular matrices."""
    rng = np.random.default_rng(seed)

    for trial in range(N_trials):
        N = rng.integers(1, N_max, endpoint=True)
        d = 0.2 * rng.random()  # density ∈ [0, 0.2]

        A = sparse.random_array(
            (N, N),
            density=d,
            format='csc',
            rng=rng,
            data_sampler=rng.normal
        )

        # Keep the diagonal away from zero
        D = sparse.diags_array(1 + rng.random(N))
        L = sparse.csc_array(sparse.tril(A, -1) + D)

        yield pytest.param(
            L,
            id=f"random_{trial:02d}::{L.shape}::{L.nnz}",
            marks=pytest.mark.random
        )


# -----------------------------------------------------------------------------
#         Reference Implementations
# -----------------------------------------------------------------------------
def dense_symbolic_cholesky(A):
    """Compute the structure of the Cholesky factor with dense boolean
    elimination.

    Parameters
    ----------
    A : (N, N) sparse array or ndarray
        A symmetric matrix.

    Returns
    -------
    S : (N, N) ndarray of bool
        True where the factor `L` has a structural nonzero.
    """
    if sparse.issparse(A):
        A = A.toarray()

    N = A.shape[0]
    S = np.tril(A != 0) | np.eye(N, dtype=bool)

    # Left-looking: column k is the union of the columns it depends on
    for k in range(N):
        for j in range(k):
            if S[k, j]:
                S[k:, k] |= S[k:, j]

    return S


def dense_etree(S):
    """Compute the elimination tree from the structure of `L`."""
    N = S.shape[0]
    parent = np.full(N, -1)
    for i in range(N):
        below = np.nonzero(S[i+1:, i])[0]
        if below.size > 0:
            parent[i] = i + 1 + below[0]
    return parent


def is_transpose(P, Q):
    """Check that two sparsity patterns are transposes of each other."""
    return (
        P.major_dim == Q.minor_dim
        and P.minor_dim == Q.major_dim
        and P.nnz == Q.nnz
        and sorted(P.entries()) == sorted((j, i) for i, j in Q.entries())
    )

# =============================================================================
# =============================================================================
