#!/usr/bin/env python3
# =============================================================================
#     File: _trisolve.py
#  Created: 2025-07-03 08:47
#   Author: Bernie Roesler
#
"""
Sparse lower-triangular solves, as presented in Davis, Chapter 3.
"""
# =============================================================================

import numpy as np

from .pattern import canonical_csc


def _check_diagonal(Lp, Li, Lx, j):
    """Return the storage position of ``L[j, j]``."""
    p, q = Lp[j], Lp[j+1]

    if p < q and Li[p] < j:
        raise ValueError(
            f"Matrix is not lower triangular (entry above the diagonal in "
            f"column {j})."
        )

    if p == q or Li[p] != j or Lx[p] == 0:
        raise ValueError(f"Matrix has a zero diagonal in column {j}.")

    return p


def spsolve_csc_lower_triangular(L, b, trans=False):
    r"""Solve :math:`L x = b` or :math:`L^T x = b` in place.

    .. note:: See Davis, p 27, `cs_lsolve` and `cs_ltsolve`.

    Parameters
    ----------
    L : (N, N) sparse array
        A lower triangular matrix with a nonzero diagonal. CSC format with
        sorted indices avoids a conversion.
    b : (N,) or (N, K) ndarray of float
        The right-hand side(s), overwritten with the solution. Any number of
        columns `K` is allowed.
    trans : bool, optional
        If True, solve with :math:`L^T` instead of `L`. Default is False.

    Returns
    -------
    b : (N,) or (N, K) ndarray
        The solution, stored in the input array.

    Raises
    ------
    ValueError
        If `L` is not square or not lower triangular, if a diagonal entry is
        zero, or if `b` does not have `N` rows.
    TypeError
        If `b` is not a floating-point numpy array.
    """
    L = canonical_csc(L)
    M, N = L.shape

    if M != N:
        raise ValueError(f"Matrix must be square, got {L.shape}.")

    if not isinstance(b, np.ndarray) or not np.issubdtype(b.dtype,
                                                          np.floating):
        raise TypeError("b must be a floating-point numpy array.")

    if b.ndim not in (1, 2) or b.shape[0] != N:
        raise ValueError(
            f"b must have {N} rows and 1 or 2 dimensions, got {b.shape}."
        )

    Lp, Li, Lx = L.indptr, L.indices, L.data

    if not trans:
        # Column-oriented forward substitution
        for j in range(N):
            p = _check_diagonal(Lp, Li, Lx, j)
            q = Lp[j+1]
            b[j] /= Lx[p]
            b[Li[p+1:q]] -= np.multiply.outer(Lx[p+1:q], b[j])
    else:
        # Backward substitution with the columns of L as rows of L.T
        for j in reversed(range(N)):
            p = _check_diagonal(Lp, Li, Lx, j)
            q = Lp[j+1]
            b[j] -= Lx[p+1:q] @ b[Li[p+1:q]]
            b[j] /= Lx[p]

    return b


def lsolve(L, b):
    """Solve :math:`L x = b` for a lower triangular `L`.

    Parameters
    ----------
    L : (N, N) sparse array
        Lower triangular matrix with a nonzero diagonal.
    b : (N,) or (N, K) array_like
        Right-hand side(s).

    Returns
    -------
    x : (N,) or (N, K) ndarray
        The solution.
    """
    x = np.array(b, dtype=np.float64)
    return spsolve_csc_lower_triangular(L, x)


def ltsolve(L, b):
    """Solve :math:`L^T x = b` for a lower triangular `L`.

    Parameters
    ----------
    L : (N, N) sparse array
        Lower triangular matrix with a nonzero diagonal.
    b : (N,) or (N, K) array_like
        Right-hand side(s).

    Returns
    -------
    x : (N,) or (N, K) ndarray
        The solution.
    """
    x = np.array(b, dtype=np.float64)
    return spsolve_csc_lower_triangular(L, x, trans=True)

# =============================================================================
# =============================================================================
