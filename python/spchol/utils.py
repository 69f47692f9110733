#!/usr/bin/env python3
# =============================================================================
#     File: utils.py
#  Created: 2025-07-04 10:31
#   Author: Bernie Roesler
#
"""
Utility functions for the spchol module.
"""
# =============================================================================

import numpy as np

from scipy import sparse

from .pattern import SparsityPattern


def davis_example_chol(format='csc'):
    """Create an 11x11 example matrix from Davis, Figure 4.2 [0].

    .. code-block:: python
        array([[10.,  0.,  0.,  0.,  0.,  1.,  1.,  0.,  0.,  0.,  0.],
               [ 0., 11.,  1.,  0.,  0.,  0.,  0.,  1.,  0.,  0.,  0.],
               [ 0.,  1., 12.,  0.,  0.,  0.,  0.,  0.,  0.,  1.,  1.],
               [ 0.,  0.,  0., 13.,  0.,  1.,  0.,  0.,  0.,  1.,  0.],
               [ 0.,  0.,  0.,  0., 14.,  0.,  0.,  1.,  0.,  0.,  1.],
               [ 1.,  0.,  0.,  1.,  0., 15.,  0.,  0.,  1.,  1.,  0.],
               [ 1.,  0.,  0.,  0.,  0.,  0., 16.,  0.,  0.,  0.,  1.],
               [ 0.,  1.,  0.,  0.,  1.,  0.,  0., 17.,  0.,  1.,  1.],
               [ 0.,  0.,  0.,  0.,  0.,  1.,  0.,  0., 18.,  0.,  0.],
               [ 0.,  0.,  1.,  1.,  0.,  1.,  0.,  1.,  0., 19.,  1.],
               [ 0.,  0.,  1.,  0.,  1.,  0.,  1.,  1.,  0.,  1., 20.]])

    Parameters
    ----------
    format : str, optional
        The output format, see `format_matrix`. Default is 'csc'.

    Returns
    -------
    A : (11, 11) matrix in the specified format
        The example matrix from Davis.

    References
    ----------
    .. [0] Davis, Timothy A. "Direct Methods for Sparse Linear Systems",
        Figure 4.2, p 39.
    """
    N = 11
    # Strictly lower triangular entries
    rows = np.r_[5, 6, 2, 7, 9, 10, 5, 9, 7, 10, 8, 9, 10, 9, 10, 10]
    cols = np.r_[0, 0, 1, 1, 2,  2, 3, 3, 4,  4, 5, 5,  6, 7,  7,  9]
    L = sparse.csc_array((np.ones(rows.size), (rows, cols)), shape=(N, N))
    A = L + L.T + sparse.diags_array(np.arange(10.0, 10.0 + N))
    return format_matrix(A, format)


def davis_example_etree():
    """The elimination tree of `davis_example_chol`, Davis Figure 4.2."""
    return np.r_[5, 2, 7, 5, 7, 6, 8, 9, 9, 10, -1]


def spd_example(format='csc'):
    """Create a 5x5 symmetric positive definite example matrix.

    .. code-block:: python
        array([[40.,  2.,  1.,  0.,  1.],
               [ 2., 60.,  0.,  0.,  0.],
               [ 1.,  0., 11.,  0.,  0.],
               [ 0.,  0.,  0., 50.,  4.],
               [ 1.,  0.,  0.,  4., 10.]])

    Parameters
    ----------
    format : str, optional
        The output format, see `format_matrix`. Default is 'csc'.

    Returns
    -------
    A : (5, 5) matrix in the specified format
    """
    A = np.array([
        [40.0,  2.0,  1.0,  0.0,  1.0],
        [ 2.0, 60.0,  0.0,  0.0,  0.0],
        [ 1.0,  0.0, 11.0,  0.0,  0.0],
        [ 0.0,  0.0,  0.0, 50.0,  4.0],
        [ 1.0,  0.0,  0.0,  4.0, 10.0]
    ])
    return format_matrix(sparse.csc_array(A), format)


def diagonal_example(format='csc'):
    """Create the diagonal matrix ``diag(40, 60, 11, 50, 10)``."""
    d = np.r_[40.0, 60.0, 11.0, 50.0, 10.0]
    return format_matrix(sparse.diags_array(d), format)


def format_matrix(A, format):
    """Convert a scipy sparse matrix to the specified format.

    Parameters
    ----------
    A : sparse array
        The matrix to convert.
    format : str in {'bsr', 'coo', 'csc', 'csr', 'dia', 'dok', 'lil', \
'ndarray'}
        The output format.

    Returns
    -------
    result : sparse array or ndarray
        The matrix in the specified format.
    """
    match format:
        case 'bsr' | 'coo' | 'csc' | 'csr' | 'dia' | 'dok' | 'lil':
            return sparse.csc_array(A).asformat(format)
        case 'ndarray':
            return A.toarray()
        case _:
            raise ValueError(f"Invalid format '{format}'")


def to_scipy_sparse(pattern, values=None):
    """Build a CSC array from a CSC sparsity pattern.

    Parameters
    ----------
    pattern : SparsityPattern
        The pattern, with columns as the major dimension.
    values : (nnz,) array_like, optional
        The values of the stored entries. If not given, all entries are 1.

    Returns
    -------
    result : (M, N) sparse.csc_array
        The matrix, with shape ``pattern.shape``.
    """
    if values is None:
        values = np.ones(pattern.nnz)
    else:
        values = np.asarray(values)
        if values.shape != (pattern.nnz,):
            raise ValueError(
                f"Expected {pattern.nnz} values, got shape {values.shape}."
            )

    return sparse.csc_array(
        (values, pattern.minor_indices, pattern.major_offsets),
        shape=pattern.shape,
        copy=True
    )


def pattern_to_ndarray(pattern):
    """Return the pattern as a dense boolean array of shape
    ``pattern.shape``."""
    return to_scipy_sparse(pattern, np.ones(pattern.nnz, dtype=bool)).toarray()


def fill_in(A, L):
    """Count the fill-in of a Cholesky factor.

    Parameters
    ----------
    A : (N, N) sparse array or SparsityPattern
        The symmetric matrix (both triangles stored).
    L : (N, N) sparse array or SparsityPattern
        Its Cholesky factor.

    Returns
    -------
    result : int
        The number of entries in `L` that are not in the lower triangle of
        `A`.
    """
    if isinstance(A, SparsityPattern):
        A = to_scipy_sparse(A)
    if isinstance(L, SparsityPattern):
        L = to_scipy_sparse(L)

    A_lower = sparse.tril(A).astype(bool)
    return L.astype(bool).nnz - (A_lower.multiply(L.astype(bool))).nnz

# =============================================================================
# =============================================================================
