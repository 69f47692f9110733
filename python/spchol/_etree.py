#!/usr/bin/env python3
# =============================================================================
#     File: _etree.py
#  Created: 2025-07-02 13:41
#   Author: Bernie Roesler
#
"""
Elimination tree and symbolic Cholesky pattern, as presented in Davis,
Chapter 4.
"""
# =============================================================================

import numpy as np

from .pattern import SparsityPattern


def elimination_tree(pattern):
    """Compute the elimination tree of a symmetric sparsity pattern.

    .. note:: See Davis, p 41, `cs_etree`.

    The parent of node `i` is the smallest `k > i` such that the Cholesky
    factor has an off-diagonal nonzero at ``L[k, i]``. Only the upper
    triangular part of `pattern` (row indices ``i < k`` in column `k`) is
    used. Ancestors are found with path compression, so the run time is
    nearly linear in ``pattern.nnz``.

    Parameters
    ----------
    pattern : SparsityPattern
        The pattern of a square, symmetric CSC matrix.

    Returns
    -------
    parent : (N,) ndarray of int
        The parent of each node. Roots have parent -1.
    """
    if pattern.major_dim != pattern.minor_dim:
        raise ValueError("Pattern must be square.")

    N = pattern.minor_dim
    Ap = pattern.major_offsets.tolist()
    Ai = pattern.minor_indices.tolist()

    parent = [-1] * N
    ancestor = [-1] * N

    for k in range(N):
        for p in range(Ap[k], Ap[k+1]):
            i = Ai[p]
            # Traverse from i to k, compressing the path as we go
            while i < k:
                inext = ancestor[i]
                ancestor[i] = k
                if inext == -1:
                    parent[i] = k  # no ancestor, so k is the parent
                    break
                i = inext

    return np.array(parent, dtype=np.intp)


def reach(pattern, j, max_j, tree, marks=None, out=None):
    r"""Compute the nonzero pattern of row `j` of the Cholesky factor.

    Walks up the elimination tree from every row index in lane `j` of
    `pattern`, stopping at nodes greater than `max_j` or already visited.

    .. note:: See Davis, p 43, `cs_ereach`.

    Parameters
    ----------
    pattern : SparsityPattern
        The pattern of a square, symmetric CSC matrix.
    j : int
        The lane to start from.
    max_j : int
        The largest node that may be visited (inclusive).
    tree : (N,) array_like of int
        The elimination tree, as returned by `elimination_tree`.
    marks : (N,) ndarray of bool, optional
        Workspace for the visited flags. It is cleared on entry. If not given,
        a new array is allocated.
    out : list of int, optional
        The visited nodes are appended to this list, in ascending order.

    Returns
    -------
    out : list of int
        The list given as `out`, or a new list.
    """
    N = len(tree)

    if marks is None:
        marks = np.zeros(N, dtype=bool)
    elif marks.shape != (N,):
        raise ValueError(f"marks must have shape ({N},), got {marks.shape}.")
    else:
        marks[:] = False

    if out is None:
        out = []

    res = []

    for i in pattern.lane(j).tolist():
        while i != -1 and i <= max_j and not marks[i]:
            marks[i] = True
            res.append(i)
            i = tree[i]

    res.sort()
    out.extend(res)

    return out


def nonzero_pattern(pattern):
    """Compute the patterns of the Cholesky factor `L` and of `L.T`.

    Row `i` of `L` is the reach of lane `i` bounded by `i`, which is lane `i`
    of the CSC pattern of `L.T`. The pattern of `L` is then its transpose.

    Parameters
    ----------
    pattern : SparsityPattern
        The pattern of a square, symmetric CSC matrix.

    Returns
    -------
    l_pattern : SparsityPattern
        The pattern of `L`. The first entry in each lane is the diagonal.
    u_pattern : SparsityPattern
        The pattern of `L.T`. The last entry in each lane is the diagonal.
    """
    tree = elimination_tree(pattern).tolist()

    M, N = pattern.minor_dim, pattern.major_dim
    rows = []
    col_offsets = [0]
    marks = np.zeros(M, dtype=bool)

    for i in range(M):
        reach(pattern, i, i, tree, marks, rows)
        col_offsets.append(len(rows))

    u_pattern = SparsityPattern.try_from_offsets_and_indices(
        M, N, col_offsets, rows
    )

    l_pattern = u_pattern.transpose()

    return l_pattern, u_pattern

# =============================================================================
# =============================================================================
