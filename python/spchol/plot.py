#!/usr/bin/env python3
# =============================================================================
#     File: plot.py
#  Created: 2025-07-08 11:17
#   Author: Bernie Roesler
#
"""
Functions for plotting sparse matrices, Cholesky factors and elimination
trees.
"""
# =============================================================================

import matplotlib.pyplot as plt
import numpy as np

from matplotlib.ticker import MaxNLocator
from scipy.sparse import issparse

from ._cholesky import CscCholesky, SymbolicCholesky
from ._etree import elimination_tree
from .pattern import SparsityPattern
from .utils import fill_in, to_scipy_sparse


def _setup_matrix_axes(ax, M, N):
    """Set limits and ticks to match `matplotlib.pyplot.spy`."""
    ax.set_xlim(-0.75, N - 0.25 if N > 0 else 0.75)
    ax.set_ylim(M - 0.25 if M > 0 else 0.75, -0.75)  # inverted y-axis
    ax.xaxis.tick_top()
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax.yaxis.set_major_locator(MaxNLocator(integer=True))


def cspy(A, cmap='viridis_r', colorbar=True, ax=None, **kwargs):
    """Visualize a sparse or dense matrix with colored markers.

    This function is similar to `matplotlib.pyplot.spy`, but it colors the
    markers based on the value of the non-zero elements in the matrix.

    Parameters
    ----------
    A : array_like, sparse array or SparsityPattern
        The 2D matrix to visualize. A `SparsityPattern` is shown with all
        stored entries equal to 1.
    cmap : str or matplotlib.colors.Colormap, optional
        The colormap to use for coloring the markers, by default 'viridis_r'.
    colorbar : bool, optional
        Whether to display a colorbar, by default True.
    ax : matplotlib.axes.Axes, optional
        An existing Axes object to plot on. If None (default), the current axes
        are used.
    **kwargs
        Additional keyword arguments passed directly to
        `matplotlib.pyplot.imshow`.

    Returns
    -------
    ax : matplotlib.axes.Axes
        The Axes object used for plotting.
    cb : matplotlib.colorbar.Colorbar or None
        The colorbar object.
    """
    if ax is None:
        ax = plt.gca()

    if isinstance(A, SparsityPattern):
        A = to_scipy_sparse(A)

    if issparse(A):
        dense_matrix = A.toarray().astype(np.float64)
    else:
        dense_matrix = np.array(A, dtype=np.float64)

    if dense_matrix.ndim != 2:
        raise ValueError("Input matrix must be 2-dimensional.")

    M, N = dense_matrix.shape
    nnz = np.count_nonzero(dense_matrix)

    _setup_matrix_axes(ax, M, N)

    if nnz == 0:
        ax.set_xlabel(f"{(M, N)}, nnz = 0, density = 0")
        return ax, None

    ax.set_xlabel(f"{(M, N)}, nnz = {nnz}, density = {nnz / (M * N):.2%}")

    # Zeros are not drawn
    dense_matrix[dense_matrix == 0] = np.nan

    im = ax.imshow(dense_matrix, cmap=cmap, origin='upper', aspect='equal',
                   **kwargs)

    cb = ax.figure.colorbar(im, ax=ax, shrink=0.8) if colorbar else None

    return ax, cb


def cholspy(A, chol=None, axs=None, markersize=None):
    """Plot the pattern of a matrix next to the pattern of its Cholesky factor.

    Entries of `L` that are not in the lower triangle of `A` (the fill-in) are
    drawn in a second color.

    Parameters
    ----------
    A : (N, N) sparse array
        The symmetric matrix.
    chol : CscCholesky or SymbolicCholesky, optional
        The factorization of `A`. If not given, the symbolic factorization is
        computed.
    axs : (2,) array_like of matplotlib.axes.Axes, optional
        The axes for `A` and `L`. If not given, a new figure is created.
    markersize : float, optional
        Marker size passed to `matplotlib.pyplot.spy`.

    Returns
    -------
    axs : (2,) array of matplotlib.axes.Axes
        The axes used for plotting.
    """
    if axs is None:
        _, axs = plt.subplots(ncols=2, clear=True)

    if chol is None:
        chol = SymbolicCholesky.factor(SparsityPattern.from_scipy(A))

    if isinstance(chol, CscCholesky):
        L = chol.L
    else:
        L = to_scipy_sparse(chol.l_pattern)

    Ab = A.astype(bool).tocsc()
    Lb = L.astype(bool).tocsc()
    fill = Lb > Ab  # True only where L has an entry and A does not

    axs[0].spy(A, markersize=markersize)
    axs[0].set_title(f"A: nnz = {A.nnz}")

    axs[1].spy(Lb, markersize=markersize)
    if fill.nnz > 0:
        axs[1].spy(fill, markersize=markersize, color='C3')
    axs[1].set_title(f"L: nnz = {Lb.nnz}, fill-in = {fill_in(A, L)}")

    return axs


def etreeplot(A_or_parent, ax=None, **kwargs):
    """Plot the elimination tree of a symmetric matrix.

    Nodes are placed at their index on the x-axis and at their depth on the
    y-axis, with the roots at the top.

    Parameters
    ----------
    A_or_parent : (N, N) sparse array, SparsityPattern or (N,) array_like
        A symmetric matrix, its pattern, or an elimination tree as returned by
        `elimination_tree`.
    ax : matplotlib.axes.Axes, optional
        An existing Axes object to plot on. If None (default), the current axes
        are used.
    **kwargs
        Additional keyword arguments passed to `matplotlib.axes.Axes.plot` for
        the nodes.

    Returns
    -------
    ax : matplotlib.axes.Axes
        The Axes object used for plotting.
    """
    if ax is None:
        ax = plt.gca()

    if issparse(A_or_parent):
        A_or_parent = SparsityPattern.from_scipy(A_or_parent)

    if isinstance(A_or_parent, SparsityPattern):
        parent = elimination_tree(A_or_parent)
    else:
        parent = np.asarray(A_or_parent)

    N = parent.size

    # Parents always have larger indices than their children
    depth = np.zeros(N, dtype=int)
    for i in reversed(range(N)):
        if parent[i] != -1:
            depth[i] = depth[parent[i]] + 1

    for i in range(N):
        if parent[i] != -1:
            ax.plot([i, parent[i]], [depth[i], depth[parent[i]]],
                    color='k', lw=1, zorder=1)

    opts = dict(marker='o', ls='none', color='C0', zorder=2)
    opts.update(kwargs)
    ax.plot(np.arange(N), depth, **opts)

    for i in range(N):
        ax.annotate(str(i), (i, depth[i]), textcoords='offset points',
                    xytext=(4, 4), fontsize='small')

    ax.invert_yaxis()
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax.yaxis.set_major_locator(MaxNLocator(integer=True))
    ax.set_xlabel('node')
    ax.set_ylabel('depth')
    ax.set_title(f"Elimination tree, {np.sum(parent == -1)} root(s)")

    return ax

# =============================================================================
# =============================================================================
