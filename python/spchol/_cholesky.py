#!/usr/bin/env python3
# =============================================================================
#     File: _cholesky.py
#  Created: 2025-07-03 14:22
#   Author: Bernie Roesler
#
"""
Sparse Cholesky factorization :math:`A = L L^T` of a symmetric positive
definite CSC matrix, split into a symbolic and a numeric phase.

The symbolic phase depends only on the sparsity pattern of `A` and can be
reused for any number of matrices with the same pattern. The numeric phase is
a left-looking algorithm, see Davis, §4.8. No fill-reducing ordering is
applied, so the factor of a poorly ordered matrix may be dense.
"""
# =============================================================================

import warnings

import numpy as np

from scipy import sparse

from ._errors import DeserializationError, NotPositiveDefiniteError
from ._etree import nonzero_pattern
from ._trisolve import spsolve_csc_lower_triangular
from .log import logger
from .pattern import SparsityPattern, canonical_csc


def _check_patterns(m_pattern, l_pattern, u_pattern):
    """Check the dimensions of deserialized factorization patterns."""
    all_square = all(
        P.major_dim == P.minor_dim for P in (m_pattern, l_pattern, u_pattern)
    )

    if not all_square:
        raise DeserializationError("one of the cholesky factors is not square")

    all_same = (
        m_pattern.major_dim == l_pattern.major_dim
        and m_pattern.major_dim == u_pattern.major_dim
    )

    if not all_same:
        raise DeserializationError(
            "the dimensions of the cholesky factors are not identical"
        )

    if l_pattern.nnz != u_pattern.nnz:
        raise DeserializationError(
            "the number of nonzeros of l and its transpose u are not equal"
        )

    # NOTE the pattern of L @ L.T is not compared with m_pattern.


def _pattern_from_dict(d, key):
    try:
        pattern_dict = d[key]
    except (KeyError, IndexError, TypeError):
        raise DeserializationError(f"missing field '{key}'")
    return SparsityPattern.from_dict(pattern_dict)


class SymbolicCholesky:
    """The symbolic Cholesky factorization of a sparsity pattern.

    Holds the pattern `m_pattern` of the matrix that was factored, the pattern
    of the factor `l_pattern`, and the pattern of its transpose `u_pattern`.

    Create with `SymbolicCholesky.factor`.
    """

    def __init__(self, m_pattern, l_pattern, u_pattern):
        self._m_pattern = m_pattern
        self._l_pattern = l_pattern
        self._u_pattern = u_pattern

    @classmethod
    def factor(cls, pattern):
        """Compute the symbolic factorization of a CSC sparsity pattern.

        The pattern must be symmetric. This is not checked.

        Parameters
        ----------
        pattern : SparsityPattern
            The pattern of a square, symmetric CSC matrix.

        Returns
        -------
        result : SymbolicCholesky
            The symbolic factorization.

        Raises
        ------
        ValueError
            If the pattern is not square.
        """
        if pattern.major_dim != pattern.minor_dim:
            raise ValueError(
                "major and minor dimensions must be the same (square matrix)"
            )

        l_pattern, u_pattern = nonzero_pattern(pattern)

        logger.debug(
            "Symbolic Cholesky: N = %d, nnz(A) = %d, nnz(L) = %d",
            pattern.major_dim, pattern.nnz, l_pattern.nnz
        )

        return cls(pattern, l_pattern, u_pattern)

    @property
    def l_pattern(self):
        """The pattern of the Cholesky factor `L`."""
        return self._l_pattern

    @property
    def m_pattern(self):
        """The pattern of the matrix that was factored."""
        return self._m_pattern

    @property
    def u_pattern(self):
        """The pattern of `L.T`."""
        return self._u_pattern

    @property
    def n(self):
        """The dimension of the factored matrix."""
        return self._m_pattern.major_dim

    @property
    def nnz(self):
        """The number of stored entries in `L`."""
        return self._l_pattern.nnz

    def to_dict(self):
        """Return a JSON-compatible, field-by-field representation."""
        return {
            'm_pattern': self._m_pattern.to_dict(),
            'l_pattern': self._l_pattern.to_dict(),
            'u_pattern': self._u_pattern.to_dict(),
        }

    @classmethod
    def from_dict(cls, d):
        """Reconstruct a symbolic factorization from `to_dict` output.

        Raises
        ------
        DeserializationError
            If a pattern is invalid, not square, or of the wrong dimension, or
            if `l_pattern` and `u_pattern` differ in nnz.
        """
        m_pattern = _pattern_from_dict(d, 'm_pattern')
        l_pattern = _pattern_from_dict(d, 'l_pattern')
        u_pattern = _pattern_from_dict(d, 'u_pattern')
        _check_patterns(m_pattern, l_pattern, u_pattern)
        return cls(m_pattern, l_pattern, u_pattern)

    def __reduce__(self):
        return (SymbolicCholesky.from_dict, (self.to_dict(),))

    def __eq__(self, other):
        if not isinstance(other, SymbolicCholesky):
            return NotImplemented
        return (
            self._m_pattern == other._m_pattern
            and self._l_pattern == other._l_pattern
            and self._u_pattern == other._u_pattern
        )

    __hash__ = None

    def __repr__(self):
        return f"SymbolicCholesky(n={self.n}, nnz={self.nnz})"


class CscCholesky:
    r"""A sparse Cholesky factorization :math:`A = L L^T` of a CSC matrix.

    The factor `L` is a sparse lower triangular `scipy.sparse.csc_array`. The
    object keeps the workspaces of the numeric phase, so that `refactor` can
    recompute `L` for new values with the same pattern without allocation.

    Create with `CscCholesky.factor` or `CscCholesky.factor_numerical`.
    """

    def __init__(self, m_pattern, l_factor, u_pattern, work_x, work_c):
        self._m_pattern = m_pattern
        self._l_factor = l_factor
        self._u_pattern = u_pattern
        self._work_x = work_x
        self._work_c = work_c

    # -------------------------------------------------------------------------
    #         Constructors
    # -------------------------------------------------------------------------
    @classmethod
    def factor_numerical(cls, symbolic, values):
        """Compute the numeric factorization for a symbolic factorization.

        Parameters
        ----------
        symbolic : SymbolicCholesky
            The symbolic factorization of the matrix pattern.
        values : (nnz,) array_like of float
            The values of the matrix, in the storage order of
            ``symbolic.m_pattern``.

        Returns
        -------
        result : CscCholesky
            The factorization.

        Raises
        ------
        NotPositiveDefiniteError
            If the matrix is not symmetric positive definite.
        ValueError
            If fewer values than ``symbolic.m_pattern.nnz`` are given, or if
            ``l_pattern`` and ``u_pattern`` have different nnz.
        """
        l_pattern = symbolic.l_pattern
        u_pattern = symbolic.u_pattern

        if l_pattern.nnz != u_pattern.nnz:
            raise ValueError(
                "u is just the transpose of l, so should have the same nnz"
            )

        N = l_pattern.major_dim

        l_factor = sparse.csc_array(
            (
                np.zeros(l_pattern.nnz),
                l_pattern.minor_indices,
                l_pattern.major_offsets
            ),
            shape=(N, N),
            copy=True
        )

        chol = cls(
            symbolic.m_pattern,
            l_factor,
            u_pattern,
            np.zeros(N),
            np.zeros(N, dtype=np.intp),
        )

        chol.refactor(values)

        logger.debug("Numeric Cholesky: N = %d, nnz(L) = %d", N, l_pattern.nnz)

        return chol

    @classmethod
    def factor(cls, A, check_symmetric=False):
        """Compute the Cholesky factorization of a sparse matrix.

        Parameters
        ----------
        A : (N, N) sparse array
            A symmetric positive definite matrix. Both triangles must be
            stored. It is converted to CSC format with sorted indices.
        check_symmetric : bool, optional
            If True, warn if `A` is not symmetric. Default is False.

        Returns
        -------
        result : CscCholesky
            The factorization.

        Raises
        ------
        NotPositiveDefiniteError
            If the matrix is not symmetric positive definite.
        ValueError
            If `A` is not square.
        """
        A = canonical_csc(A)
        M, N = A.shape

        if M != N:
            raise ValueError(f"Matrix must be square, got {A.shape}.")

        if check_symmetric and (A != A.T).nnz > 0:
            warnings.warn(
                "Matrix is not symmetric; results may be incorrect.",
                UserWarning,
                stacklevel=2
            )

        symbolic = SymbolicCholesky.factor(SparsityPattern.from_scipy(A))
        return cls.factor_numerical(symbolic, A.data)

    # -------------------------------------------------------------------------
    #         Numeric factorization
    # -------------------------------------------------------------------------
    def refactor(self, values):
        """Recompute the factorization for new values with the same pattern.

        Parameters
        ----------
        values : (nnz,) array_like of float
            The new values of the matrix, in the storage order of the
            pattern that was originally factored.

        Raises
        ------
        NotPositiveDefiniteError
            If the matrix is not symmetric positive definite. The factor
            values are unusable until the next successful `refactor`.
        ValueError
            If fewer values than the pattern's nnz are given.
        """
        self._check_alive()
        values = np.asarray(values, dtype=np.float64)

        if values.size < self._m_pattern.nnz:
            raise ValueError(
                f"The set of values is too small: expected at least "
                f"{self._m_pattern.nnz}, got {values.size}."
            )

        self._work_x.fill(0.0)

        try:
            self._decompose_left_looking(values)
        finally:
            self._work_x.fill(0.0)

    def _decompose_left_looking(self, values):
        """Left-looking numeric factorization, see Davis, p 61."""
        Ap = self._m_pattern.major_offsets
        Ai = self._m_pattern.minor_indices
        Lp = self._l_factor.indptr
        Li = self._l_factor.indices
        Lx = self._l_factor.data
        U = self._u_pattern
        x = self._work_x
        c = self._work_c

        # c[j] is the next unread entry of column j of L
        c[:] = Lp[:-1]

        N = x.size

        for k in range(N):
            # Scatter the lower part of column k of A into x
            x[k] = 0.0
            p = Ap[k] + np.searchsorted(Ai[Ap[k]:Ap[k+1]], k)
            x[Ai[p:Ap[k+1]]] = values[p:Ap[k+1]]

            # Update with every column j < k that has L[k, j] != 0
            for j in U.lane(k).tolist():
                p = c[j]
                c[j] += 1
                if j < k:
                    # Entries before c[j] have rows < k, so L[k, j] == Lx[p]
                    q = Lp[j+1]
                    x[Li[p:q]] -= Lx[p:q] * Lx[p]

            diag = x[k]

            if not diag > 0:
                logger.warning(
                    "Non-positive pivot %g in column %d of %d.", diag, k, N
                )
                raise NotPositiveDefiniteError(k)

            p, q = Lp[k], Lp[k+1]

            if p == q or Li[p] != k:
                # The pattern has no diagonal entry for column k
                raise NotPositiveDefiniteError(k)

            denom = np.sqrt(diag)
            rows = Li[p:q]
            Lx[p:q] = x[rows] / denom
            Lx[p] = denom
            x[rows] = 0.0

    # -------------------------------------------------------------------------
    #         Solve
    # -------------------------------------------------------------------------
    def solve(self, b):
        r"""Solve :math:`A X = B`.

        Parameters
        ----------
        b : (N,) or (N, K) array_like
            The right-hand side(s). Any number of columns is allowed.

        Returns
        -------
        x : (N,) or (N, K) ndarray
            The solution, in a new array.
        """
        x = np.array(b, dtype=np.float64)
        self.solve_mut(x)
        return x

    def solve_mut(self, b):
        r"""Solve :math:`A X = B` in place.

        Parameters
        ----------
        b : (N,) or (N, K) ndarray of float
            The right-hand side(s), overwritten with the solution.

        Returns
        -------
        b : (N,) or (N, K) ndarray
            The input array.
        """
        self._check_alive()
        N = self.n

        if b.ndim not in (1, 2) or b.shape[0] != N:
            raise ValueError(
                f"b must have {N} rows and 1 or 2 dimensions, got {b.shape}."
            )

        try:
            spsolve_csc_lower_triangular(self._l_factor, b)
            spsolve_csc_lower_triangular(self._l_factor, b, trans=True)
        except ValueError as e:
            raise RuntimeError(
                "if the Cholesky factorization succeeded, "
                "then the triangular solve should never fail"
            ) from e

        return b

    # -------------------------------------------------------------------------
    #         Accessors
    # -------------------------------------------------------------------------
    def _check_alive(self):
        if self._l_factor is None:
            raise RuntimeError(
                "The factorization was consumed by take_L() or "
                "into_symbolic_factorization()."
            )

    @property
    def n(self):
        """The dimension of the factored matrix."""
        return self._m_pattern.major_dim

    @property
    def L(self):
        """The Cholesky factor `L` as a CSC array."""
        self._check_alive()
        return self._l_factor

    def take_L(self):
        """Return the factor `L` and discard the rest of the factorization."""
        self._check_alive()
        L = self._l_factor
        self._release()
        return L

    def _l_pattern(self):
        L = self._l_factor
        return SparsityPattern.try_from_offsets_and_indices(
            L.shape[1], L.shape[0], L.indptr, L.indices
        )

    def symbolic_factorization(self):
        """Return a copy of the symbolic part of this factorization."""
        self._check_alive()
        return SymbolicCholesky(
            self._m_pattern,
            self._l_pattern(),
            self._u_pattern
        )

    def into_symbolic_factorization(self):
        """Return the symbolic part and discard the numeric values."""
        symbolic = self.symbolic_factorization()
        self._release()
        return symbolic

    def _release(self):
        self._l_factor = None
        self._work_x = None
        self._work_c = None

    # -------------------------------------------------------------------------
    #         Serialization
    # -------------------------------------------------------------------------
    def to_dict(self):
        """Return a JSON-compatible, field-by-field representation."""
        self._check_alive()
        return {
            'm_pattern': self._m_pattern.to_dict(),
            'l_factor': {
                'pattern': self._l_pattern().to_dict(),
                'values': self._l_factor.data.tolist(),
            },
            'u_pattern': self._u_pattern.to_dict(),
            'work_x': self._work_x.tolist(),
            'work_c': self._work_c.tolist(),
        }

    @classmethod
    def from_dict(cls, d):
        """Reconstruct a factorization from `to_dict` output.

        Raises
        ------
        DeserializationError
            If a pattern is invalid, not square, or of the wrong dimension, or
            if the values or workspaces have the wrong length.
        """
        try:
            l_dict = d['l_factor']
            l_pattern = _pattern_from_dict(l_dict, 'pattern')
            l_values = np.asarray(l_dict['values'], dtype=np.float64)
            work_x = np.asarray(d['work_x'], dtype=np.float64)
            work_c = np.asarray(d['work_c'], dtype=np.intp)
        except DeserializationError:
            raise
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise DeserializationError(f"invalid cholesky factor: {e}") from e

        m_pattern = _pattern_from_dict(d, 'm_pattern')
        u_pattern = _pattern_from_dict(d, 'u_pattern')
        _check_patterns(m_pattern, l_pattern, u_pattern)

        N = l_pattern.major_dim

        if l_values.shape != (l_pattern.nnz,):
            raise DeserializationError(
                "the number of values does not match the pattern of l"
            )

        if work_x.shape != (N,) or work_c.shape != (N,):
            raise DeserializationError(
                "the dimensions of the work arrays are not correct"
            )

        l_factor = sparse.csc_array(
            (l_values, l_pattern.minor_indices, l_pattern.major_offsets),
            shape=(N, N),
            copy=True
        )

        return cls(m_pattern, l_factor, u_pattern, work_x, work_c)

    def __reduce__(self):
        return (CscCholesky.from_dict, (self.to_dict(),))

    def __repr__(self):
        if self._l_factor is None:
            return "CscCholesky(<consumed>)"
        return f"CscCholesky(n={self.n}, nnz={self._l_factor.nnz})"


def chol_solve(A, b, check_symmetric=False):
    r"""Solve :math:`A x = b` with a sparse Cholesky factorization.

    Parameters
    ----------
    A : (N, N) sparse array
        A symmetric positive definite matrix.
    b : (N,) or (N, K) array_like
        The right-hand side(s).
    check_symmetric : bool, optional
        If True, warn if `A` is not symmetric. Default is False.

    Returns
    -------
    x : (N,) or (N, K) ndarray
        The solution.

    Raises
    ------
    NotPositiveDefiniteError
        If `A` is not symmetric positive definite.
    """
    chol = CscCholesky.factor(A, check_symmetric=check_symmetric)
    return chol.solve(b)

# =============================================================================
# =============================================================================
