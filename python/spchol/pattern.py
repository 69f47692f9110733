#!/usr/bin/env python3
# =============================================================================
#     File: pattern.py
#  Created: 2025-07-02 10:04
#   Author: Bernie Roesler
#
"""
Compressed sparsity patterns.

A `SparsityPattern` stores only the *structure* of a compressed sparse matrix:
the offsets of each major lane and the minor indices stored in each lane. For
a CSC matrix the major dimension is the number of columns and the minor
dimension is the number of rows.
"""
# =============================================================================

import operator

import numpy as np

from scipy import sparse

from ._errors import (DeserializationError, SparseFormatError,
                      SparseFormatErrorKind)


def _as_index_array(x, name):
    """Convert `x` to a 1D array of integer indices."""
    a = np.asarray(x)

    if a.ndim != 1:
        raise SparseFormatError(
            SparseFormatErrorKind.INVALID_STRUCTURE,
            f"{name} must be 1-dimensional, got shape {a.shape}."
        )

    if a.size > 0 and not np.issubdtype(a.dtype, np.integer):
        raise SparseFormatError(
            SparseFormatErrorKind.INVALID_STRUCTURE,
            f"{name} must contain integers, got dtype {a.dtype}."
        )

    return a.astype(np.intp)


def _as_dim(x, name):
    """Convert `x` to a non-negative integer dimension."""
    try:
        d = operator.index(x)
    except TypeError:
        raise SparseFormatError(
            SparseFormatErrorKind.INVALID_STRUCTURE,
            f"{name} must be an integer, got {type(x).__name__}."
        )

    if d < 0:
        raise SparseFormatError(
            SparseFormatErrorKind.INVALID_STRUCTURE,
            f"{name} must be non-negative, got {d}."
        )

    return d


class SparsityPattern:
    """The nonzero structure of a compressed sparse matrix.

    Patterns are immutable. The offset and index arrays are exposed as
    read-only numpy arrays, so a pattern can be shared freely between a
    matrix, its symbolic factorization and its numeric factorization.

    Use `SparsityPattern.try_from_offsets_and_indices` to build a pattern from
    raw arrays. The constructor validates:

    * ``len(major_offsets) == major_dim + 1``,
    * ``major_offsets[0] == 0`` and ``major_offsets[-1] == len(minor_indices)``,
    * the offsets are non-decreasing,
    * every minor index is in ``[0, minor_dim)``,
    * the minor indices of each lane are strictly increasing.
    """

    __slots__ = ('_major_dim', '_minor_dim', '_major_offsets',
                 '_minor_indices')

    def __init__(self, major_dim, minor_dim, major_offsets, minor_indices):
        # Use the classmethods; this initializer does no validation.
        self._major_dim = major_dim
        self._minor_dim = minor_dim
        self._major_offsets = major_offsets
        self._minor_indices = minor_indices
        self._major_offsets.flags.writeable = False
        self._minor_indices.flags.writeable = False

    # -------------------------------------------------------------------------
    #         Constructors
    # -------------------------------------------------------------------------
    @classmethod
    def try_from_offsets_and_indices(
        cls,
        major_dim,
        minor_dim,
        major_offsets,
        minor_indices
    ):
        """Create a validated sparsity pattern.

        Parameters
        ----------
        major_dim, minor_dim : int
            The number of major lanes and the size of each lane.
        major_offsets : (major_dim + 1,) array_like of int
            The start of each lane in `minor_indices`.
        minor_indices : (nnz,) array_like of int
            The minor index of every stored entry.

        Returns
        -------
        result : SparsityPattern
            The pattern. The input arrays are copied.

        Raises
        ------
        SparseFormatError
            If any of the structural invariants is violated. The `kind`
            attribute describes the failure.
        """
        major_dim = _as_dim(major_dim, 'major_dim')
        minor_dim = _as_dim(minor_dim, 'minor_dim')
        offsets = _as_index_array(major_offsets, 'major_offsets')
        indices = _as_index_array(minor_indices, 'minor_indices')
        nnz = indices.size

        if offsets.size != major_dim + 1:
            raise SparseFormatError(
                SparseFormatErrorKind.INVALID_STRUCTURE,
                f"Length of major offsets must be major_dim + 1 = "
                f"{major_dim + 1}, got {offsets.size}."
            )

        if offsets[0] != 0 or offsets[-1] != nnz:
            raise SparseFormatError(
                SparseFormatErrorKind.INVALID_STRUCTURE,
                f"First and last major offsets must be 0 and nnz = {nnz}, "
                f"got {offsets[0]} and {offsets[-1]}."
            )

        if np.any(np.diff(offsets) < 0):
            raise SparseFormatError(
                SparseFormatErrorKind.INVALID_STRUCTURE,
                "Major offsets must be non-decreasing."
            )

        if nnz > 0 and (indices.min() < 0 or indices.max() >= minor_dim):
            raise SparseFormatError(
                SparseFormatErrorKind.INDEX_OUT_OF_BOUNDS,
                f"Minor indices must be in [0, {minor_dim})."
            )

        # Compare each index with its successor, skipping lane boundaries
        steps = np.diff(indices)
        within_lane = np.ones(steps.size, dtype=bool)
        starts = offsets[1:-1]
        starts = starts[(starts > 0) & (starts < nnz)]
        within_lane[starts - 1] = False
        steps = steps[within_lane]

        if np.any(steps == 0):
            raise SparseFormatError(
                SparseFormatErrorKind.DUPLICATE_ENTRY,
                "Minor indices must be unique within a lane."
            )

        if np.any(steps < 0):
            raise SparseFormatError(
                SparseFormatErrorKind.INVALID_STRUCTURE,
                "Minor indices must be sorted in each lane."
            )

        return cls(major_dim, minor_dim, offsets, indices)

    @classmethod
    def _from_parts_unchecked(cls, major_dim, minor_dim, major_offsets,
                              minor_indices):
        """Create a pattern from arrays already known to be valid.

        The caller guarantees every invariant checked by
        `try_from_offsets_and_indices`. The arrays are not copied.
        """
        return cls(
            int(major_dim),
            int(minor_dim),
            np.asarray(major_offsets, dtype=np.intp),
            np.asarray(minor_indices, dtype=np.intp)
        )

    @classmethod
    def identity(cls, n):
        """The pattern of the `n`-by-`n` identity matrix."""
        n = _as_dim(n, 'n')
        return cls._from_parts_unchecked(n, n, np.arange(n + 1), np.arange(n))

    @classmethod
    def from_scipy(cls, A):
        """The pattern of a scipy sparse matrix, in CSC orientation.

        Parameters
        ----------
        A : (M, N) sparse array
            Any scipy sparse matrix. It is converted to CSC format with
            sorted, summed indices first; `A` itself is not modified.

        Returns
        -------
        result : SparsityPattern
            The pattern with ``major_dim = N`` and ``minor_dim = M``.
        """
        A = canonical_csc(A)
        M, N = A.shape
        return cls.try_from_offsets_and_indices(N, M, A.indptr, A.indices)

    # -------------------------------------------------------------------------
    #         Accessors
    # -------------------------------------------------------------------------
    @property
    def major_dim(self):
        return self._major_dim

    @property
    def minor_dim(self):
        return self._minor_dim

    @property
    def shape(self):
        """The shape ``(minor_dim, major_dim)`` of a CSC matrix."""
        return (self._minor_dim, self._major_dim)

    @property
    def nnz(self):
        """The number of stored entries."""
        return self._minor_indices.size

    @property
    def major_offsets(self):
        return self._major_offsets

    @property
    def minor_indices(self):
        return self._minor_indices

    def lane(self, i):
        """Return the minor indices of major lane `i` (read-only view)."""
        if not 0 <= i < self._major_dim:
            raise IndexError(
                f"Lane index {i} out of range for major_dim {self._major_dim}."
            )
        start, end = self._major_offsets[i], self._major_offsets[i + 1]
        return self._minor_indices[start:end]

    def lanes(self):
        """Iterate over the minor indices of every lane."""
        for i in range(self._major_dim):
            yield self.lane(i)

    def entries(self):
        """Iterate over ``(major, minor)`` pairs of all stored entries."""
        for i, lane in enumerate(self.lanes()):
            for j in lane:
                yield (i, int(j))

    # -------------------------------------------------------------------------
    #         Operations
    # -------------------------------------------------------------------------
    def transpose(self):
        """Compute the pattern of the transpose.

        Returns
        -------
        result : SparsityPattern
            A pattern with major and minor dimensions swapped. Each lane of the
            result is sorted.
        """
        counts = np.bincount(self._minor_indices, minlength=self._minor_dim)
        offsets = np.zeros(self._minor_dim + 1, dtype=np.intp)
        np.cumsum(counts, out=offsets[1:])

        # The major index of every entry, in storage order
        majors = np.repeat(
            np.arange(self._major_dim, dtype=np.intp),
            np.diff(self._major_offsets)
        )

        # A stable sort keeps the new lanes in ascending order
        order = np.argsort(self._minor_indices, kind='stable')

        return SparsityPattern._from_parts_unchecked(
            self._minor_dim,
            self._major_dim,
            offsets,
            majors[order]
        )

    # -------------------------------------------------------------------------
    #         Serialization
    # -------------------------------------------------------------------------
    def to_dict(self):
        """Return a JSON-compatible, field-by-field representation."""
        return {
            'major_dim': self._major_dim,
            'minor_dim': self._minor_dim,
            'major_offsets': self._major_offsets.tolist(),
            'minor_indices': self._minor_indices.tolist(),
        }

    @classmethod
    def from_dict(cls, d):
        """Reconstruct a pattern from `to_dict` output.

        Raises
        ------
        DeserializationError
            If a field is missing or the pattern is invalid.
        """
        try:
            return cls.try_from_offsets_and_indices(
                d['major_dim'],
                d['minor_dim'],
                d['major_offsets'],
                d['minor_indices']
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DeserializationError(f"invalid sparsity pattern: {e}") from e

    def __reduce__(self):
        return (SparsityPattern.from_dict, (self.to_dict(),))

    # -------------------------------------------------------------------------
    #         Comparison and display
    # -------------------------------------------------------------------------
    def __eq__(self, other):
        if not isinstance(other, SparsityPattern):
            return NotImplemented
        return (
            self._major_dim == other._major_dim
            and self._minor_dim == other._minor_dim
            and np.array_equal(self._major_offsets, other._major_offsets)
            and np.array_equal(self._minor_indices, other._minor_indices)
        )

    __hash__ = None

    def __repr__(self):
        return (f"SparsityPattern(major_dim={self._major_dim}, "
                f"minor_dim={self._minor_dim}, nnz={self.nnz})")


def canonical_csc(A):
    """Convert `A` to a CSC array with sorted, unique indices.

    The input is never modified; a copy is made when `A` has to be
    canonicalized.

    Parameters
    ----------
    A : (M, N) sparse array or array_like
        The matrix to convert.

    Returns
    -------
    result : (M, N) sparse.csc_array
        `A` in canonical CSC format.
    """
    if sparse.issparse(A) and A.format == 'csc':
        A = sparse.csc_array(A, copy=not A.has_canonical_format)
    else:
        A = sparse.csc_array(A)

    if not A.has_canonical_format:
        A.sum_duplicates()

    return A

# =============================================================================
# =============================================================================
