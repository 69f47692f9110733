#!/usr/bin/env python3
# =============================================================================
#     File: _errors.py
#  Created: 2025-07-02 09:20
#   Author: Bernie Roesler
#
"""
Exceptions raised by the spchol package.
"""
# =============================================================================

from enum import Enum, auto

from numpy.linalg import LinAlgError


class SparseFormatErrorKind(Enum):
    """The reason a sparsity pattern was rejected."""

    INVALID_STRUCTURE = auto()
    """Offsets have the wrong length, wrong boundaries or decrease, or the
    indices of a lane are not sorted."""

    INDEX_OUT_OF_BOUNDS = auto()
    """A minor index is negative or not less than the minor dimension."""

    DUPLICATE_ENTRY = auto()
    """The same minor index appears twice in a lane."""


class SparseFormatError(ValueError):
    """Invalid offsets or indices given to a sparsity pattern constructor."""

    def __init__(self, kind, message):
        super().__init__(message)
        self.kind = kind


class NotPositiveDefiniteError(LinAlgError):
    """The matrix is not (numerically) symmetric positive definite.

    Any factor values computed before the failure are unusable.

    Attributes
    ----------
    column : int or None
        The column at which a non-positive pivot was encountered.
    """

    def __init__(self, column=None):
        msg = "matrix is not positive definite"
        if column is not None:
            msg += f" (non-positive pivot in column {column})"
        super().__init__(msg)
        self.column = column


class DeserializationError(ValueError):
    """A persisted pattern or factorization failed validation."""

# =============================================================================
# =============================================================================
