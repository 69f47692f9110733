#!/usr/bin/env python3
# =============================================================================
#     File: __init__.py
#  Created: 2025-07-02 08:55
#   Author: Bernie Roesler
#
"""
spchol: Sparse Cholesky factorization of symmetric positive definite matrices.

The factorization is split into a symbolic phase, which depends only on the
sparsity pattern, and a numeric phase, which can be repeated for new values
with the same pattern.

Example usage:
    import spchol
    A = spchol.davis_example_chol()          # scipy.sparse.csc_array
    chol = spchol.CscCholesky.factor(A)
    x = chol.solve(b)

    # Same pattern, new values
    chol.refactor(2 * A.data)

Plotting functions are in `spchol.plot`, JSON persistence in
`spchol.serialize`.

Author: Bernie Roesler
Date: 2025-07-02
Version: 0.1
"""
# =============================================================================

from ._errors import (DeserializationError, NotPositiveDefiniteError,
                      SparseFormatError, SparseFormatErrorKind)
from ._etree import elimination_tree, nonzero_pattern, reach
from ._cholesky import CscCholesky, SymbolicCholesky, chol_solve
from ._trisolve import lsolve, ltsolve, spsolve_csc_lower_triangular
from .pattern import SparsityPattern, canonical_csc
from .serialize import dump, dumps, load, loads
from .utils import (davis_example_chol, davis_example_etree,
                    diagonal_example, fill_in, format_matrix,
                    pattern_to_ndarray, spd_example, to_scipy_sparse)

__version__ = '0.1.0'

__all__ = [
    'CscCholesky',
    'DeserializationError',
    'NotPositiveDefiniteError',
    'SparseFormatError',
    'SparseFormatErrorKind',
    'SparsityPattern',
    'SymbolicCholesky',
    'canonical_csc',
    'chol_solve',
    'davis_example_chol',
    'davis_example_etree',
    'diagonal_example',
    'dump',
    'dumps',
    'elimination_tree',
    'fill_in',
    'format_matrix',
    'load',
    'loads',
    'lsolve',
    'ltsolve',
    'nonzero_pattern',
    'pattern_to_ndarray',
    'reach',
    'spd_example',
    'spsolve_csc_lower_triangular',
    'to_scipy_sparse',
]

# =============================================================================
# =============================================================================
