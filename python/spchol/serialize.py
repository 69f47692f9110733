#!/usr/bin/env python3
# =============================================================================
#     File: serialize.py
#  Created: 2025-07-07 16:05
#   Author: Bernie Roesler
#
"""
JSON persistence for sparsity patterns and Cholesky factorizations.

Each object is stored as its `to_dict` representation, tagged with its kind:

.. code-block:: python

    {"kind": "symbolic_cholesky", "data": {"m_pattern": {...}, ...}}

Loading goes through the `from_dict` constructors, so every structural check
is applied and an invalid file never produces an object.
"""
# =============================================================================

import json

from ._cholesky import CscCholesky, SymbolicCholesky
from ._errors import DeserializationError
from .pattern import SparsityPattern

_KINDS = {
    'pattern': SparsityPattern,
    'symbolic_cholesky': SymbolicCholesky,
    'cholesky': CscCholesky,
}


def _kind_of(obj):
    for kind, cls in _KINDS.items():
        if isinstance(obj, cls):
            return kind
    raise TypeError(f"Cannot serialize object of type {type(obj).__name__}.")


def dumps(obj, **kwargs):
    """Serialize a pattern or factorization to a JSON string.

    Parameters
    ----------
    obj : SparsityPattern, SymbolicCholesky or CscCholesky
        The object to serialize.
    **kwargs
        Additional keyword arguments passed to `json.dumps`.

    Returns
    -------
    result : str
        The JSON document.
    """
    return json.dumps({'kind': _kind_of(obj), 'data': obj.to_dict()}, **kwargs)


def loads(s):
    """Deserialize a pattern or factorization from a JSON string.

    Parameters
    ----------
    s : str
        A document created by `dumps`.

    Returns
    -------
    result : SparsityPattern, SymbolicCholesky or CscCholesky
        The reconstructed object.

    Raises
    ------
    DeserializationError
        If the document is not valid JSON, has an unknown kind, or describes
        an invalid object.
    """
    try:
        doc = json.loads(s)
        kind = doc['kind']
        data = doc['data']
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise DeserializationError(f"malformed document: {e}") from e

    try:
        cls = _KINDS[kind]
    except (KeyError, TypeError):
        raise DeserializationError(f"unknown kind {kind!r}")

    return cls.from_dict(data)


def dump(obj, fp, **kwargs):
    """Serialize `obj` as JSON to the file-like object `fp`."""
    fp.write(dumps(obj, **kwargs))


def load(fp):
    """Deserialize an object from the file-like object `fp`."""
    return loads(fp.read())

# =============================================================================
# =============================================================================
