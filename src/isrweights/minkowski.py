# SPDX-License-Identifier: MIT
"""
isrweights.minkowski
====================

Parameterized Minkowski distance.

For two vectors ``p`` and ``q`` and an exponent ``z > 0``::

    d(p, q) = ( sum_i |p[i] - q[i]|^z )^(1/z)

- ``z = 1``  → Manhattan distance
- ``z = 2``  → Euclidean distance
- ``0 < z < 1`` → fractional distance (not a metric, but a valid proximity
  notion for high-dimensional data)

Only the first ``n`` components of each vector take part in the sum, so the
same helpers work on the input space (``n = D``) and on the input-output
space (``n = D + 1``).
"""

from __future__ import annotations

import math

import numpy as np

from .exceptions import ConfigurationError


def validate_exponent(z) -> float:
    """
    Return ``z`` as a float, or raise :class:`ConfigurationError` if it is
    not a strictly positive finite number.
    """
    try:
        value = float(z)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Distance exponent must be a real number, got {z!r}."
        ) from exc

    if not math.isfinite(value) or value <= 0.0:
        raise ConfigurationError(
            f"Distance exponent must be positive and finite, got {value!r}."
        )
    return value


def _check_dims(n: int, *lengths: int) -> int:
    n = int(n)
    if n < 0:
        raise ValueError(f"Number of dimensions must be >= 0, got {n}.")
    for length in lengths:
        if n > length:
            raise ValueError(
                f"Cannot compare {n} components of a vector of length {length}."
            )
    return n


def distance(p, q, n: int, z: float) -> float:
    """
    Generalized Minkowski distance between the first ``n`` components of
    ``p`` and ``q``.

    Parameters
    ----------
    p, q : array-like
        Vectors of length at least ``n``.
    n : int
        Number of leading components that participate.
    z : float
        Minkowski exponent, strictly positive.

    Returns
    -------
    float
        Non-negative distance; 0.0 iff ``p`` and ``q`` agree on all ``n``
        components.

    Raises
    ------
    ConfigurationError
        If ``z`` is zero, negative or not finite.
    ValueError
        If ``n`` exceeds the length of either vector.
    """
    z = validate_exponent(z)
    pv = np.asarray(p, dtype="float64").ravel()
    qv = np.asarray(q, dtype="float64").ravel()
    n = _check_dims(n, pv.size, qv.size)
    if n == 0:
        return 0.0

    diff = np.abs(pv[:n] - qv[:n])
    # scale by the largest gap so large exponents do not overflow
    m = float(diff.max())
    if m == 0.0:
        return 0.0
    return float(m * np.sum((diff / m) ** z) ** (1.0 / z))


def distances_to(p, Q, n: int, z: float) -> np.ndarray:
    """
    Vectorized :func:`distance` from ``p`` to every row of ``Q``.

    Returns an array with one distance per row of ``Q`` (empty when ``Q``
    has no rows).
    """
    z = validate_exponent(z)
    pv = np.asarray(p, dtype="float64").ravel()
    Qm = np.asarray(Q, dtype="float64")
    if Qm.size == 0:
        return np.zeros(0, dtype="float64")
    if Qm.ndim == 1:
        Qm = Qm.reshape(1, -1)
    n = _check_dims(n, pv.size, Qm.shape[1])
    if n == 0:
        return np.zeros(Qm.shape[0], dtype="float64")

    diff = np.abs(Qm[:, :n] - pv[None, :n])
    m = diff.max(axis=1)
    safe = np.where(m > 0.0, m, 1.0)
    return m * np.sum((diff / safe[:, None]) ** z, axis=1) ** (1.0 / z)


def norm(v, n: int, z: float) -> float:
    """Length of ``v`` (first ``n`` components) under the ``z``-Minkowski metric."""
    vv = np.asarray(v, dtype="float64").ravel()
    return distance(np.zeros(vv.size), vv, n, z)


__all__ = [
    "validate_exponent",
    "distance",
    "distances_to",
    "norm",
]
