# SPDX-License-Identifier: MIT
"""
Ordinary least-squares collaborators for the nonlinearity scheme.

The nonlinearity weight needs one thing from a regression routine: given a
response vector ``y`` (length m) and a design matrix ``X`` (m rows × D
columns, *without* an intercept column), return the D+1 OLS coefficients
with the intercept first::

    [b0, b1, ..., bD]

Any callable with that signature is a :class:`Regressor`, so tests and
callers can swap in their own routine. Two are provided:

"ols"    : scikit-learn ``LinearRegression`` (default)
"lstsq"  : ``numpy.linalg.lstsq`` on an explicit intercept column

This module also holds the geometry that turns coefficients into a
hyperplane in the (input, output) space and measures point deviation from
it.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple

import numpy as np
from sklearn.linear_model import LinearRegression

from .exceptions import (
    ConfigurationError,
    DegenerateHyperplaneError,
    RankDeficientError,
    RegressionError,
)


Regressor = Callable[[np.ndarray, np.ndarray], np.ndarray]


# ---------------------------------------------------------------------------
# Regressors
# ---------------------------------------------------------------------------


def sklearn_ols(y: np.ndarray, X: np.ndarray) -> np.ndarray:
    """OLS coefficients (intercept first) from scikit-learn's LinearRegression."""
    model = LinearRegression(fit_intercept=True)
    model.fit(X, y)
    return np.concatenate([[float(model.intercept_)], np.ravel(model.coef_)])


def lstsq_ols(y: np.ndarray, X: np.ndarray) -> np.ndarray:
    """OLS coefficients (intercept first) from ``numpy.linalg.lstsq``."""
    design = np.column_stack([np.ones(X.shape[0]), X])
    coef, _, _, _ = np.linalg.lstsq(design, y, rcond=None)
    return coef


SUPPORTED_REGRESSORS: Dict[str, Tuple[str, Regressor]] = {
    "ols": ("LinearRegression", sklearn_ols),
    "lstsq": ("numpy.linalg.lstsq", lstsq_ols),
}


def make_regressor(kind: str = "ols") -> Regressor:
    """
    Return a regressor callable by name (case-insensitive).

    Raises
    ------
    ConfigurationError
        If ``kind`` is not one of ``SUPPORTED_REGRESSORS``.
    """
    key = (kind or "ols").lower()
    if key not in SUPPORTED_REGRESSORS:
        raise ConfigurationError(
            f"Unsupported regressor '{kind}'. "
            f"Supported kinds are: {sorted(SUPPORTED_REGRESSORS.keys())}."
        )
    return SUPPORTED_REGRESSORS[key][1]


# ---------------------------------------------------------------------------
# Fitting with sample checks
# ---------------------------------------------------------------------------


def check_sample(y: np.ndarray, X: np.ndarray) -> None:
    """
    Raise :class:`RankDeficientError` if OLS with intercept cannot identify
    all D+1 coefficients from ``(y, X)``.

    Two cases are rejected:

    - not enough rows: m <= D (the sample has fewer equations than the D
      slopes it must determine, before even counting the intercept);
    - collinear regressors: the design matrix ``[1 | X]`` has rank < D+1.
    """
    m, d = X.shape
    if y.shape[0] != m:
        raise RegressionError(
            f"Response has {y.shape[0]} rows but the design matrix has {m}."
        )
    if m <= d:
        raise RankDeficientError(
            f"Not enough data ({m} rows) for {d} predictors plus intercept."
        )

    design = np.column_stack([np.ones(m), X])
    rank = int(np.linalg.matrix_rank(design))
    if rank < d + 1:
        raise RankDeficientError(
            f"Design matrix is rank deficient (rank {rank} < {d + 1}); "
            f"regressors are collinear."
        )


def fit_coefficients(y, X, regressor: Regressor | None = None) -> np.ndarray:
    """
    Check the sample, run ``regressor`` and validate its output.

    Returns
    -------
    ndarray
        ``[b0, b1, ..., bD]``.
    """
    yv = np.asarray(y, dtype="float64").ravel()
    Xm = np.asarray(X, dtype="float64")
    if Xm.ndim != 2:
        raise RegressionError(f"Design matrix must be 2-D, got shape {Xm.shape}.")

    check_sample(yv, Xm)

    fit = regressor if regressor is not None else sklearn_ols
    coef = np.asarray(fit(yv, Xm), dtype="float64").ravel()

    if coef.size != Xm.shape[1] + 1:
        raise RegressionError(
            f"Regressor returned {coef.size} coefficients, expected {Xm.shape[1] + 1}."
        )
    if not np.all(np.isfinite(coef)):
        raise RegressionError("Regressor returned non-finite coefficients.")
    return coef


# ---------------------------------------------------------------------------
# Hyperplane geometry
# ---------------------------------------------------------------------------


def hyperplane_from_coefficients(coef) -> Tuple[np.ndarray, float]:
    """
    Convert OLS coefficients ``[b0, b1..bD]`` into a hyperplane in the
    (D+1)-dimensional (input, output) space.

    The plane ``b1*x1 + ... + bD*xD - y + b0 = 0`` is equivalent to
    ``y = b0 + sum(bi*xi)``.

    Returns
    -------
    (normal, constant)
        ``normal = [b1, ..., bD, -1]`` and ``constant = b0``.
    """
    c = np.asarray(coef, dtype="float64").ravel()
    if c.size < 1:
        raise RegressionError("Empty coefficient vector.")
    normal = np.append(c[1:], -1.0)
    return normal, float(c[0])


def point_hyperplane_distance(point, normal, constant: float) -> float:
    """
    Perpendicular distance from ``point`` to ``normal · x + constant = 0``.

    Raises
    ------
    DegenerateHyperplaneError
        If the normal vector has zero or non-finite length.
    """
    x = np.asarray(point, dtype="float64").ravel()
    w = np.asarray(normal, dtype="float64").ravel()
    if x.size != w.size:
        raise ValueError(
            f"Point has {x.size} components but the hyperplane has {w.size}."
        )

    length = float(np.sqrt(np.sum(w ** 2)))
    if not np.isfinite(length) or length == 0.0:
        raise DegenerateHyperplaneError(
            "Hyperplane normal vector has zero or non-finite length."
        )
    return abs(float(np.dot(w, x)) + float(constant)) / length


__all__ = [
    "Regressor",
    "SUPPORTED_REGRESSORS",
    "sklearn_ols",
    "lstsq_ols",
    "make_regressor",
    "check_sample",
    "fit_coefficients",
    "hyperplane_from_coefficients",
    "point_hyperplane_distance",
]
