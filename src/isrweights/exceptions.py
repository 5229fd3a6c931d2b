# SPDX-License-Identifier: MIT
"""
isrweights.exceptions
=====================

Exception hierarchy shared by the weighting core and the experiment layer.

- :class:`ConfigurationError` – invalid scheme identifiers, distance
  exponents or run options. Raised before any computation happens.
- :class:`DatasetError` – malformed datasets or neighbor lists.
- :class:`ComputationError` – a numeric failure that must not be confused
  with a valid weight (rank-deficient regression samples, degenerate
  hyperplanes, malformed regressor output).

Configuration and dataset errors also derive from :class:`ValueError`, and
computation errors from :class:`ArithmeticError`, so callers that only know
the built-in exceptions still catch them.
"""

from __future__ import annotations


class WeightingError(Exception):
    """Base class for every error raised by isrweights."""


class ConfigurationError(WeightingError, ValueError):
    """Invalid scheme, distance exponent or run option."""


class DatasetError(WeightingError, ValueError):
    """Dataset arrays or neighbor lists are inconsistent."""


class ComputationError(WeightingError, ArithmeticError):
    """A weight could not be computed for a given instance."""


class RankDeficientError(ComputationError):
    """The regression sample cannot identify every OLS coefficient."""


class RegressionError(ComputationError):
    """The regressor returned malformed or non-finite coefficients."""


class DegenerateHyperplaneError(ComputationError):
    """The fitted hyperplane has a zero or non-finite normal vector."""


__all__ = [
    "WeightingError",
    "ConfigurationError",
    "DatasetError",
    "ComputationError",
    "RankDeficientError",
    "RegressionError",
    "DegenerateHyperplaneError",
]
