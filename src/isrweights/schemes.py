# SPDX-License-Identifier: MIT
"""
isrweights.schemes
==================

Weighting schemes. Each scheme scores one instance from its relationship to
its k nearest neighbors:

"proximity-x" / "proximity-xy"
    Sum of the distances from the instance to its neighbors, in the input
    space (x) or the input-output space (xy).

"surrounding-x" / "surrounding-xy"
    Length of the resultant of the vectors joining each neighbor to the
    instance. Neighbors spread in every direction cancel out (the instance
    is surrounded); neighbors on one side add up (boundary instance).

"nonlinearity"
    Distance from the instance to the least-squares hyperplane fitted
    through the instance and its neighbors in the input-output space.

Weights are raw: neither averaged over the neighbors nor normalized across
the dataset. The main entry point is :func:`weigh`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

import numpy as np

from .data import Instance
from .minkowski import distance, distances_to, validate_exponent
from .exceptions import ConfigurationError
from .regression import (
    Regressor,
    fit_coefficients,
    hyperplane_from_coefficients,
    point_hyperplane_distance,
)


class Space(str, Enum):
    """Vector space a scheme measures distances in."""

    INPUT = "x"
    INPUT_OUTPUT = "xy"


class Scheme(str, Enum):
    """Weighting schemes understood by :func:`weigh`."""

    PROXIMITY_X = "proximity-x"
    PROXIMITY_XY = "proximity-xy"
    SURROUNDING_X = "surrounding-x"
    SURROUNDING_XY = "surrounding-xy"
    NONLINEARITY = "nonlinearity"

    @classmethod
    def parse(cls, value: Union[str, "Scheme"]) -> "Scheme":
        """
        Convert an identifier to a :class:`Scheme`.

        Raises
        ------
        ConfigurationError
            If ``value`` is not one of the exact scheme identifiers.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Unknown weighting scheme {value!r}. "
                f"Supported schemes are: {[s.value for s in cls]}."
            ) from None

    @property
    def space(self) -> Space:
        if self in (Scheme.PROXIMITY_X, Scheme.SURROUNDING_X):
            return Space.INPUT
        return Space.INPUT_OUTPUT


@dataclass(frozen=True)
class WeightConfig:
    """
    Scheme and Minkowski exponent for a weighting run.

    Both fields are validated on construction, so an invalid configuration
    never reaches the estimators.
    """

    scheme: Scheme
    dist_metric: float = 2.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "scheme", Scheme.parse(self.scheme))
        object.__setattr__(self, "dist_metric", validate_exponent(self.dist_metric))

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> "WeightConfig":
        """Build from ``{"scheme": ..., "dist_metric": ...}`` (``"distMetric"`` also accepted)."""
        if "scheme" not in params:
            raise ConfigurationError("Weight configuration requires a 'scheme' entry.")
        z = params.get("dist_metric", params.get("distMetric", 2.0))
        return cls(scheme=params["scheme"], dist_metric=z)


# ---------------------------------------------------------------------------
# Vector selection
# ---------------------------------------------------------------------------


def _instance_vector(instance: Instance, space: Space) -> np.ndarray:
    return instance.input if space is Space.INPUT else instance.all_attrs


def _neighbor_vectors(instance: Instance, space: Space) -> np.ndarray:
    return instance.neighbor_inputs if space is Space.INPUT else instance.neighbor_all_attrs


def _infer_space(instance: Instance, p, space: Optional[Space]) -> Space:
    if space is not None:
        return Space(space)
    size = np.asarray(p).size
    return Space.INPUT_OUTPUT if size == instance.dataset.n_features + 1 else Space.INPUT


# ---------------------------------------------------------------------------
# Estimators
# ---------------------------------------------------------------------------


def proximity(instance: Instance, p, n: int, z: float, space: Optional[Space] = None) -> float:
    """
    Sum of the distances from ``p`` to each neighbor vector.

    Parameters
    ----------
    instance : Instance
        Instance whose neighbors are used.
    p : array-like
        Reference vector (the instance's input or input+output).
    n : int
        Number of dimensions that participate.
    z : float
        Minkowski exponent.
    space : Space or None
        Which neighbor vectors to compare against. When None it is taken
        from the length of ``p``: D+1 components means input-output.
    """
    space = _infer_space(instance, p, space)
    return float(np.sum(distances_to(p, _neighbor_vectors(instance, space), n, z)))


def surrounding(instance: Instance, p, n: int, z: float, space: Optional[Space] = None) -> float:
    """
    Length of the resultant of the displacement vectors ``p - neighbor``.

    The resultant is a plain sum (not an average); its length is measured
    with the same Minkowski exponent as the other schemes.
    """
    space = _infer_space(instance, p, space)
    pv = np.asarray(p, dtype="float64").ravel()
    resultant = np.zeros(int(n), dtype="float64")
    if instance.n_neighbors:
        Q = _neighbor_vectors(instance, space)
        resultant = np.sum(pv[None, :n] - Q[:, :n], axis=0)

    origin = np.zeros(int(n), dtype="float64")
    return distance(origin, resultant, n, z)


def nonlinearity(instance: Instance, regressor: Optional[Regressor] = None) -> float:
    """
    Deviation of the instance from the hyperplane fitted through it and its
    neighbors.

    The sample has k+1 rows (the instance first, then each neighbor). The
    output is regressed on the inputs by ``regressor`` (scikit-learn OLS by
    default) and the weight is the perpendicular distance from the
    instance's (input, output) point to the resulting hyperplane.

    Raises
    ------
    RankDeficientError
        If the sample cannot identify the D+1 coefficients.
    RegressionError, DegenerateHyperplaneError
        If the regressor output cannot define a hyperplane.
    """
    X = np.vstack([instance.input[None, :], instance.neighbor_inputs])
    y = np.concatenate([[instance.output], instance.neighbor_outputs])

    coef = fit_coefficients(y, X, regressor)
    normal, constant = hyperplane_from_coefficients(coef)
    return point_hyperplane_distance(instance.all_attrs, normal, constant)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


def weigh(
    instance: Instance,
    config: WeightConfig,
    *,
    regressor: Optional[Regressor] = None,
) -> float:
    """
    Weight of ``instance`` under ``config``.

    Parameters
    ----------
    instance : Instance
        Instance with its neighbor list attached.
    config : WeightConfig
        Scheme and Minkowski exponent.
    regressor : callable or None
        OLS routine for the nonlinearity scheme (see
        :mod:`isrweights.regression`). Ignored by the other schemes.

    Returns
    -------
    float
        The raw weight.
    """
    if not isinstance(config, WeightConfig):
        raise ConfigurationError(
            f"Expected a WeightConfig, got {type(config).__name__}."
        )

    scheme = config.scheme
    if scheme is Scheme.NONLINEARITY:
        return nonlinearity(instance, regressor)

    space = scheme.space
    p = _instance_vector(instance, space)
    n = p.size

    if scheme in (Scheme.PROXIMITY_X, Scheme.PROXIMITY_XY):
        return proximity(instance, p, n, config.dist_metric, space)
    if scheme in (Scheme.SURROUNDING_X, Scheme.SURROUNDING_XY):
        return surrounding(instance, p, n, config.dist_metric, space)

    raise ConfigurationError(f"Unhandled weighting scheme {scheme!r}.")


__all__ = [
    "Space",
    "Scheme",
    "WeightConfig",
    "proximity",
    "surrounding",
    "nonlinearity",
    "weigh",
]
