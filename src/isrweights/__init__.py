# SPDX-License-Identifier: MIT
"""
isrweights
==========

Instance weights for instance selection and reduction, computed from each
instance's k nearest neighbors.

Weighting schemes
-----------------

- ``proximity-x`` / ``proximity-xy`` – sum of the distances to the
  neighbors, in the input space or the input-output space.
- ``surrounding-x`` / ``surrounding-xy`` – length of the resultant of the
  vectors joining the neighbors to the instance.
- ``nonlinearity`` – distance from the instance to the least-squares
  hyperplane through the instance and its neighbors.
- ``remoteness-x`` / ``remoteness-xy`` – composites that alternate between
  proximity and surrounding per instance (experiment layer only).

Distances use a parameterized Minkowski metric (z=1 Manhattan, z=2
Euclidean, 0<z<1 fractional).

Core submodules
---------------

- :mod:`isrweights.minkowski`  – Minkowski distance
- :mod:`isrweights.data`       – Dataset / Instance views
- :mod:`isrweights.schemes`    – estimators and the :func:`weigh` dispatcher
- :mod:`isrweights.regression` – OLS collaborators and hyperplane geometry

Experiment layer
----------------

- :mod:`isrweights.neighbors`  – k-NN search (scikit-learn)
- :mod:`isrweights.experiment` – dataset-level weighting and runner
- :mod:`isrweights.io`         – table loading/saving
- :mod:`isrweights.viz`        – plotting helpers
- :mod:`isrweights.cli`        – ``isrweights`` command
"""

from __future__ import annotations

# Core
from .minkowski import distance, distances_to, norm
from .data import Dataset, Instance, dataset_from_frame
from .schemes import (
    Scheme,
    Space,
    WeightConfig,
    proximity,
    surrounding,
    nonlinearity,
    weigh,
)
from .regression import (
    SUPPORTED_REGRESSORS,
    make_regressor,
    sklearn_ols,
    lstsq_ols,
)

# Errors
from .exceptions import (
    WeightingError,
    ConfigurationError,
    DatasetError,
    ComputationError,
    RankDeficientError,
    RegressionError,
    DegenerateHyperplaneError,
)

# Experiment layer
from .neighbors import knn_indices, build_dataset, attach_neighbors, neighbor_table
from .experiment import (
    CompositeScheme,
    RoundRobinAlternation,
    RandomAlternation,
    resolve_scheme,
    weights_frame,
    compute_weights,
    normalize_weights,
    ExperimentConfig,
    ExperimentResult,
    run_experiment,
)


__all__ = [
    # Core
    "distance",
    "distances_to",
    "norm",
    "Dataset",
    "Instance",
    "dataset_from_frame",
    "Scheme",
    "Space",
    "WeightConfig",
    "proximity",
    "surrounding",
    "nonlinearity",
    "weigh",
    "SUPPORTED_REGRESSORS",
    "make_regressor",
    "sklearn_ols",
    "lstsq_ols",
    # Errors
    "WeightingError",
    "ConfigurationError",
    "DatasetError",
    "ComputationError",
    "RankDeficientError",
    "RegressionError",
    "DegenerateHyperplaneError",
    # Experiment layer
    "knn_indices",
    "build_dataset",
    "attach_neighbors",
    "neighbor_table",
    "CompositeScheme",
    "RoundRobinAlternation",
    "RandomAlternation",
    "resolve_scheme",
    "weights_frame",
    "compute_weights",
    "normalize_weights",
    "ExperimentConfig",
    "ExperimentResult",
    "run_experiment",
]


# Sync this with pyproject.toml if you bump the version
__version__ = "0.1.0"
