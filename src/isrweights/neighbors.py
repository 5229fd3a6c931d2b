# src/isrweights/neighbors.py
# SPDX-License-Identifier: MIT
"""
isrweights.neighbors
====================

k-nearest-neighbor search used to attach neighbor lists to a dataset.

The weighting schemes never search for neighbors themselves; they read the
lists built here:

- :func:`knn_indices`:
    For every row of a point matrix, the indices and distances of its k
    nearest *other* rows (self excluded), closest first.
- :func:`build_dataset`:
    Convenience wrapper returning a :class:`~isrweights.data.Dataset` with
    neighbors searched in the input (x) or input-output (xy) space.
- :func:`neighbor_table`:
    Long table ``[from_idx, to_idx, rank, distance]`` of a dataset's lists.

Distances use the same Minkowski exponent as the schemes. For exponents
>= 1 the search runs on a scikit-learn :class:`~sklearn.neighbors.NearestNeighbors`
index; fractional exponents are not metrics, so they fall back to a brute
force scan with :func:`isrweights.minkowski.distances_to`.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np
import pandas as pd
from sklearn.neighbors import NearestNeighbors

from .data import Dataset
from .minkowski import distances_to, validate_exponent
from .exceptions import ConfigurationError, DatasetError


# ---------------------------------------------------------------------------
# Core search
# ---------------------------------------------------------------------------


def _drop_self(
    ind: np.ndarray,
    dist: np.ndarray,
    k: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Remove each row's own index from a (N, k+1) query result and keep k.
    """
    n_rows = ind.shape[0]
    out_ind = np.empty((n_rows, k), dtype=np.intp)
    out_dist = np.empty((n_rows, k), dtype="float64")
    for i in range(n_rows):
        keep = ind[i] != i
        row_ind = ind[i][keep][:k]
        row_dist = dist[i][keep][:k]
        out_ind[i] = row_ind
        out_dist[i] = row_dist
    return out_ind, out_dist


def _brute_force(points: np.ndarray, query_k: int, z: float) -> Tuple[np.ndarray, np.ndarray]:
    n_rows, n_dim = points.shape
    ind = np.empty((n_rows, query_k), dtype=np.intp)
    dist = np.empty((n_rows, query_k), dtype="float64")
    for i in range(n_rows):
        d = distances_to(points[i], points, n_dim, z)
        order = np.argsort(d, kind="mergesort")[:query_k]
        ind[i] = order
        dist[i] = d[order]
    return ind, dist


def knn_indices(
    points,
    k: int,
    *,
    p: float = 2.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Find the k nearest neighbors of every row of ``points``.

    Parameters
    ----------
    points : array-like, shape (N, d)
        Vectors to search.
    k : int
        Desired number of neighbors per row. When ``k`` is larger than the
        number of other rows, the effective k is capped at N - 1.
    p : float, default 2.0
        Minkowski exponent of the search distance.

    Returns
    -------
    (indices, distances) : tuple of ndarray, shape (N, k_eff)
        Neighbor row indices (closest first, never the row itself) and the
        matching distances.
    """
    z = validate_exponent(p)
    X = np.asarray(points, dtype="float64")
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if X.ndim != 2:
        raise DatasetError(f"points must be a 2-D array, got shape {X.shape}.")

    k = int(k)
    if k < 1:
        raise ConfigurationError(f"Number of neighbors must be >= 1, got {k}.")

    n_rows = X.shape[0]
    k_eff = min(k, max(n_rows - 1, 0))
    if k_eff == 0:
        return (
            np.zeros((n_rows, 0), dtype=np.intp),
            np.zeros((n_rows, 0), dtype="float64"),
        )

    # query one extra row so self can be dropped
    query_k = k_eff + 1
    if z >= 1.0:
        nn = NearestNeighbors(n_neighbors=query_k, metric="minkowski", p=z)
        nn.fit(X)
        dist, ind = nn.kneighbors(X)
    else:
        ind, dist = _brute_force(X, query_k, z)

    return _drop_self(ind, dist, k_eff)


# ---------------------------------------------------------------------------
# Dataset helpers
# ---------------------------------------------------------------------------


def build_dataset(
    inputs,
    outputs,
    k: int,
    *,
    space: str = "x",
    p: float = 2.0,
) -> Dataset:
    """
    Build a :class:`Dataset` with k-NN lists attached.

    Parameters
    ----------
    inputs : array-like, shape (N, D)
    outputs : array-like, shape (N,)
    k : int
        Number of neighbors per instance.
    space : {"x", "xy"}, default "x"
        Search neighbors among the inputs only, or among inputs with the
        output appended.
    p : float, default 2.0
        Minkowski exponent of the search distance.
    """
    base = Dataset(inputs, outputs)
    return attach_neighbors(base, k, space=space, p=p)


def attach_neighbors(
    dataset: Dataset,
    k: int,
    *,
    space: str = "x",
    p: float = 2.0,
) -> Dataset:
    """Return ``dataset`` with freshly searched neighbor lists."""
    if space == "x":
        points = dataset.inputs
    elif space == "xy":
        points = dataset.all_attrs
    else:
        raise ConfigurationError(f"Neighbor space must be 'x' or 'xy', got {space!r}.")

    ind, _ = knn_indices(points, k, p=p)
    return dataset.with_neighbors(ind)


def neighbor_table(dataset: Dataset, *, p: float = 2.0, space: str = "x") -> pd.DataFrame:
    """
    Long table of a dataset's neighbor lists.

    Returns
    -------
    pandas.DataFrame
        Columns ``["from_idx", "to_idx", "rank", "distance"]``; ``rank``
        starts at 1 for the closest neighbor and ``distance`` is measured
        in ``space`` with exponent ``p``.
    """
    points = dataset.inputs if space == "x" else dataset.all_attrs
    n_dim = points.shape[1]

    rows: List[dict] = []
    for i, neigh in enumerate(dataset.neighbors):
        if neigh.size == 0:
            continue
        d = distances_to(points[i], points[neigh], n_dim, p)
        for rank, (j, dj) in enumerate(zip(neigh, d), start=1):
            rows.append(
                {
                    "from_idx": i,
                    "to_idx": int(j),
                    "rank": rank,
                    "distance": float(dj),
                }
            )

    if not rows:
        return pd.DataFrame(columns=["from_idx", "to_idx", "rank", "distance"])
    return pd.DataFrame(rows)


__all__ = [
    "knn_indices",
    "build_dataset",
    "attach_neighbors",
    "neighbor_table",
]
