# SPDX-License-Identifier: MIT
"""
isrweights.data
===============

Dataset and instance views consumed by the weighting schemes.

A :class:`Dataset` holds three arrays:

- ``inputs``    – (N, D) feature matrix,
- ``outputs``   – (N,) target vector,
- ``neighbors`` – one row of neighbor indices per instance (k nearest
  neighbors, closest first), produced by an external k-NN search such as
  :func:`isrweights.neighbors.knn_indices`.

An :class:`Instance` is a lightweight, read-only view of one row. Its
neighbors are *borrowed*: they are indices into the same dataset, so the
same neighbor lists can be reused by any number of weighting calls without
copies or mutation. All arrays are flagged read-only on construction.

Helpers
-------
- :func:`validate_required_columns` – column check for DataFrame inputs.
- :func:`dataset_from_frame` – build a dataset from a pandas table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .exceptions import DatasetError


NeighborRows = Union[np.ndarray, Sequence[Sequence[int]]]


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def _coerce_neighbors(neighbors: Optional[NeighborRows], n_rows: int) -> Tuple[np.ndarray, ...]:
    """
    Convert neighbor lists to a tuple of read-only int arrays (ragged allowed).
    """
    if neighbors is None:
        return tuple(_readonly(np.zeros(0, dtype=np.intp)) for _ in range(n_rows))

    rows = list(neighbors)
    if len(rows) != n_rows:
        raise DatasetError(
            f"Expected {n_rows} neighbor lists (one per instance), got {len(rows)}."
        )

    out: List[np.ndarray] = []
    for i, row in enumerate(rows):
        idx = np.asarray(row)
        if idx.size == 0:
            out.append(_readonly(np.zeros(0, dtype=np.intp)))
            continue
        if idx.ndim != 1 or not np.issubdtype(idx.dtype, np.integer):
            raise DatasetError(
                f"Neighbor list of instance {i} must be a 1-D sequence of integers."
            )
        if idx.min() < 0 or idx.max() >= n_rows:
            raise DatasetError(
                f"Neighbor list of instance {i} references rows outside [0, {n_rows})."
            )
        out.append(_readonly(idx.astype(np.intp, copy=True)))
    return tuple(out)


@dataclass(frozen=True, eq=False, repr=False)
class Dataset:
    """
    Labeled dataset with precomputed neighbor lists.

    Parameters
    ----------
    inputs : array-like, shape (N, D)
    outputs : array-like, shape (N,)
    neighbors : array-like of shape (N, k), sequence of N index sequences, or None
        Neighbor row indices for each instance. ``None`` means no neighbors
        have been attached yet (see :meth:`with_neighbors`).
    """

    inputs: np.ndarray
    outputs: np.ndarray
    neighbors: Tuple[np.ndarray, ...] = field(default=())

    def __init__(self, inputs, outputs, neighbors: Optional[NeighborRows] = None):
        X = np.array(inputs, dtype="float64", copy=True)
        y = np.array(outputs, dtype="float64", copy=True).ravel()

        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if X.ndim != 2:
            raise DatasetError(f"inputs must be a 2-D array, got shape {X.shape}.")
        if X.shape[0] != y.shape[0]:
            raise DatasetError(
                f"inputs and outputs must have the same number of rows. "
                f"Got {X.shape[0]} vs {y.shape[0]}."
            )

        object.__setattr__(self, "inputs", _readonly(X))
        object.__setattr__(self, "outputs", _readonly(y))
        object.__setattr__(self, "neighbors", _coerce_neighbors(neighbors, X.shape[0]))

    # ------------------------------------------------------------------ #
    # Shape helpers
    # ------------------------------------------------------------------ #

    def __repr__(self) -> str:
        k = max((row.size for row in self.neighbors), default=0)
        return f"Dataset(n={len(self)}, d={self.n_features}, k<={k})"

    def __len__(self) -> int:
        return int(self.inputs.shape[0])

    def __iter__(self):
        for i in range(len(self)):
            yield Instance(self, i)

    def __getitem__(self, index: int) -> "Instance":
        return self.instance(index)

    @property
    def n_features(self) -> int:
        """Input dimensionality D."""
        return int(self.inputs.shape[1])

    @property
    def all_attrs(self) -> np.ndarray:
        """(N, D+1) matrix of inputs with the output appended as last column."""
        return np.column_stack([self.inputs, self.outputs])

    def instance(self, index: int) -> "Instance":
        n = len(self)
        i = int(index)
        if i < 0:
            i += n
        if not 0 <= i < n:
            raise IndexError(f"Instance index {index} out of range for {n} rows.")
        return Instance(self, i)

    def with_neighbors(self, neighbors: NeighborRows) -> "Dataset":
        """Return a new dataset sharing the same data with ``neighbors`` attached."""
        return Dataset(self.inputs, self.outputs, neighbors)


@dataclass(frozen=True)
class Instance:
    """
    Read-only view of row ``index`` of ``dataset``.
    """

    dataset: Dataset
    index: int

    @property
    def input(self) -> np.ndarray:
        return self.dataset.inputs[self.index]

    @property
    def output(self) -> float:
        return float(self.dataset.outputs[self.index])

    @property
    def all_attrs(self) -> np.ndarray:
        """``input`` followed by ``output`` (length D+1)."""
        return _readonly(np.append(self.input, self.output))

    @property
    def neighbor_indices(self) -> np.ndarray:
        return self.dataset.neighbors[self.index]

    @property
    def neighbors(self) -> Tuple["Instance", ...]:
        return tuple(Instance(self.dataset, int(j)) for j in self.neighbor_indices)

    @property
    def n_neighbors(self) -> int:
        return int(self.neighbor_indices.size)

    @property
    def neighbor_inputs(self) -> np.ndarray:
        """(k, D) matrix with the neighbors' inputs, in neighbor order."""
        return self.dataset.inputs[self.neighbor_indices]

    @property
    def neighbor_outputs(self) -> np.ndarray:
        return self.dataset.outputs[self.neighbor_indices]

    @property
    def neighbor_all_attrs(self) -> np.ndarray:
        """(k, D+1) matrix with the neighbors' inputs and outputs."""
        return np.column_stack([self.neighbor_inputs, self.neighbor_outputs])


# ---------------------------------------------------------------------------
# DataFrame helpers
# ---------------------------------------------------------------------------


def validate_required_columns(
    df: pd.DataFrame,
    required: Sequence[str],
    context: Optional[str] = None,
) -> None:
    """
    Raise a :class:`DatasetError` if any required columns are missing.

    Parameters
    ----------
    df : DataFrame
        Input table.
    required : sequence of str
        Column names that must be present.
    context : str or None, default None
        Optional string to prepend to the error message (e.g., the
        calling function name).
    """
    missing = [c for c in required if c not in df.columns]
    if not missing:
        return

    prefix = f"[{context}] " if context else ""
    raise DatasetError(
        f"{prefix}missing required columns {missing}. "
        f"Available columns include: {list(df.columns)[:12]}..."
    )


def dataset_from_frame(
    df: pd.DataFrame,
    *,
    target: Optional[str] = None,
    feature_cols: Optional[Sequence[str]] = None,
    neighbors: Optional[NeighborRows] = None,
) -> Dataset:
    """
    Build a :class:`Dataset` from a table with one row per instance.

    Parameters
    ----------
    df : DataFrame
        One instance per row.
    target : str or None
        Output column. Defaults to the last column of ``df``.
    feature_cols : sequence of str or None
        Input columns. Defaults to every numeric column except ``target``.
    neighbors : optional
        Neighbor lists to attach (see :class:`Dataset`).

    Raises
    ------
    DatasetError
        On missing columns, non-numeric data, NaNs or an empty feature set.
    """
    if df.shape[1] == 0:
        raise DatasetError("dataset_from_frame: the table has no columns.")

    target_col = target if target is not None else df.columns[-1]
    validate_required_columns(df, [target_col], context="dataset_from_frame")

    if feature_cols is None:
        feats = [
            c for c in df.select_dtypes(include="number").columns if c != target_col
        ]
    else:
        feats = list(feature_cols)
        validate_required_columns(df, feats, context="dataset_from_frame(features)")

    if not feats:
        raise DatasetError("dataset_from_frame: no numeric feature columns found.")
    if target_col in feats:
        raise DatasetError(
            f"dataset_from_frame: target column '{target_col}' is also listed as a feature."
        )

    try:
        X = df[feats].to_numpy(dtype="float64")
        y = df[target_col].to_numpy(dtype="float64")
    except (TypeError, ValueError) as exc:
        raise DatasetError(f"dataset_from_frame: non-numeric data ({exc}).") from exc

    if np.isnan(X).any() or np.isnan(y).any():
        raise DatasetError("dataset_from_frame: inputs or target contain NaN values.")

    return Dataset(X, y, neighbors)


__all__ = [
    "Dataset",
    "Instance",
    "validate_required_columns",
    "dataset_from_frame",
]
