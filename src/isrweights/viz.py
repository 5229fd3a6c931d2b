# SPDX-License-Identifier: MIT
"""
isrweights.viz
==============

Plotting helpers to inspect instance weights:

- Distribution of weights (histogram).
- Weights over a 2-D input space (scatter coloured by weight).
- Two schemes against each other on the same instances.

Design principles
-----------------

* Minimal dependencies: matplotlib, numpy, pandas only.
* Stable return types: functions return an Axes; Figures are created only when
  needed and can be further customized by the caller.
* Empty inputs render a centered "No data" message rather than failing.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .data import Dataset


# --------------------------------------------------------------------- #
# Internal helpers
# --------------------------------------------------------------------- #


def _ensure_ax(
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (8.0, 4.0),
) -> Tuple[Figure, Axes, bool]:
    """
    Create a new Figure/Axes if ``ax`` is None.

    Returns
    -------
    (fig, ax, created_flag)
        created_flag is True if a new Figure/Axes was created, False otherwise.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
        return fig, ax, True
    return ax.figure, ax, False


def _no_data(ax: Axes, message: str = "No data") -> Axes:
    ax.cla()
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=12)
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)
    return ax


def _finite(values) -> np.ndarray:
    arr = np.asarray(values, dtype="float64").ravel()
    return arr[np.isfinite(arr)]


# --------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------- #


def plot_weight_histogram(
    weights,
    *,
    bins: int = 30,
    title: Optional[str] = None,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (8.0, 4.0),
) -> Axes:
    """
    Histogram of instance weights (NaNs are ignored).

    Parameters
    ----------
    weights : array-like or Series
        Raw or normalized weights.
    bins : int
        Number of histogram bins.
    title : str or None
        Axes title. Defaults to the Series name when available.
    """
    _, ax, _ = _ensure_ax(ax, figsize)
    w = _finite(weights)
    if w.size == 0:
        return _no_data(ax)

    ax.hist(w, bins=bins, edgecolor="black", alpha=0.8)
    ax.axvline(float(np.median(w)), linestyle="--", linewidth=1.0, color="black")
    ax.set_xlabel("weight")
    ax.set_ylabel("instances")
    if title is None and isinstance(weights, pd.Series) and weights.name:
        title = str(weights.name)
    if title:
        ax.set_title(title)
    return ax


def plot_weight_scatter(
    dataset: Dataset,
    weights,
    *,
    dims: Tuple[int, int] = (0, 1),
    cmap: str = "viridis",
    show_neighbors_of: Optional[int] = None,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (6.0, 6.0),
) -> Axes:
    """
    Scatter of two input dimensions coloured by weight.

    Parameters
    ----------
    dataset : Dataset
        Source of the input coordinates.
    weights : array-like or Series
        One weight per instance. A Series is aligned on its index (rows not
        present are drawn in grey).
    dims : (int, int)
        Input columns used for the x and y axes.
    show_neighbors_of : int or None
        If given, draw lines from this instance to each of its neighbors.
    """
    _, ax, _ = _ensure_ax(ax, figsize)
    if len(dataset) == 0:
        return _no_data(ax)

    if isinstance(weights, pd.Series):
        w = weights.reindex(range(len(dataset))).to_numpy(dtype="float64")
    else:
        w = np.asarray(weights, dtype="float64").ravel()
    if w.size != len(dataset):
        raise ValueError(f"Expected {len(dataset)} weights, got {w.size}.")

    i, j = dims
    X = dataset.inputs
    if X.shape[1] == 1:
        xs, ys = X[:, 0], dataset.outputs
        ax.set_xlabel("x0")
        ax.set_ylabel("y")
    else:
        xs, ys = X[:, i], X[:, j]
        ax.set_xlabel(f"x{i}")
        ax.set_ylabel(f"x{j}")

    ok = np.isfinite(w)
    if (~ok).any():
        ax.scatter(xs[~ok], ys[~ok], c="lightgrey", s=12, label="no weight")
    if ok.any():
        sc = ax.scatter(xs[ok], ys[ok], c=w[ok], cmap=cmap, s=18)
        ax.figure.colorbar(sc, ax=ax, label="weight")

    if show_neighbors_of is not None:
        inst = dataset.instance(show_neighbors_of)
        for nb in inst.neighbor_indices:
            ax.plot([xs[inst.index], xs[nb]], [ys[inst.index], ys[nb]], color="black", linewidth=0.6)

    ax.set_aspect("equal", adjustable="datalim")
    return ax


def plot_scheme_comparison(
    weights_a: pd.Series,
    weights_b: pd.Series,
    *,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (5.5, 5.5),
) -> Axes:
    """
    Weights of two schemes against each other, aligned on the instance index.

    Axis labels come from the Series names.
    """
    _, ax, _ = _ensure_ax(ax, figsize)
    joined = pd.concat([weights_a.rename("a"), weights_b.rename("b")], axis=1).dropna()
    if joined.empty:
        return _no_data(ax)

    ax.scatter(joined["a"], joined["b"], s=14, alpha=0.8)
    lo = float(min(joined["a"].min(), joined["b"].min()))
    hi = float(max(joined["a"].max(), joined["b"].max()))
    ax.plot([lo, hi], [lo, hi], linestyle="--", linewidth=1.0, color="grey")
    ax.set_xlabel(str(weights_a.name) if weights_a.name is not None else "scheme A")
    ax.set_ylabel(str(weights_b.name) if weights_b.name is not None else "scheme B")
    return ax


__all__ = [
    "plot_weight_histogram",
    "plot_weight_scatter",
    "plot_scheme_comparison",
]
