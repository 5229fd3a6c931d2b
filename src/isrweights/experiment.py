# src/isrweights/experiment.py
# SPDX-License-Identifier: MIT
"""
isrweights.experiment
=====================

Dataset-level driver around :func:`isrweights.schemes.weigh`.

The weighting core scores a single instance. This module runs it over a
whole dataset and adds the pieces an instance-reduction experiment needs:

1. Composite schemes. ``"remoteness-x"`` and ``"remoteness-xy"`` are not
   understood by the core; for each instance an *alternation policy*
   picks either the proximity or the surrounding scheme of the same space.
2. Failure policy. Instances whose weight cannot be computed (e.g. a
   rank-deficient nonlinearity sample) either abort the run (``"raise"``),
   get a NaN weight (``"nan"``) or are dropped (``"skip"``).
3. Optional normalization of the raw weights across the dataset.
4. An end-to-end runner, :func:`run_experiment`, that loads a table,
   searches neighbors, weighs every instance, times the run and optionally
   saves the result.

Parallel runs use joblib; the dataset is only read, never modified.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm.auto import tqdm

from .data import Dataset, Instance, dataset_from_frame
from .minkowski import validate_exponent
from .exceptions import ComputationError, ConfigurationError
from .io import read_table, save_table
from .neighbors import attach_neighbors
from .regression import Regressor, make_regressor
from .schemes import Scheme, WeightConfig, weigh


# --------------------------------------------------------------------------- #
# Composite schemes and alternation policies
# --------------------------------------------------------------------------- #


class CompositeScheme(str, Enum):
    """Schemes that alternate between proximity and surrounding per instance."""

    REMOTENESS_X = "remoteness-x"
    REMOTENESS_XY = "remoteness-xy"

    @property
    def choices(self) -> Tuple[Scheme, Scheme]:
        """The (proximity, surrounding) pair this composite alternates over."""
        if self is CompositeScheme.REMOTENESS_X:
            return Scheme.PROXIMITY_X, Scheme.SURROUNDING_X
        return Scheme.PROXIMITY_XY, Scheme.SURROUNDING_XY


AnyScheme = Union[Scheme, CompositeScheme]

AlternationPolicy = Callable[[int, Instance, Tuple[Scheme, Scheme]], Scheme]


def resolve_scheme(value: Union[str, Scheme, CompositeScheme]) -> AnyScheme:
    """
    Convert an identifier to a core :class:`Scheme` or a :class:`CompositeScheme`.

    Raises
    ------
    ConfigurationError
        For any other identifier.
    """
    if isinstance(value, (Scheme, CompositeScheme)):
        return value
    try:
        return CompositeScheme(value)
    except ValueError:
        pass
    try:
        return Scheme.parse(value)
    except ConfigurationError:
        supported = [s.value for s in Scheme] + [s.value for s in CompositeScheme]
        raise ConfigurationError(
            f"Unknown weighting scheme {value!r}. Supported schemes are: {supported}."
        ) from None


@dataclass(frozen=True)
class RoundRobinAlternation:
    """
    Alternate strictly by position: even positions get proximity, odd
    positions get surrounding (or the reverse with ``start=1``).
    """

    start: int = 0

    def __call__(self, position: int, instance: Instance, choices: Tuple[Scheme, Scheme]) -> Scheme:
        return choices[(position + self.start) % 2]


@dataclass(frozen=True)
class RandomAlternation:
    """
    Pick proximity or surrounding at random, reproducibly.

    The draw is seeded by ``(seed, instance.index)``, so the choice for an
    instance does not depend on the order or chunking of the run.
    """

    seed: int = 42

    def __post_init__(self) -> None:
        valid = isinstance(self.seed, (int, np.integer)) and not isinstance(self.seed, bool)
        if not valid or self.seed < 0:
            raise ConfigurationError(f"seed must be a non-negative integer, got {self.seed!r}.")

    def __call__(self, position: int, instance: Instance, choices: Tuple[Scheme, Scheme]) -> Scheme:
        rng = np.random.default_rng([int(self.seed), int(instance.index)])
        return choices[int(rng.integers(0, 2))]


ALTERNATION_POLICIES: Dict[str, Callable[..., AlternationPolicy]] = {
    "round-robin": RoundRobinAlternation,
    "random": RandomAlternation,
}


def make_alternation(kind: str = "round-robin", seed: int = 42) -> AlternationPolicy:
    """Build an alternation policy by name ("round-robin" or "random")."""
    key = (kind or "round-robin").lower()
    if key == "round-robin":
        return RoundRobinAlternation()
    if key == "random":
        return RandomAlternation(seed=seed)
    raise ConfigurationError(
        f"Unsupported alternation '{kind}'. "
        f"Supported kinds are: {sorted(ALTERNATION_POLICIES.keys())}."
    )


# --------------------------------------------------------------------------- #
# Weighting over a dataset
# --------------------------------------------------------------------------- #

_ON_ERROR = ("raise", "nan", "skip")
_NORMALIZE = (None, "none", "sum", "max", "minmax")


def _validate_on_error(on_error: str) -> str:
    if on_error not in _ON_ERROR:
        raise ConfigurationError(f"on_error must be one of {_ON_ERROR}, got {on_error!r}.")
    return on_error


def _plan(
    dataset: Dataset,
    scheme: AnyScheme,
    positions: Sequence[int],
    alternation: AlternationPolicy,
) -> List[Scheme]:
    """Core scheme to use for each requested instance."""
    if isinstance(scheme, Scheme):
        return [scheme] * len(positions)
    choices = scheme.choices
    return [
        Scheme.parse(alternation(pos, dataset.instance(idx), choices))
        for pos, idx in enumerate(positions)
    ]


def _weigh_rows(
    dataset: Dataset,
    rows: Sequence[Tuple[int, Scheme]],
    dist_metric: float,
    regressor: Optional[Regressor],
    on_error: str,
) -> List[Tuple[int, str, float, Optional[str]]]:
    out: List[Tuple[int, str, float, Optional[str]]] = []
    configs: Dict[Scheme, WeightConfig] = {}
    for idx, sch in rows:
        cfg = configs.get(sch)
        if cfg is None:
            cfg = configs[sch] = WeightConfig(sch, dist_metric)
        try:
            w = weigh(dataset.instance(idx), cfg, regressor=regressor)
            out.append((idx, sch.value, w, None))
        except ComputationError as exc:
            if on_error == "raise":
                raise
            out.append((idx, sch.value, float("nan"), str(exc)))
    return out


def weights_frame(
    dataset: Dataset,
    scheme: Union[str, Scheme, CompositeScheme],
    dist_metric: float = 2.0,
    *,
    indices: Optional[Sequence[int]] = None,
    regressor: Optional[Regressor] = None,
    alternation: Optional[AlternationPolicy] = None,
    on_error: str = "raise",
    n_jobs: Optional[int] = None,
    chunk_size: int = 256,
    show_progress: bool = False,
) -> pd.DataFrame:
    """
    Weigh every instance (or ``indices``) of ``dataset``.

    Parameters
    ----------
    dataset : Dataset
        Dataset with neighbor lists attached.
    scheme : str, Scheme or CompositeScheme
        Core scheme, or a remoteness composite.
    dist_metric : float
        Minkowski exponent.
    indices : sequence of int or None
        Subset of rows to weigh, in order. Defaults to every row.
    regressor : callable or None
        OLS routine for the nonlinearity scheme.
    alternation : callable or None
        Policy for composite schemes. Defaults to :class:`RoundRobinAlternation`.
    on_error : {"raise", "nan", "skip"}
        What to do with instances that raise a :class:`ComputationError`.
    n_jobs : int or None
        joblib workers. None or 1 runs sequentially.
    chunk_size : int
        Instances per joblib task.
    show_progress : bool
        Show a tqdm progress bar over chunks, sequential or parallel.

    Returns
    -------
    DataFrame
        Columns ``["index", "scheme", "weight", "error"]``; ``scheme`` is the
        core scheme actually used for the row and ``error`` holds the
        failure message of rows weighted NaN (``on_error="nan"``).
    """
    resolved = resolve_scheme(scheme)
    z = validate_exponent(dist_metric)
    on_error = _validate_on_error(on_error)
    policy = alternation if alternation is not None else RoundRobinAlternation()

    if indices is None:
        positions = list(range(len(dataset)))
    else:
        positions = [dataset.instance(i).index for i in indices]

    plan = _plan(dataset, resolved, positions, policy)
    rows = list(zip(positions, plan))
    step = max(1, int(chunk_size))
    chunks = [rows[i:i + step] for i in range(0, len(rows), step)]

    results: List[Tuple[int, str, float, Optional[str]]] = []
    if n_jobs is None or n_jobs == 1:
        iterator = tqdm(chunks, desc="Weighing instances", unit="chunk") if show_progress else chunks
        for chunk in iterator:
            results.extend(_weigh_rows(dataset, chunk, z, regressor, on_error))
    else:
        parallel = Parallel(n_jobs=n_jobs, return_as="generator")
        tasks = (delayed(_weigh_rows)(dataset, chunk, z, regressor, on_error) for chunk in chunks)
        parts = parallel(tasks)
        if show_progress:
            parts = tqdm(parts, total=len(chunks), desc="Weighing instances", unit="chunk")
        for part in parts:
            results.extend(part)

    frame = pd.DataFrame(results, columns=["index", "scheme", "weight", "error"])
    frame["weight"] = frame["weight"].astype("float64")

    n_failed = int(frame["error"].notna().sum())
    if show_progress and n_failed:
        tqdm.write(f"{n_failed} instance(s) could not be weighted ({on_error}).")

    if on_error == "skip":
        frame = frame[frame["error"].isna()].reset_index(drop=True)
    return frame


def compute_weights(
    dataset: Dataset,
    scheme: Union[str, Scheme, CompositeScheme],
    dist_metric: float = 2.0,
    **kwargs,
) -> pd.Series:
    """
    Raw weights as a Series indexed by instance row.

    Thin wrapper around :func:`weights_frame`; see it for the keyword
    arguments.
    """
    frame = weights_frame(dataset, scheme, dist_metric, **kwargs)
    out = frame.set_index("index")["weight"]
    out.index.name = "index"
    return out


def normalize_weights(weights, mode: Optional[str] = "sum"):
    """
    Normalize raw weights across the dataset.

    Parameters
    ----------
    weights : array-like or Series
        Raw weights; NaNs are ignored and kept as NaN.
    mode : {"sum", "max", "minmax", "none", None}
        - "sum": divide by the total so the weights sum to 1
        - "max": divide by the largest weight
        - "minmax": rescale to [0, 1]
        - "none"/None: return unchanged

    Returns
    -------
    Same type as ``weights`` (Series in → Series out, otherwise ndarray).
    A zero denominator (all-zero or constant weights) yields zeros.
    """
    if mode not in _NORMALIZE:
        raise ConfigurationError(f"normalize must be one of {_NORMALIZE}, got {mode!r}.")

    is_series = isinstance(weights, pd.Series)
    w = weights.to_numpy(dtype="float64") if is_series else np.asarray(weights, dtype="float64")

    if mode in (None, "none") or w.size == 0 or np.all(np.isnan(w)):
        out = w.copy()
    else:
        if mode == "sum":
            shift, denom = 0.0, float(np.nansum(w))
        elif mode == "max":
            shift, denom = 0.0, float(np.nanmax(w))
        else:
            lo = float(np.nanmin(w))
            shift, denom = lo, float(np.nanmax(w)) - lo

        if denom == 0.0:
            out = np.where(np.isnan(w), np.nan, 0.0)
        else:
            out = (w - shift) / denom

    if is_series:
        return pd.Series(out, index=weights.index, name=weights.name)
    return out


# --------------------------------------------------------------------------- #
# End-to-end runner
# --------------------------------------------------------------------------- #


@dataclass
class ExperimentConfig:
    # IO
    data_path: str
    target: Optional[str] = None
    feature_cols: Optional[Sequence[str]] = None

    # weighting
    scheme: Union[str, Scheme, CompositeScheme] = "proximity-x"
    dist_metric: float = 2.0
    regressor: str = "ols"

    # neighbors
    k_neighbors: int = 5
    neighbor_space: str = "x"

    # post-processing / failures
    normalize: Optional[str] = None
    on_error: str = "raise"

    # composites
    alternation: str = "round-robin"
    seed: int = 42

    # execution
    n_jobs: Optional[int] = None
    show_progress: bool = False
    save_path: Optional[str] = None

    def __post_init__(self) -> None:
        self.scheme = resolve_scheme(self.scheme)
        self.dist_metric = validate_exponent(self.dist_metric)
        if int(self.k_neighbors) < 1:
            raise ConfigurationError(f"k_neighbors must be >= 1, got {self.k_neighbors}.")
        self.k_neighbors = int(self.k_neighbors)
        if self.neighbor_space not in ("x", "xy"):
            raise ConfigurationError(
                f"neighbor_space must be 'x' or 'xy', got {self.neighbor_space!r}."
            )
        if self.normalize not in _NORMALIZE:
            raise ConfigurationError(
                f"normalize must be one of {_NORMALIZE}, got {self.normalize!r}."
            )
        _validate_on_error(self.on_error)
        make_alternation(self.alternation, self.seed)


@dataclass
class ExperimentResult:
    config: ExperimentConfig
    weights: pd.DataFrame
    seconds: float
    n_instances: int
    n_failed: int = 0


def run_experiment(config: Optional[ExperimentConfig] = None, **kwargs) -> ExperimentResult:
    """
    Load a dataset, search neighbors, weigh every instance and time the run.

    Parameters
    ----------
    config : ExperimentConfig or None
        Full configuration. If None, one is built from ``**kwargs``
        (any :class:`ExperimentConfig` field).

    Returns
    -------
    ExperimentResult
        ``weights`` has columns ``["index", "scheme", "weight", "error"]``
        plus ``"weight_norm"`` when ``normalize`` is set.
    """
    cfg = config if config is not None else ExperimentConfig(**kwargs)  # type: ignore[arg-type]
    t0 = time.perf_counter()

    df = read_table(cfg.data_path)
    dataset = dataset_from_frame(df, target=cfg.target, feature_cols=cfg.feature_cols)
    dataset = attach_neighbors(
        dataset,
        cfg.k_neighbors,
        space=cfg.neighbor_space,
        p=cfg.dist_metric,
    )

    frame = weights_frame(
        dataset,
        cfg.scheme,
        cfg.dist_metric,
        regressor=make_regressor(cfg.regressor),
        alternation=make_alternation(cfg.alternation, cfg.seed),
        on_error=cfg.on_error,
        n_jobs=cfg.n_jobs,
        show_progress=cfg.show_progress,
    )
    if cfg.on_error == "skip":
        n_failed = len(dataset) - len(frame)
    else:
        n_failed = int(frame["error"].notna().sum())

    if cfg.normalize not in (None, "none"):
        frame["weight_norm"] = normalize_weights(frame["weight"], cfg.normalize)

    if cfg.save_path:
        save_table(frame, cfg.save_path)

    seconds = time.perf_counter() - t0
    if cfg.show_progress:
        tqdm.write(
            f"Weighted {len(frame):,} of {len(dataset):,} instances "
            f"with '{cfg.scheme.value}' (z={cfg.dist_metric:g}) in {seconds:.2f}s"
        )

    return ExperimentResult(
        config=cfg,
        weights=frame,
        seconds=seconds,
        n_instances=len(dataset),
        n_failed=n_failed,
    )


__all__ = [
    "CompositeScheme",
    "AlternationPolicy",
    "RoundRobinAlternation",
    "RandomAlternation",
    "ALTERNATION_POLICIES",
    "make_alternation",
    "resolve_scheme",
    "weights_frame",
    "compute_weights",
    "normalize_weights",
    "ExperimentConfig",
    "ExperimentResult",
    "run_experiment",
]
