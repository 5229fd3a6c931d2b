# SPDX-License-Identifier: MIT
"""
Command-line entry point: ``isrweights DATA --scheme SCHEME ...``.

Loads a CSV/Parquet table (one instance per row, target in the last column
unless ``--target`` is given), searches k nearest neighbors, weighs every
instance and prints a short summary with the elapsed time.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .exceptions import WeightingError
from .experiment import CompositeScheme, ExperimentConfig, run_experiment
from .regression import SUPPORTED_REGRESSORS
from .schemes import Scheme


def build_parser() -> argparse.ArgumentParser:
    schemes = [s.value for s in Scheme] + [s.value for s in CompositeScheme]
    p = argparse.ArgumentParser(
        prog="isrweights",
        description="Weigh dataset instances from their k nearest neighbors.",
    )
    p.add_argument("data", type=str, help="CSV or Parquet file, one instance per row")
    p.add_argument("--scheme", type=str, required=True, choices=schemes)
    p.add_argument("--dist-metric", type=float, default=2.0,
                   help="Minkowski exponent (1 Manhattan, 2 Euclidean, <1 fractional)")
    p.add_argument("--k", type=int, default=5, help="number of neighbors")
    p.add_argument("--target", type=str, default=None, help="output column (default: last)")
    p.add_argument("--features", type=str, nargs="+", default=None, help="input columns")
    p.add_argument("--neighbor-space", type=str, default="x", choices=["x", "xy"])
    p.add_argument("--regressor", type=str, default="ols", choices=sorted(SUPPORTED_REGRESSORS))
    p.add_argument("--normalize", type=str, default=None, choices=["sum", "max", "minmax"])
    p.add_argument("--on-error", type=str, default="raise", choices=["raise", "nan", "skip"])
    p.add_argument("--alternation", type=str, default="round-robin", choices=["round-robin", "random"])
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--n-jobs", type=int, default=None)
    p.add_argument("--output", type=str, default=None, help="save weights (.csv or .parquet)")
    p.add_argument("--progress", action="store_true", help="show a progress bar")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = ExperimentConfig(
            data_path=args.data,
            target=args.target,
            feature_cols=args.features,
            scheme=args.scheme,
            dist_metric=args.dist_metric,
            regressor=args.regressor,
            k_neighbors=args.k,
            neighbor_space=args.neighbor_space,
            normalize=args.normalize,
            on_error=args.on_error,
            alternation=args.alternation,
            seed=args.seed,
            n_jobs=args.n_jobs,
            show_progress=args.progress,
            save_path=args.output,
        )
        result = run_experiment(cfg)
    except WeightingError as exc:
        print(exc, file=sys.stderr)
        return 1

    w = result.weights["weight"]
    print(
        f"scheme={cfg.scheme.value} z={cfg.dist_metric:g} k={cfg.k_neighbors} "
        f"instances={result.n_instances} weighted={len(result.weights)} failed={result.n_failed}"
    )
    if w.notna().any():
        print(
            f"weight min={w.min():.6g} median={w.median():.6g} "
            f"max={w.max():.6g} sum={w.sum():.6g}"
        )
    if args.output:
        print(f"Saved weights to {args.output}")
    print(f"Elapsed time: {int(result.seconds)} seconds.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
