# SPDX-License-Identifier: MIT
from __future__ import annotations

from pathlib import Path

import pandas as pd

from .exceptions import DatasetError

__all__ = ["read_table", "save_table"]


def read_table(path: str) -> pd.DataFrame:
    """
    Thin wrapper around pandas readers: ``.parquet`` files go through
    ``read_parquet``, anything else through ``read_csv``.
    """
    p = Path(path)
    if not p.exists():
        raise DatasetError(f"Dataset file not found: {path}")
    if p.suffix.lower() == ".parquet":
        return pd.read_parquet(p)
    return pd.read_csv(p)


def save_table(df: pd.DataFrame, path: str, *, parquet_compression: str = "snappy") -> None:
    """Write ``df`` as Parquet if ``path`` ends with ``.parquet``, else as CSV."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if p.suffix.lower() == ".parquet":
        df.to_parquet(p, index=False, compression=parquet_compression)
    else:
        df.to_csv(p, index=False)
