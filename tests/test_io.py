# tests/test_io.py

import pandas as pd
import pytest

from isrweights.exceptions import DatasetError
from isrweights.io import read_table, save_table


def test_save_then_read_csv_creates_parent(tmp_path):
    df = pd.DataFrame({"x0": [0.0, 1.0], "y": [2.0, 3.0]})
    path = tmp_path / "nested" / "table.csv"
    save_table(df, str(path))

    assert path.exists()
    back = read_table(str(path))
    pd.testing.assert_frame_equal(back, df)


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(DatasetError, match="not found"):
        read_table(str(tmp_path / "nope.csv"))


def test_parquet_roundtrip(tmp_path):
    pytest.importorskip("pyarrow")
    df = pd.DataFrame({"x0": [0.5, 1.5], "y": [1.0, 0.0]})
    path = tmp_path / "table.parquet"
    save_table(df, str(path))
    pd.testing.assert_frame_equal(read_table(str(path)), df)
