# tests/test_neighbors.py

import numpy as np
import pandas as pd
import pytest

from isrweights.data import Dataset
from isrweights.exceptions import ConfigurationError
from isrweights.neighbors import (
    attach_neighbors,
    build_dataset,
    knn_indices,
    neighbor_table,
)


def _line_points():
    """Four points on a line with distinct gaps (no distance ties)."""
    return np.array([[0.0], [1.0], [3.0], [7.0]])


def test_knn_indices_excludes_self_and_orders_by_distance():
    ind, dist = knn_indices(_line_points(), 2)

    assert ind.shape == (4, 2)
    assert ind.tolist() == [[1, 2], [0, 2], [1, 0], [2, 1]]
    assert np.allclose(dist, [[1, 3], [1, 2], [2, 3], [4, 6]])
    for i, row in enumerate(ind):
        assert i not in row


def test_knn_indices_fractional_exponent_uses_brute_force():
    ind_frac, dist_frac = knn_indices(_line_points(), 2, p=0.5)
    ind_eucl, dist_eucl = knn_indices(_line_points(), 2, p=2.0)
    # in one dimension every Minkowski exponent gives the same distance
    assert ind_frac.tolist() == ind_eucl.tolist()
    assert np.allclose(dist_frac, dist_eucl)


def test_knn_indices_caps_k():
    ind, _ = knn_indices(_line_points(), 10)
    assert ind.shape == (4, 3)

    ind_single, _ = knn_indices(np.array([[1.0, 2.0]]), 3)
    assert ind_single.shape == (1, 0)


def test_knn_indices_invalid_arguments():
    with pytest.raises(ConfigurationError):
        knn_indices(_line_points(), 0)
    with pytest.raises(ConfigurationError):
        knn_indices(_line_points(), 2, p=0.0)


def test_build_dataset_input_and_input_output_space():
    X = np.array([[0.0], [1.0], [2.0]])
    y = np.array([0.0, 10.0, 0.5])

    ds_x = build_dataset(X, y, 1, space="x")
    assert ds_x[0].neighbor_indices.tolist() == [1]

    # with the output appended, row 2 is much closer to row 0 than row 1 is
    ds_xy = build_dataset(X, y, 1, space="xy")
    assert ds_xy[0].neighbor_indices.tolist() == [2]

    with pytest.raises(ConfigurationError):
        attach_neighbors(ds_x, 1, space="z")


def test_neighbor_table_columns_and_ranks():
    ds = build_dataset(_line_points(), np.zeros(4), 2)
    table = neighbor_table(ds)

    assert list(table.columns) == ["from_idx", "to_idx", "rank", "distance"]
    assert len(table) == 4 * 2
    assert (table["from_idx"] != table["to_idx"]).all()
    assert set(table["rank"]) == {1, 2}
    first = table[(table["from_idx"] == 3) & (table["rank"] == 1)].iloc[0]
    assert first["to_idx"] == 2
    assert np.isclose(first["distance"], 4.0)


def test_neighbor_table_empty():
    table = neighbor_table(Dataset([[0.0]], [1.0]))
    assert isinstance(table, pd.DataFrame)
    assert table.empty
    assert list(table.columns) == ["from_idx", "to_idx", "rank", "distance"]
