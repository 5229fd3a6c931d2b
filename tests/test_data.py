# SPDX-License-Identifier: MIT
"""
Tests for isrweights.data (Dataset / Instance views and DataFrame helpers).
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from isrweights.data import Dataset, Instance, dataset_from_frame, validate_required_columns
from isrweights.exceptions import DatasetError


def _make_dataset() -> Dataset:
    inputs = [[0.0, 0.0], [1.0, 0.0], [-1.0, 0.0], [0.0, 2.0]]
    outputs = [0.5, 1.0, 2.0, 3.0]
    neighbors = [[1, 2], [0, 3], [0, 1], [0, 1]]
    return Dataset(inputs, outputs, neighbors)


def test_instance_attributes():
    ds = _make_dataset()
    inst = ds.instance(1)

    assert isinstance(inst, Instance)
    assert np.array_equal(inst.input, [1.0, 0.0])
    assert inst.output == 1.0
    assert np.array_equal(inst.all_attrs, [1.0, 0.0, 1.0])
    assert inst.all_attrs.size == ds.n_features + 1


def test_neighbors_are_views_into_the_dataset():
    ds = _make_dataset()
    inst = ds[0]

    assert [nb.index for nb in inst.neighbors] == [1, 2]
    assert all(nb.dataset is ds for nb in inst.neighbors)
    assert inst.neighbor_inputs.shape == (2, 2)
    assert np.array_equal(inst.neighbor_all_attrs, [[1.0, 0.0, 1.0], [-1.0, 0.0, 2.0]])


def test_arrays_are_read_only():
    ds = _make_dataset()
    with pytest.raises(ValueError):
        ds.inputs[0, 0] = 10.0
    with pytest.raises(ValueError):
        ds.neighbors[0][0] = 3
    with pytest.raises(ValueError):
        ds[0].all_attrs[0] = 1.0


def test_dataset_copies_its_inputs():
    X = np.zeros((2, 1))
    ds = Dataset(X, [1.0, 2.0], [[1], [0]])
    X[0, 0] = 5.0
    assert ds.inputs[0, 0] == 0.0


def test_negative_index_and_iteration():
    ds = _make_dataset()
    assert ds.instance(-1).index == 3
    assert [inst.index for inst in ds] == [0, 1, 2, 3]
    with pytest.raises(IndexError):
        ds.instance(4)


def test_ragged_and_missing_neighbor_lists():
    ds = Dataset([[0.0], [1.0], [2.0]], [0.0, 1.0, 2.0], [[1, 2], [0], []])
    assert ds[1].n_neighbors == 1
    assert ds[2].n_neighbors == 0
    assert ds[2].neighbor_inputs.shape == (0, 1)

    bare = Dataset([[0.0], [1.0]], [0.0, 1.0])
    assert bare[0].n_neighbors == 0
    attached = bare.with_neighbors([[1], [0]])
    assert attached[0].neighbor_indices.tolist() == [1]
    assert bare[0].n_neighbors == 0


def test_invalid_datasets_raise():
    with pytest.raises(DatasetError):
        Dataset([[0.0], [1.0]], [0.0])
    with pytest.raises(DatasetError):
        Dataset([[0.0], [1.0]], [0.0, 1.0], [[1]])
    with pytest.raises(DatasetError):
        Dataset([[0.0], [1.0]], [0.0, 1.0], [[1], [2]])
    with pytest.raises(DatasetError):
        Dataset([[0.0], [1.0]], [0.0, 1.0], [[1], [-1]])
    with pytest.raises(DatasetError):
        Dataset([[0.0], [1.0]], [0.0, 1.0], [[1.5], [0]])


def test_one_dimensional_inputs_become_a_column():
    ds = Dataset([0.0, 1.0, 2.0], [1.0, 2.0, 3.0])
    assert ds.inputs.shape == (3, 1)
    assert ds.n_features == 1


def test_dataset_from_frame_defaults():
    df = pd.DataFrame(
        {
            "label": ["a", "b", "c"],
            "x0": [0.0, 1.0, 2.0],
            "x1": [1.0, 1.0, 0.0],
            "y": [3.0, 4.0, 5.0],
        }
    )
    ds = dataset_from_frame(df)
    assert ds.n_features == 2
    assert np.array_equal(ds.outputs, [3.0, 4.0, 5.0])
    assert np.array_equal(ds.inputs[:, 0], [0.0, 1.0, 2.0])


def test_dataset_from_frame_explicit_columns_and_errors():
    df = pd.DataFrame({"x0": [0.0, 1.0], "x1": [1.0, np.nan], "y": [3.0, 4.0]})

    ds = dataset_from_frame(df, target="x0", feature_cols=["y"])
    assert np.array_equal(ds.outputs, [0.0, 1.0])

    with pytest.raises(DatasetError):
        dataset_from_frame(df, target="missing")
    with pytest.raises(DatasetError):
        dataset_from_frame(df, target="y")  # NaN in x1
    with pytest.raises(DatasetError):
        dataset_from_frame(df, target="y", feature_cols=["y"])


def test_validate_required_columns_message():
    df = pd.DataFrame({"a": [1]})
    with pytest.raises(DatasetError, match=r"\[ctx\] missing required columns \['b'\]"):
        validate_required_columns(df, ["a", "b"], context="ctx")
