# SPDX-License-Identifier: MIT
"""
Tests for isrweights.minkowski.
"""

from __future__ import annotations

import numpy as np
import pytest

from isrweights.minkowski import distance, distances_to, norm, validate_exponent
from isrweights.exceptions import ConfigurationError


def test_euclidean_and_manhattan_match_numpy():
    rng = np.random.default_rng(0)
    for _ in range(20):
        p = rng.normal(size=5)
        q = rng.normal(size=5)
        assert np.isclose(distance(p, q, 5, 2), np.linalg.norm(p - q))
        assert np.isclose(distance(p, q, 5, 1), np.sum(np.abs(p - q)))


def test_distance_to_self_is_zero():
    p = np.array([1.5, -2.0, 3.25])
    for z in (0.3, 0.5, 1.0, 2.0, 3.0, 7.5):
        assert distance(p, p, 3, z) == 0.0


def test_fractional_exponent():
    # (1^0.5 + 1^0.5)^(1/0.5) = 4
    assert np.isclose(distance([0.0, 0.0], [1.0, 1.0], 2, 0.5), 4.0)


def test_only_first_n_components_participate():
    p = [1.0, 2.0, 3.0]
    q = [1.0, 2.0, 100.0]
    assert distance(p, q, 2, 2) == 0.0
    assert distance(p, q, 3, 1) == pytest.approx(97.0)
    assert distance(p, q, 0, 2) == 0.0


def test_n_larger_than_vector_raises():
    with pytest.raises(ValueError):
        distance([1.0, 2.0], [1.0, 2.0, 3.0], 3, 2)


@pytest.mark.parametrize("z", [0, 0.0, -1.0, float("nan"), float("inf"), "abc", None])
def test_invalid_exponent_is_a_configuration_error(z):
    with pytest.raises(ConfigurationError):
        distance([0.0], [1.0], 1, z)
    with pytest.raises(ValueError):
        validate_exponent(z)


def test_distances_to_matches_pairwise_calls():
    rng = np.random.default_rng(1)
    p = rng.normal(size=4)
    Q = rng.normal(size=(6, 4))
    for z in (0.5, 1.0, 2.0):
        expected = [distance(p, q, 4, z) for q in Q]
        assert np.allclose(distances_to(p, Q, 4, z), expected)


def test_distances_to_empty_matrix():
    out = distances_to([0.0, 0.0], np.zeros((0, 2)), 2, 2.0)
    assert out.shape == (0,)


def test_norm_is_distance_from_origin():
    assert np.isclose(norm([3.0, 4.0], 2, 2), 5.0)
    assert np.isclose(norm([3.0, -4.0], 2, 1), 7.0)


@pytest.mark.parametrize("z", [100.0, 400.0, 1000.0])
def test_large_exponent_stays_finite(z):
    assert distance([0.0], [10.0], 1, z) == pytest.approx(10.0)
    # tends to the largest component gap
    assert distance([0.0, 0.0], [10.0, 3.0], 2, z) == pytest.approx(10.0, rel=1e-2)

    out = distances_to([0.0, 0.0], [[10.0, 3.0], [0.0, 0.0], [-50.0, 1.0]], 2, z)
    assert np.all(np.isfinite(out))
    assert out[1] == 0.0
    assert out[2] == pytest.approx(50.0, rel=1e-2)
