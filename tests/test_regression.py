import numpy as np
import pytest

from isrweights.exceptions import (
    ConfigurationError,
    DegenerateHyperplaneError,
    RankDeficientError,
)
from isrweights.regression import (
    SUPPORTED_REGRESSORS,
    check_sample,
    fit_coefficients,
    hyperplane_from_coefficients,
    lstsq_ols,
    make_regressor,
    point_hyperplane_distance,
    sklearn_ols,
)


def _noisy_sample(seed=0, m=20, d=3):
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(m, d))
    y = 0.5 + X @ np.array([1.0, -2.0, 0.25])[:d] + rng.normal(0, 0.1, m)
    return y, X


def test_make_regressor_known_and_unknown_kinds():
    assert make_regressor() is sklearn_ols
    assert make_regressor("LSTSQ") is lstsq_ols
    assert set(SUPPORTED_REGRESSORS) == {"ols", "lstsq"}
    with pytest.raises(ConfigurationError):
        make_regressor("ridge")


def test_sklearn_and_lstsq_agree():
    y, X = _noisy_sample()
    a = sklearn_ols(y, X)
    b = lstsq_ols(y, X)
    assert a.shape == (4,)
    assert np.allclose(a, b, atol=1e-8)
    # intercept first
    assert abs(a[0] - 0.5) < 0.2


def test_check_sample_row_count_and_collinearity():
    with pytest.raises(RankDeficientError):
        check_sample(np.zeros(2), np.zeros((2, 2)))

    X = np.column_stack([np.arange(6.0), 3.0 * np.arange(6.0)])
    with pytest.raises(RankDeficientError):
        check_sample(np.arange(6.0), X)

    # constant regressor is collinear with the intercept
    X_const = np.column_stack([np.arange(6.0), np.ones(6)])
    with pytest.raises(RankDeficientError):
        check_sample(np.arange(6.0), X_const)

    # D+1 rows in general position is enough
    check_sample(np.zeros(3), np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]))


def test_fit_coefficients_exact_fit_with_minimum_rows():
    X = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    y = 2.0 + 3.0 * X[:, 0] - 1.0 * X[:, 1]
    coef = fit_coefficients(y, X)
    assert np.allclose(coef, [2.0, 3.0, -1.0])


def test_hyperplane_from_coefficients():
    normal, constant = hyperplane_from_coefficients([2.0, 3.0, -1.0])
    assert normal.tolist() == [3.0, -1.0, -1.0]
    assert constant == 2.0


def test_point_hyperplane_distance():
    # plane y = 1 in (x, y): 0*x - y + 1 = 0
    assert point_hyperplane_distance([5.0, 4.0], [0.0, -1.0], 1.0) == pytest.approx(3.0)
    # plane y = x: x - y = 0 ; point (1, 0) is 1/sqrt(2) away
    assert point_hyperplane_distance([1.0, 0.0], [1.0, -1.0], 0.0) == pytest.approx(1 / np.sqrt(2))


def test_zero_normal_is_degenerate():
    with pytest.raises(DegenerateHyperplaneError):
        point_hyperplane_distance([1.0, 2.0], [0.0, 0.0], 1.0)
    with pytest.raises(ValueError):
        point_hyperplane_distance([1.0, 2.0, 3.0], [0.0, -1.0], 1.0)
