import numpy as np
import pandas as pd
import pytest

from isrweights.cli import build_parser, main


def _write_csv(path):
    rng = np.random.default_rng(0)
    X = rng.normal(size=(20, 3))
    df = pd.DataFrame(X, columns=["a", "b", "c"])
    df["target"] = X[:, 0] - X[:, 2]
    out = path / "toy.csv"
    df.to_csv(out, index=False)
    return str(out)


def test_parser_defaults():
    args = build_parser().parse_args(["data.csv", "--scheme", "proximity-x"])
    assert args.dist_metric == 2.0
    assert args.k == 5
    assert args.neighbor_space == "x"
    assert args.on_error == "raise"


def test_parser_rejects_unknown_scheme():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["data.csv", "--scheme", "bogus"])


def test_main_runs_and_saves(tmp_path, capsys):
    data = _write_csv(tmp_path)
    out = tmp_path / "weights.csv"

    code = main([data, "--scheme", "surrounding-xy", "--k", "4", "--normalize", "max", "--output", str(out)])
    captured = capsys.readouterr()

    assert code == 0
    assert "scheme=surrounding-xy" in captured.out
    assert "Elapsed time:" in captured.out
    saved = pd.read_csv(out)
    assert len(saved) == 20
    assert np.isclose(saved["weight_norm"].max(), 1.0)


def test_main_reports_configuration_errors(tmp_path, capsys):
    data = _write_csv(tmp_path)
    code = main([data, "--scheme", "proximity-x", "--dist-metric", "0"])
    captured = capsys.readouterr()
    assert code == 1
    assert "exponent" in captured.err


def test_main_reports_missing_file(tmp_path, capsys):
    code = main([str(tmp_path / "nope.csv"), "--scheme", "nonlinearity"])
    assert code == 1
    assert "not found" in capsys.readouterr().err


def test_main_reports_negative_seed(tmp_path, capsys):
    data = _write_csv(tmp_path)
    code = main([data, "--scheme", "remoteness-x", "--alternation", "random", "--seed", "-1"])
    assert code == 1
    assert "seed" in capsys.readouterr().err
