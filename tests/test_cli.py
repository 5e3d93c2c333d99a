"""Tests for the mixidr command line."""

import json
import os
import re

import numpy as np
import pandas as pd
import pytest

import mixidr
from mixidr import cli


@pytest.fixture
def simulated(tmp_path):
    path = str(tmp_path / "sample.tsv")
    cli.main(["simulate", "-o", path, "-n", "500", "--seed", "3"])
    return path


def _read_outputs(out, suffix=""):
    with open(os.path.join(out, "fit_summary" + suffix + ".json")) as f:
        summary = json.load(f)
    table = pd.read_table(os.path.join(out, "responsibilities" + suffix + ".tsv"), sep='\t')
    return summary, table


class TestSimulate:

    def test_writes_table(self, simulated):
        df = pd.read_table(simulated, sep='\t', header=None)
        assert df.shape == (500, 2)
        assert set(df[1].unique()) == {1, 2}

    def test_refuses_existing_output(self, simulated):
        with pytest.raises(SystemExit) as e:
            cli.main(["simulate", "-o", simulated])
        assert e.value.code == 1

    def test_invalid_params(self, tmp_path):
        with pytest.raises(SystemExit) as e:
            cli.main(["simulate", "-o", str(tmp_path / "x.tsv"), "--sigma2", "0"])
        assert e.value.code == 1


class TestFit:

    def test_guessed_start(self, simulated, tmp_path):
        out = str(tmp_path / "out")
        cli.main(["fit", simulated, "-o", out])

        summary, table = _read_outputs(out)
        assert summary["Number of values"] == 500
        assert summary["Converged"] is True
        assert summary["Termination"] == "converged"
        means = sorted([summary["Parameters"]["mu1"], summary["Parameters"]["mu2"]])
        assert means[0] == pytest.approx(0.0, abs=0.5)
        assert means[1] == pytest.approx(10.0, abs=0.5)
        assert list(table.columns) == ["value", "responsibility_2", "local_idr", "global_idr", "reproducible"]
        assert len(table) == 500
        assert summary["Number of reproducible values"] == int(table["reproducible"].sum())
        assert os.path.exists(os.path.join(out, "logs", "log_mixidr_fit.txt"))

    def test_explicit_start_and_suffix(self, simulated, tmp_path):
        out = str(tmp_path / "out")
        cli.main(["fit", simulated, "-o", out, "-s", "rep1",
                  "--pi", "0.5", "--mu1", "8", "--mu2", "0", "--sigma2", "2"])

        summary, table = _read_outputs(out, "_rep1")
        assert summary["Parameters"]["mu1"] == pytest.approx(10.0, abs=0.5)
        assert summary["Reproducible component"] == 1
        assert np.allclose(table["local_idr"], table["responsibility_2"])

    def test_multi_start(self, simulated, tmp_path):
        out = str(tmp_path / "out")
        cli.main(["fit", simulated, "-o", out, "-n", "4"])
        summary, _ = _read_outputs(out)
        assert summary["Converged"] is True

    def test_named_column(self, tmp_path):
        path = str(tmp_path / "named.tsv")
        pd.DataFrame({"id": np.arange(6), "score": [0.1, 0.2, 0.0, 9.9, 10.1, 10.0]}).to_csv(path, sep='\t', index=False)
        out = str(tmp_path / "out")
        cli.main(["fit", path, "-o", out, "--header", "-c", "score"])
        summary, _ = _read_outputs(out)
        assert summary["Column"] == "score"
        assert summary["Number of values"] == 6

    def test_degenerate_input_is_reported(self, tmp_path):
        path = str(tmp_path / "flat.tsv")
        pd.DataFrame({"v": [5.0] * 20}).to_csv(path, sep='\t', index=False, header=False)
        out = str(tmp_path / "out")
        cli.main(["fit", path, "-o", out])
        summary, _ = _read_outputs(out)
        assert summary["Termination"] == "numerical_degeneracy"
        assert "variance_collapse" in summary["Degeneracies"]

    def test_partial_initial_guess(self, simulated, tmp_path):
        with pytest.raises(SystemExit) as e:
            cli.main(["fit", simulated, "-o", str(tmp_path / "out"), "--pi", "0.5"])
        assert e.value.code == 1

    def test_invalid_initial_guess(self, simulated, tmp_path):
        with pytest.raises(SystemExit) as e:
            cli.main(["fit", simulated, "-o", str(tmp_path / "out"),
                      "--pi", "1", "--mu1", "0", "--mu2", "1", "--sigma2", "1"])
        assert e.value.code == 1

    def test_non_numeric_column(self, tmp_path):
        path = str(tmp_path / "text.tsv")
        pd.DataFrame({"v": ["a", "b", "c"]}).to_csv(path, sep='\t', index=False, header=False)
        with pytest.raises(SystemExit) as e:
            cli.main(["fit", path, "-o", str(tmp_path / "out")])
        assert e.value.code == 1

    def test_missing_input(self, tmp_path):
        with pytest.raises(SystemExit) as e:
            cli.main(["fit", str(tmp_path / "nope.tsv"), "-o", str(tmp_path / "out")])
        assert e.value.code == 1

    def test_refuses_existing_output(self, simulated, tmp_path):
        with pytest.raises(SystemExit) as e:
            cli.main(["fit", simulated, "-o", str(tmp_path)])
        assert e.value.code == 1


def test_version():
    with pytest.raises(SystemExit) as e:
        cli.main(["--version"])
    assert e.value.code == 0


class TestUnreadableInput:

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.tsv"
        path.write_text("")
        with pytest.raises(SystemExit) as e:
            cli.main(["fit", str(path), "-o", str(tmp_path / "out")])
        assert e.value.code == 1

    def test_ragged_rows(self, tmp_path):
        path = tmp_path / "ragged.tsv"
        path.write_text("1.0\n2.0\t3.0\t4.0\n")
        with pytest.raises(SystemExit) as e:
            cli.main(["fit", str(path), "-o", str(tmp_path / "out")])
        assert e.value.code == 1


def test_setup_version_matches_package():
    setup_py = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "setup.py")
    with open(setup_py) as f:
        found = re.search(r'^\s*version="([^"]+)"', f.read(), re.M)
    assert found is not None
    assert found.group(1) == mixidr.__version__
