import random
import re

import pytest

from studyset.perceptron.common import (
    NEURON_HIDDEN,
    NEURON_IN,
    NEURON_OUT,
    Parameters,
)
from studyset.perceptron.matrix_model import MatrixModel


def _write_dataset(path, count, seed=0):
    rng = random.Random(seed)
    lines = []
    for index in range(count):
        label = index % 4 + 1
        pixels = ",".join(str(rng.randrange(256)) for _ in range(NEURON_IN))
        lines.append(f"{label},{pixels}\n")
    path.write_text("".join(lines), encoding="utf-8")
    return path


def _model(hidden_layers, seed=7):
    model = MatrixModel(hidden_layers)
    model.rng.seed(seed)
    model.fill_random_weights()
    return model


@pytest.fixture
def dataset(tmp_path):
    return _write_dataset(tmp_path / "train.csv", 14)


def test_learn_then_predict_in_range(dataset):
    model = _model(3)
    assert model.learn_from_file(dataset) == 14
    model.set_incomes([0.0] * NEURON_IN)
    assert 0 <= model.predict() <= 25


def test_cross_valid_reports_each_fold(dataset, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    model = _model(3)
    report = model.cross_valid(dataset, 7)
    folds = re.findall(r"(\d+): (\d+\.\d\d)% ", report)
    assert "".join(f"{n}: {v}% " for n, v in folds) == report
    assert [int(n) for n, _ in folds] == list(range(1, 8))
    assert all(0.0 <= float(v) <= 100.0 for _, v in folds)
    assert not (tmp_path / "temp_learn.csv").exists()
    assert not (tmp_path / "temp_test.csv").exists()


def test_cross_valid_with_no_groups(dataset):
    assert _model(2).cross_valid(dataset, 0) == ""


def test_weights_round_trip(dataset, tmp_path):
    first = _model(5, seed=1)
    second = _model(5, seed=2)
    first.learn_from_file(dataset)
    saved = tmp_path / "weights.csv"
    first.save_weights(saved)
    second.load_weights(saved)
    income = [0.0] * NEURON_IN
    first.set_incomes(income)
    second.set_incomes(income)
    assert first.predict() == second.predict()
    again = tmp_path / "again.csv"
    second.save_weights(again)
    assert again.read_text() == saved.read_text()


def test_saved_weights_layout(tmp_path):
    path = tmp_path / "weights.csv"
    _model(2).save_weights(path)
    lines = path.read_text().splitlines()
    assert len(lines) == NEURON_HIDDEN * 2 + NEURON_OUT
    assert len(lines[0].split(",")) == NEURON_IN
    assert len(lines[-1].split(",")) == NEURON_HIDDEN


def test_learning_changes_weights(dataset, tmp_path):
    model = _model(2)
    before, after = tmp_path / "before.csv", tmp_path / "after.csv"
    model.save_weights(before)
    model.learn_from_file(dataset)
    model.save_weights(after)
    assert before.read_text() != after.read_text()


def test_test_from_file_counts_every_sample(dataset):
    model = _model(2)
    model.learn_from_file(dataset)
    params = model.test_from_file(dataset)
    assert params.error + params.correct == 14
    assert 0.0 <= params.cross_value <= 100.0
    assert 0.0 <= params.average_accuracy <= 1.0
    assert params.cross_value == pytest.approx(params.correct * 100.0 / 14)
    assert model.parameters == params


def test_test_from_empty_file(tmp_path):
    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")
    assert _model(2).test_from_file(empty) == Parameters()


def test_missing_files(tmp_path):
    model = _model(2)
    with pytest.raises(FileNotFoundError):
        model.learn_from_file(tmp_path / "missing.csv")
    with pytest.raises(FileNotFoundError):
        model.load_weights(tmp_path / "missing.csv")


def test_truncated_weights_leave_model_unchanged(tmp_path):
    model = _model(2)
    model.set_incomes([0.5] * NEURON_IN)
    before = model.predict()
    saved = tmp_path / "weights.csv"
    model.save_weights(saved)
    lines = saved.read_text().splitlines()[:100]
    truncated = tmp_path / "short.csv"
    truncated.write_text("\n".join(lines) + "\n", encoding="utf-8")
    other = _model(2, seed=99)
    other.set_incomes([0.5] * NEURON_IN)
    expected = other.predict()
    with pytest.raises(ValueError):
        other.load_weights(truncated)
    assert other.predict() == expected
    other.load_weights(saved)
    assert other.predict() == before


@pytest.mark.parametrize("label", [0, 27])
def test_label_out_of_range(tmp_path, label):
    path = tmp_path / "bad.csv"
    path.write_text(f"{label}," + ",".join(["0"] * NEURON_IN) + "\n", encoding="utf-8")
    with pytest.raises(ValueError):
        _model(2).learn_from_file(path)


def test_short_sample_line(tmp_path):
    path = tmp_path / "short.csv"
    path.write_text("1,2,3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        _model(2).learn_from_file(path)


def test_set_incomes_wrong_length():
    with pytest.raises(ValueError):
        _model(2).set_incomes([0.0] * (NEURON_IN - 1))


def test_predict_without_input():
    with pytest.raises(ValueError):
        _model(2).predict()


def test_layers_must_match_weights():
    model = _model(2)
    model.set_incomes([0.0] * NEURON_IN)
    model.init(3)
    assert model.hidden_layers == 3
    with pytest.raises(ValueError):
        model.predict()
    model.fill_random_weights()
    assert 0 <= model.predict() < NEURON_OUT


def test_negative_hidden_layers():
    with pytest.raises(ValueError):
        MatrixModel(-1)