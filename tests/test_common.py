import pytest

from studyset.perceptron.common import (
    Parameters,
    prepare_fold,
    prepare_test,
    read_lines,
)


def _write(path, lines):
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


def test_read_lines_drops_final_newline(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a\nb\n", encoding="utf-8")
    assert read_lines(path) == ["a", "b"]


def test_read_lines_keeps_inner_empty_lines(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a\n\nb", encoding="utf-8")
    assert read_lines(path) == ["a", "", "b"]


def test_read_lines_missing_file_is_empty(tmp_path):
    assert read_lines(tmp_path / "missing.csv") == []


def test_prepare_fold_splits_out_one_fold(tmp_path):
    lines = [f"line{i}" for i in range(10)]
    source = _write(tmp_path / "data.csv", lines)
    learn, test = tmp_path / "learn.csv", tmp_path / "test.csv"
    counts = prepare_fold(source, 5, 2, learn, test)
    assert read_lines(test) == lines[2:4]
    assert read_lines(learn) == lines[:2] + lines[4:]
    assert counts == (8, 2)


def test_prepare_fold_remainder_goes_to_learning(tmp_path):
    lines = [f"line{i}" for i in range(11)]
    source = _write(tmp_path / "data.csv", lines)
    learn, test = tmp_path / "learn.csv", tmp_path / "test.csv"
    prepare_fold(source, 5, 5, learn, test)
    assert read_lines(test) == lines[8:10]
    assert read_lines(learn) == lines[:8] + lines[10:]


def test_prepare_fold_covers_every_line_once(tmp_path):
    lines = [f"line{i}" for i in range(12)]
    source = _write(tmp_path / "data.csv", lines)
    learn, test = tmp_path / "learn.csv", tmp_path / "test.csv"
    tested = []
    for fold in range(1, 5):
        prepare_fold(source, 4, fold, learn, test)
        tested.extend(read_lines(test))
        assert sorted(read_lines(test) + read_lines(learn)) == sorted(lines)
    assert tested == lines


def test_prepare_fold_rejects_zero_groups(tmp_path):
    source = _write(tmp_path / "data.csv", ["a"])
    with pytest.raises(ValueError):
        prepare_fold(source, 0, 1, tmp_path / "l.csv", tmp_path / "t.csv")


def test_prepare_test_takes_leading_share(tmp_path):
    lines = [f"line{i}" for i in range(10)]
    source = _write(tmp_path / "data.csv", lines)
    test = tmp_path / "test.csv"
    assert prepare_test(source, 0.5, test) == 5
    assert read_lines(test) == lines[:5]


def test_prepare_test_whole_file(tmp_path):
    lines = [f"line{i}" for i in range(7)]
    source = _write(tmp_path / "data.csv", lines)
    test = tmp_path / "test.csv"
    prepare_test(source, 1.0, test)
    assert read_lines(test) == lines


def test_prepare_test_rejects_bad_percent(tmp_path):
    source = _write(tmp_path / "data.csv", ["a"])
    with pytest.raises(ValueError):
        prepare_test(source, 1.5, tmp_path / "test.csv")


def test_parameters_start_empty():
    params = Parameters()
    assert (params.error, params.correct) == (0, 0)
    assert params.cross_value == params.average_accuracy == 0.0