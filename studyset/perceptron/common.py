"""Shared sizes, test results and dataset file splitting for the perceptrons."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

NEURON_IN = 784
NEURON_HIDDEN = 128
NEURON_OUT = 26
LEARNING_RATE = 0.1
NAME_LEARN = "temp_learn.csv"
NAME_TEST = "temp_test.csv"


@dataclass
class Parameters:
    """The outcome of testing a network on a dataset."""

    error: int = 0
    correct: int = 0
    average_accuracy: float = 0.0
    cross_value: float = 0.0


def read_lines(name: str | Path) -> list[str]:
    """Return the lines of a file without their newlines; a missing file gives none."""
    try:
        with open(name, encoding="utf-8", newline="") as file:
            text = file.read()
    except OSError:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def prepare_fold(
    name: str | Path,
    group: int,
    count: int,
    learn_path: str | Path = NAME_LEARN,
    test_path: str | Path = NAME_TEST,
) -> tuple[int, int]:
    """Split a dataset into ``group`` folds; fold ``count`` (from 1) goes to the test file.

    Returns how many lines went to the learn and test files.
    """
    if group <= 0:
        raise ValueError("the number of groups must be positive")
    lines = read_lines(name)
    fold_size = len(lines) // group
    start, stop = fold_size * (count - 1), fold_size * count
    learned = tested = 0
    with open(learn_path, "w", encoding="utf-8") as learn, open(
        test_path, "w", encoding="utf-8"
    ) as test:
        for index, line in enumerate(lines):
            if start <= index < stop:
                test.write(line + "\n")
                tested += 1
            else:
                learn.write(line + "\n")
                learned += 1
    return learned, tested


def prepare_test(
    name: str | Path, percent: float, test_path: str | Path = NAME_TEST
) -> int:
    """Copy the leading ``percent`` share of a dataset's lines; return how many."""
    if not 0.0 <= percent <= 1.0:
        raise ValueError("percent must lie between 0 and 1")
    lines = read_lines(name)
    taken = lines[: int(len(lines) * percent)]
    with open(test_path, "w", encoding="utf-8") as test:
        test.writelines(line + "\n" for line in taken)
    return len(taken)