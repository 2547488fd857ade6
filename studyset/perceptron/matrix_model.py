"""A multilayer perceptron kept as a list of weight matrices."""

from __future__ import annotations

import random
import re
import tempfile
from collections.abc import Iterator, Sequence
from itertools import islice
from pathlib import Path

import numpy as np

from studyset.perceptron.common import (
    LEARNING_RATE,
    NAME_LEARN,
    NAME_TEST,
    NEURON_HIDDEN,
    NEURON_IN,
    NEURON_OUT,
    Parameters,
    prepare_fold,
)
from studyset.perceptron.matrix import Matrix

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _atol(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _split_commas(text: str) -> list[str]:
    parts = text.split(",")
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def _sigmoid(values: np.ndarray) -> np.ndarray:
    return np.exp(-np.logaddexp(0.0, -values))


def _two_decimals(value: float) -> str:
    text = f"{value:f}"
    return text[: text.index(".") + 3]


def _read_samples(name: str | Path) -> Iterator[tuple[int, np.ndarray]]:
    """Yield (answer index, scaled pixels) for each ``label,pixel,...`` line."""
    with open(name, encoding="utf-8") as file:
        for line in file:
            label, _, rest = line.rstrip("\n").partition(",")
            if not rest:
                continue
            answer = _atol(label) - 1
            if not 0 <= answer < NEURON_OUT:
                raise ValueError(f"label out of range in line: {line.strip()!r}")
            pixels = [_atol(value) / 255.0 for value in _split_commas(rest)]
            if len(pixels) < NEURON_IN:
                raise ValueError(
                    f"a sample needs {NEURON_IN} values, got {len(pixels)}"
                )
            yield answer, np.array(pixels[:NEURON_IN])


class MatrixModel:
    """A perceptron with 784 inputs, 128-neuron hidden layers and 26 outputs."""

    def __init__(self, hidden_layers: int = 2) -> None:
        self.rng = random.Random()
        self.learning_rate = LEARNING_RATE
        self.parameters = Parameters()
        self._input: np.ndarray | None = None
        self._weights: list[np.ndarray] = []
        self._values: list[np.ndarray] = []
        self.init(hidden_layers)
        self.fill_random_weights()

    @property
    def hidden_layers(self) -> int:
        return len(self._sizes) - 2

    def init(self, hidden_layers: int) -> None:
        """Set the number of hidden layers; weights must be refilled or loaded after."""
        if hidden_layers < 0:
            raise ValueError("the number of hidden layers cannot be negative")
        self._sizes = [NEURON_IN, *([NEURON_HIDDEN] * hidden_layers), NEURON_OUT]

    def _shapes(self) -> list[tuple[int, int]]:
        return list(zip(self._sizes[1:], self._sizes[:-1]))

    def fill_random_weights(self) -> None:
        """Give every weight a random value between -1 and 1."""
        weights = []
        for rows, cols in self._shapes():
            matrix = Matrix(rows, cols)
            matrix.randomize(self.rng)
            weights.append(matrix.to_array())
        self._weights = weights

    def set_incomes(self, income: Sequence[float]) -> None:
        """Set the input layer from 784 values."""
        values = np.asarray(income, dtype=float).ravel()
        if values.size != NEURON_IN:
            raise ValueError(f"expected {NEURON_IN} inputs, got {values.size}")
        self._input = values.copy()

    def _forward(self) -> np.ndarray:
        if self._input is None:
            raise ValueError("no input has been set")
        if len(self._weights) != len(self._sizes) - 1:
            raise ValueError("incorrect number of layers: weights do not match them")
        values = [self._input.reshape(-1, 1)]
        for weights in self._weights:
            values.append(_sigmoid(weights @ values[-1]))
        self._values = values
        return values[-1]

    def predict(self) -> int:
        """Return the index of the most active output neuron."""
        output = self._forward()
        return int(np.argmax(output[:, 0]))

    def _learn(self, answer: int) -> None:
        values = self._forward()
        last = len(values) - 1
        target = np.zeros((NEURON_OUT, 1))
        target[answer, 0] = 1.0
        output = values[last]
        delta = (output - target) * output * (1 - output)
        for layer in range(last, 0, -1):
            if layer != last:
                error = self._weights[layer].T @ delta
                delta = error * values[layer] * (1 - values[layer])
            self._weights[layer - 1] -= (delta @ values[layer - 1].T) * self.learning_rate

    def learn_from_file(self, name: str | Path) -> int:
        """Run one epoch over a dataset file; return how many samples were learned."""
        count = 0
        for answer, pixels in _read_samples(name):
            self._input = pixels
            self._learn(answer)
            count += 1
        return count

    def test_from_file(self, name: str | Path) -> Parameters:
        """Measure the network on a dataset file."""
        correct = error = 0
        accuracy = 0.0
        for answer, pixels in _read_samples(name):
            self._input = pixels
            if self.predict() == answer:
                correct += 1
            else:
                error += 1
            accuracy += float(self._values[-1][answer, 0])
        total = correct + error
        if total:
            self.parameters = Parameters(
                error, correct, accuracy / total, correct * 100.0 / total
            )
        else:
            self.parameters = Parameters(error, correct, 0.0, 0.0)
        return self.parameters

    def save_weights(self, name: str | Path) -> None:
        """Write every weight matrix row by row as comma-separated values."""
        with open(name, "w", encoding="utf-8") as file:
            for weights in self._weights:
                for row in weights:
                    file.write(",".join(f"{value:g}" for value in row) + "\n")

    def load_weights(self, name: str | Path) -> None:
        """Read weights written by :meth:`save_weights` for the current layout."""
        with open(name, encoding="utf-8") as file:
            rows = (line.rstrip("\n") for line in file if line.rstrip("\n"))
            weights = []
            for height, width in self._shapes():
                block = list(islice(rows, height))
                if len(block) < height:
                    raise ValueError("incorrect number of layers in the weights file")
                matrix = np.zeros((height, width))
                for row, line in enumerate(block):
                    values = [_atof(value) for value in _split_commas(line)][:width]
                    matrix[row, : len(values)] = values
                weights.append(matrix)
        self._weights = weights

    def cross_valid(self, name: str | Path, group: int) -> str:
        """Learn and test on each of ``group`` folds; report each fold's accuracy."""
        if group < 0:
            raise ValueError("the number of groups cannot be negative")
        parts = []
        with tempfile.TemporaryDirectory() as work:
            learn_path = Path(work) / NAME_LEARN
            test_path = Path(work) / NAME_TEST
            for fold in range(group, 0, -1):
                prepare_fold(name, group, fold, learn_path, test_path)
                self.learn_from_file(learn_path)
                result = self.test_from_file(test_path)
                parts.append(f"{group - fold + 1}: {_two_decimals(result.cross_value)}% ")
        return "".join(parts)