"""A multilayer perceptron built from linked neuron objects."""

from __future__ import annotations

import math
import random
import re
import tempfile
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
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

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _atol(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _sigmoid(value: float) -> float:
    if value >= 0:
        return 1.0 / (1.0 + math.exp(-value))
    exp = math.exp(value)
    return exp / (1.0 + exp)


def _two_decimals(value: float) -> str:
    text = f"{value:f}"
    return text[: text.index(".") + 3]


def _read_samples(name: str | Path) -> Iterator[tuple[int, list[float]]]:
    """Yield (answer index, scaled pixels) for each ``label,pixel,...`` line."""
    with open(name, encoding="utf-8") as file:
        for line in file:
            label, _, rest = line.rstrip("\n").partition(",")
            if not rest:
                continue
            answer = _atol(label) - 1
            if not 0 <= answer < NEURON_OUT:
                raise ValueError(f"label out of range in line: {line.strip()!r}")
            pixels = [_atol(value) / 255.0 for value in rest.split(",") if value]
            if len(pixels) < NEURON_IN:
                raise ValueError(
                    f"a sample needs {NEURON_IN} values, got {len(pixels)}"
                )
            yield answer, pixels[:NEURON_IN]


@dataclass(eq=False)
class _Neuron:
    weights: np.ndarray = field(default_factory=lambda: np.zeros(0))
    value: float = 0.0
    error: float = 0.0
    delta: float = 0.0


class _Layer:
    """A layer of neurons linked to the layers around it."""

    def __init__(self, size: int, prev: _Layer | None = None) -> None:
        self.neurons = [_Neuron() for _ in range(size)]
        self.prev = prev
        self.next: _Layer | None = None
        if prev is not None:
            prev.next = self

    def values(self) -> np.ndarray:
        return np.fromiter((n.value for n in self.neurons), float, len(self.neurons))

    def generate_weights(self, rng: random.Random) -> None:
        width = len(self.prev.neurons)
        for neuron in self.neurons:
            draws = [rng.randrange(2001) - 1000 for _ in range(width)]
            neuron.weights = np.array(draws, dtype=float) * 0.001

    def set_values(self, income: Sequence[float]) -> None:
        for neuron, value in zip(self.neurons, income):
            neuron.value = float(value)

    def calc_values(self) -> None:
        inputs = self.prev.values()
        for neuron in self.neurons:
            neuron.value = _sigmoid(float(neuron.weights @ inputs))

    def calc_error_result(self, target: np.ndarray) -> None:
        for neuron, expected in zip(self.neurons, target):
            neuron.error = neuron.value - float(expected)

    def calc_deltas(self) -> None:
        for neuron in self.neurons:
            neuron.delta = neuron.error * neuron.value * (1 - neuron.value)

    def calc_new_weights(self, rate: float) -> None:
        inputs = self.prev.values()
        for neuron in self.neurons:
            neuron.weights = neuron.weights - inputs * neuron.delta * rate

    def calc_errors(self) -> None:
        following = self.next.neurons
        matrix = np.array([n.weights for n in following])
        deltas = np.fromiter((n.delta for n in following), float, len(following))
        for neuron, error in zip(self.neurons, matrix.T @ deltas):
            neuron.error = float(error)

    def weight_lines(self) -> Iterator[str]:
        for neuron in self.neurons:
            yield ",".join(f"{w:g}" for w in neuron.weights)

    def load_lines(self, lines: Iterator[str]) -> None:
        for neuron in self.neurons:
            line = next(lines, None)
            if line is None:
                raise ValueError("too few lines in the weights file")
            values = [float(v) for v in line.split(",") if v][: len(neuron.weights)]
            neuron.weights[: len(values)] = values


class GraphPerceptron:
    """A perceptron with 784 inputs, 128-neuron hidden layers and 26 outputs."""

    def __init__(self, hidden_layers: int = 2) -> None:
        self.rng = random.Random()
        self.learning_rate = LEARNING_RATE
        self.parameters = Parameters()
        self._size = 2
        self._hidden: list[_Layer] = []
        self.set_hidden_size(hidden_layers)
        self.init()

    @property
    def hidden_layers(self) -> int:
        """The number of hidden layers the network is built with."""
        return len(self._hidden)

    def set_hidden_size(self, size: int) -> None:
        """Set the number of hidden layers the next :meth:`init` builds."""
        if size < 1:
            raise ValueError("a graph perceptron needs at least one hidden layer")
        self._size = size

    def init(self) -> None:
        """Build and link the layers and give every weight a random value."""
        self._input = _Layer(NEURON_IN)
        layer = self._input
        self._hidden = []
        for _ in range(self._size):
            layer = _Layer(NEURON_HIDDEN, layer)
            self._hidden.append(layer)
        self._output = _Layer(NEURON_OUT, layer)
        for layer in (*self._hidden, self._output):
            layer.generate_weights(self.rng)

    def set_incomes(self, income: Sequence[float]) -> None:
        """Set the input layer from 784 values."""
        values = list(np.asarray(income, dtype=float).ravel())
        if len(values) != NEURON_IN:
            raise ValueError(f"expected {NEURON_IN} inputs, got {len(values)}")
        self._input.set_values(values)

    def _calc_values(self) -> None:
        for layer in self._hidden:
            layer.calc_values()
        self._output.calc_values()

    def _learn(self, answer: int) -> None:
        target = np.zeros(NEURON_OUT)
        target[answer] = 1.0
        self._output.calc_error_result(target)
        self._output.calc_deltas()
        self._output.calc_new_weights(self.learning_rate)
        for layer in reversed(self._hidden):
            layer.calc_errors()
            layer.calc_deltas()
            layer.calc_new_weights(self.learning_rate)

    def predict(self) -> int:
        """Return the index of the most active output neuron."""
        self._calc_values()
        return int(np.argmax(self._output.values()))

    def learn_from_file(self, name: str | Path) -> int:
        """Run one epoch over a dataset file; return how many samples were learned."""
        count = 0
        for answer, pixels in _read_samples(name):
            self._input.set_values(pixels)
            self._calc_values()
            self._learn(answer)
            count += 1
        return count

    def test_from_file(self, name: str | Path) -> Parameters:
        """Measure the network on a dataset file."""
        correct = total = 0
        accuracy = 0.0
        for answer, pixels in _read_samples(name):
            self._input.set_values(pixels)
            if self.predict() == answer:
                correct += 1
            total += 1
            accuracy += self._output.neurons[answer].value
        if total:
            self.parameters = Parameters(
                total - correct, correct, accuracy / total, correct * 100.0 / total
            )
        else:
            self.parameters = Parameters(0, 0, 0.0, 0.0)
        return self.parameters

    def save_weights(self, name: str | Path) -> None:
        """Write each neuron's weights as one comma-separated line, layer by layer."""
        with open(name, "w", encoding="utf-8") as file:
            for layer in (*self._hidden, self._output):
                for line in layer.weight_lines():
                    file.write(line + "\n")

    def load_weights(self, name: str | Path) -> None:
        """Read weights written by :meth:`save_weights` for the current layout."""
        with open(name, encoding="utf-8") as file:
            lines = (line.rstrip("\n") for line in file)
            for layer in (*self._hidden, self._output):
                layer.load_lines(lines)

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