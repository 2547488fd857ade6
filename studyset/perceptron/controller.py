"""Switches the application between the matrix and graph perceptrons."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from studyset.perceptron.common import Parameters
from studyset.perceptron.graph_model import GraphPerceptron
from studyset.perceptron.matrix_model import MatrixModel

MIN_HIDDEN = 2
MAX_HIDDEN = 5


class Strategy(Enum):
    """Which perceptron implementation the controller drives."""

    MATRIX = "matrix"
    GRAPH = "graph"


class Controller:
    """Forwards requests to the perceptron of the chosen strategy."""

    def __init__(
        self, matrix: MatrixModel | None = None, graph: GraphPerceptron | None = None
    ) -> None:
        self.matrix = matrix if matrix is not None else MatrixModel()
        self.graph = graph if graph is not None else GraphPerceptron()
        self.strategy = Strategy.MATRIX

    @property
    def model(self) -> MatrixModel | GraphPerceptron:
        """The perceptron of the current strategy."""
        return self.matrix if self.strategy is Strategy.MATRIX else self.graph

    @property
    def parameters(self) -> Parameters:
        """The last test results of the current perceptron."""
        return self.model.parameters

    def set_matrix_strategy(self) -> None:
        """Use the matrix perceptron."""
        self.strategy = Strategy.MATRIX

    def set_graph_strategy(self) -> None:
        """Use the graph perceptron."""
        self.strategy = Strategy.GRAPH

    def set_hidden_size(self, size: int) -> bool:
        """Rebuild both perceptrons with ``size`` hidden layers, if from 2 to 5."""
        if not MIN_HIDDEN <= size <= MAX_HIDDEN:
            return False
        self.matrix.init(size)
        self.matrix.fill_random_weights()
        self.graph.set_hidden_size(size)
        self.graph.init()
        return True

    def update_weights(self) -> None:
        """Give the current perceptron fresh random weights."""
        if self.strategy is Strategy.MATRIX:
            self.matrix.fill_random_weights()
        else:
            self.graph.init()

    def learn_from_file(self, name: str | Path) -> int:
        """Run one learning epoch over a dataset file."""
        return self.model.learn_from_file(name)

    def test_from_file(self, name: str | Path) -> Parameters:
        """Test the current perceptron on a dataset file."""
        return self.model.test_from_file(name)

    def predict(self, income: Sequence[float]) -> int:
        """Return the letter index the current perceptron sees in ``income``."""
        self.model.set_incomes(income)
        return self.model.predict()

    def save_weights(self, name: str | Path) -> None:
        """Write the current perceptron's weights."""
        self.model.save_weights(name)

    def load_weights(self, name: str | Path) -> None:
        """Load the same weights into both perceptrons."""
        self.matrix.load_weights(name)
        self.graph.load_weights(name)

    def cross_valid(self, name: str | Path, group: int) -> str:
        """Reset the current perceptron and cross-validate it over ``group`` folds."""
        self.update_weights()
        return self.model.cross_valid(name, group)