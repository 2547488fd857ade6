"""Multilayer perceptron for letter recognition, in matrix and graph forms."""

__all__ = ["common", "controller", "graph_model", "matrix", "matrix_model"]