"""Sudoku solution counting, a student record store and a letter-recognising perceptron."""

__version__ = "0.1.0"