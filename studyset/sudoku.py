"""Count the solutions of a sudoku given as nine rows on the command line."""

from __future__ import annotations

import sys
from collections.abc import Iterator, Sequence
from itertools import islice

MAX_SOLUTIONS = 10
SIZE = 9

USAGE = (
    "Error. Please use this rule for program lounching:\n"
    ">./sudoku line0 line1 line2 line3 line4 line5 line6 line7 line8\n"
    "LineN represents a characters string of values ranged between \u20191\u2019 "
    "and \u20199\u2019 or \u2019.\u2019 (for empty boxes)."
)
WRONG_LINES = "Error, wrong number of lines"
WRONG_CHARS = "Error, wrong keys characters"

Grid = list[list[int]]


class SudokuError(ValueError):
    """The puzzle given is malformed or contradicts itself."""


def parse_grid(rows: Sequence[str]) -> Grid:
    """Turn nine strings of digits and dots into a grid with 0 for empty cells."""
    if not rows:
        raise SudokuError(USAGE)
    if len(rows) != SIZE:
        raise SudokuError(WRONG_LINES)
    grid = []
    for row in rows:
        if len(row) != SIZE or any(ch != "." and ch not in "123456789" for ch in row):
            raise SudokuError(WRONG_CHARS)
        grid.append([0 if ch == "." else int(ch) for ch in row])
    return grid


def can_place(grid: Grid, row: int, col: int, num: int) -> bool:
    """Tell whether ``num`` is absent from the row, column and box of a cell."""
    if num in grid[row]:
        return False
    if any(line[col] == num for line in grid):
        return False
    top, left = row - row % 3, col - col % 3
    return all(
        grid[r][c] != num for r in range(top, top + 3) for c in range(left, left + 3)
    )


def check_grid(grid: Grid) -> None:
    """Raise :class:`SudokuError` if any given digit repeats in a row, column or box."""
    work = [list(line) for line in grid]
    for row in range(SIZE):
        for col in range(SIZE):
            value = work[row][col]
            if not value:
                continue
            work[row][col] = 0
            if not can_place(work, row, col, value):
                raise SudokuError(WRONG_CHARS)
            work[row][col] = value


def find_empty(grid: Grid) -> tuple[int, int] | None:
    """Return the first empty cell in row-major order."""
    for row, line in enumerate(grid):
        for col, value in enumerate(line):
            if value == 0:
                return row, col
    return None


def solve(grid: Grid, limit: int = MAX_SOLUTIONS) -> Iterator[Grid]:
    """Yield up to ``limit`` distinct solutions, trying digits in ascending order."""
    work = [list(line) for line in grid]

    def search() -> Iterator[Grid]:
        cell = find_empty(work)
        if cell is None:
            yield [list(line) for line in work]
            return
        row, col = cell
        for num in range(1, SIZE + 1):
            if can_place(work, row, col, num):
                work[row][col] = num
                yield from search()
                work[row][col] = 0

    yield from islice(search(), limit)


def format_grid(grid: Grid) -> str:
    """Render a grid as nine lines of digits, 0 for empty cells."""
    return "".join("".join(str(v) for v in line) + "\n" for line in grid)


def main(argv: Sequence[str] | None = None) -> int:
    """Print every solution, up to the limit, and how many there are."""
    rows = list(sys.argv[1:] if argv is None else argv)
    try:
        grid = parse_grid(rows)
        check_grid(grid)
    except SudokuError as exc:
        print(exc)
        return 0
    solutions = list(solve(grid, MAX_SOLUTIONS + 1))
    for solution in solutions[:MAX_SOLUTIONS]:
        print(format_grid(solution))
    if len(solutions) > MAX_SOLUTIONS:
        print("Total number of solutions more than 10. Please, use more keys.")
    else:
        print(f"Total number of solutions: {len(solutions)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())