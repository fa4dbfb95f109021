from rules.rules import BOX_SIZE, EMPTY, GRID_SIZE

from .types import Cell, Grid


def empty_grid() -> Grid:
    return [[EMPTY for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


def copy_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def cell_at(grid: Grid, row: int, col: int) -> int:
    return grid[row][col]


def set_cell(grid: Grid, row: int, col: int, value: int) -> None:
    grid[row][col] = value


def row_of(index: int) -> list[Cell]:
    return [(index, col) for col in range(GRID_SIZE)]


def column_of(index: int) -> list[Cell]:
    return [(row, index) for row in range(GRID_SIZE)]


def box_of(index: int) -> list[Cell]:
    """Coordinates of box ``index``.

    Boxes are numbered top-to-bottom, then left-to-right: box 1 sits below
    box 0, and box 3 sits to the right of box 0.
    """
    top = BOX_SIZE * (index % BOX_SIZE)
    left = BOX_SIZE * (index // BOX_SIZE)
    return [(top + i, left + j) for i in range(BOX_SIZE) for j in range(BOX_SIZE)]


def box_index(row: int, col: int) -> int:
    return (row // BOX_SIZE) + BOX_SIZE * (col // BOX_SIZE)


def all_cells() -> list[Cell]:
    return [(row, col) for row in range(GRID_SIZE) for col in range(GRID_SIZE)]


def empty_cells(grid: Grid) -> list[Cell]:
    return [(row, col) for row, col in all_cells() if grid[row][col] == EMPTY]


def values_of(grid: Grid, cells: list[Cell]) -> list[int]:
    return [grid[row][col] for row, col in cells]
