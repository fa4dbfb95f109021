from rules.rules import EMPTY, GRID_SIZE

from .grid import box_index, box_of, column_of, row_of, values_of
from .types import Cell, Grid


def is_valid_unit(values: list[int]) -> bool:
    seen: set[int] = set()
    for value in values:
        if value == EMPTY:
            continue
        if value in seen:
            return False
        seen.add(value)
    return True


def is_valid_row(grid: Grid, index: int) -> bool:
    return is_valid_unit(values_of(grid, row_of(index)))


def is_valid_column(grid: Grid, index: int) -> bool:
    return is_valid_unit(values_of(grid, column_of(index)))


def is_valid_box(grid: Grid, index: int) -> bool:
    return is_valid_unit(values_of(grid, box_of(index)))


def is_valid_placement(grid: Grid, row: int, col: int) -> bool:
    """True iff the value at (row, col) repeats nowhere else in its row, column or box.

    An empty cell is never a conflicting placement.
    """
    value = grid[row][col]
    if value == EMPTY:
        return True

    peers = row_of(row) + column_of(col) + box_of(box_index(row, col))
    for r, c in peers:
        if (r, c) == (row, col):
            continue
        if grid[r][c] == value:
            return False
    return True


def is_valid_board(grid: Grid) -> bool:
    for index in range(GRID_SIZE):
        if not (is_valid_row(grid, index) and is_valid_column(grid, index) and is_valid_box(grid, index)):
            return False
    return True


def is_won(grid: Grid) -> bool:
    if any(value == EMPTY for row in grid for value in row):
        return False
    return is_valid_board(grid)


def invalid_units(grid: Grid) -> dict[str, list[int]]:
    return {
        "rows": [index for index in range(GRID_SIZE) if not is_valid_row(grid, index)],
        "columns": [index for index in range(GRID_SIZE) if not is_valid_column(grid, index)],
        "boxes": [index for index in range(GRID_SIZE) if not is_valid_box(grid, index)],
    }


def conflicting_cells(grid: Grid) -> set[Cell]:
    units = invalid_units(grid)
    cells: set[Cell] = set()
    for index in units["rows"]:
        cells.update(row_of(index))
    for index in units["columns"]:
        cells.update(column_of(index))
    for index in units["boxes"]:
        cells.update(box_of(index))
    return cells
