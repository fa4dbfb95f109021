from typing import Optional

from rules.rules import EMPTY, GRID_SIZE

from .constraints import is_valid_board
from .types import Cell, Grid
from .validation import validate_and_normalize_grid


def build_initial_state(starting: Grid) -> Grid:
    return validate_and_normalize_grid(starting)


def select_next_cell(grid: Grid) -> Optional[Cell]:
    # Full row-major scan; the last empty cell seen wins.
    choice: Optional[Cell] = None
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            if grid[r][c] == EMPTY:
                choice = (r, c)
    return choice


def apply_value(value: int, r: int, c: int, grid: Grid) -> None:
    grid[r][c] = value


def revert_value(r: int, c: int, grid: Grid) -> None:
    grid[r][c] = EMPTY


def starting_constraints_met(grid: Grid) -> bool:
    return is_valid_board(grid)
