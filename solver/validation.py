from typing import Any

from rules.rules import EMPTY, GRID_SIZE, LEVELS, MAX_VALUE

from .types import Grid


def validate_and_normalize_grid(grid: Any) -> Grid:
    if not isinstance(grid, list) or len(grid) != GRID_SIZE:
        raise ValueError(f"grid must be a list of {GRID_SIZE} rows")

    normalized_grid: Grid = []
    for row in grid:
        if not isinstance(row, list) or len(row) != GRID_SIZE:
            raise ValueError(f"every grid row must be a list of {GRID_SIZE} values")

        normalized_row = []
        for value in row:
            if value is None:
                normalized_row.append(EMPTY)
                continue
            # bool is an int subclass; True/False are never cell values
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError("grid entries must be integers or None")
            if value < EMPTY or value > MAX_VALUE:
                raise ValueError(f"grid integers must be between {EMPTY} and {MAX_VALUE}")
            normalized_row.append(value)

        normalized_grid.append(normalized_row)

    return normalized_grid


def parse_grid_text(text: str) -> Grid:
    cells = [char for char in text if not char.isspace()]
    if len(cells) != GRID_SIZE * GRID_SIZE:
        raise ValueError(f"board text must contain exactly {GRID_SIZE * GRID_SIZE} cells")

    values: list[int] = []
    for char in cells:
        if char == ".":
            values.append(EMPTY)
        elif char.isdigit():
            values.append(int(char))
        else:
            raise ValueError(f"unexpected character in board text: {char!r}")

    return [values[r * GRID_SIZE : (r + 1) * GRID_SIZE] for r in range(GRID_SIZE)]


def validate_level(level: str) -> int:
    if level not in LEVELS:
        raise ValueError(f"level must be one of: {', '.join(LEVELS)}")
    return LEVELS[level]


def validate_board_number(level: str, number: Any) -> int:
    board_count = validate_level(level)
    if isinstance(number, bool) or not isinstance(number, int):
        raise ValueError("board number must be an integer")
    if number < 1 or number > board_count:
        raise ValueError("That board # does not exist!")
    return number


def validate_coordinates(row: Any, col: Any) -> bool:
    return (
        isinstance(row, int)
        and isinstance(col, int)
        and not isinstance(row, bool)
        and not isinstance(col, bool)
        and 0 <= row < GRID_SIZE
        and 0 <= col < GRID_SIZE
    )
