from pathlib import Path


GRID_SIZE = 9
BOX_SIZE = 3
EMPTY = 0
MIN_VALUE = 1
MAX_VALUE = 9

CENTER = (4, 4)

# Number of boards available per difficulty level.
LEVELS = {
    "debug": 9,
    "n00b": 1024,
    "l33t": 1024,
}

# Legacy catalogs store every board as 81 little-endian 32-bit integers.
INT_SIZE = 4
BOARD_BYTES = GRID_SIZE * GRID_SIZE * INT_SIZE

PUZZLE_DIR_ENV = "SUDOKU_PUZZLE_DIR"
DEFAULT_PUZZLE_DIR = Path(__file__).resolve().parent.parent / "puzzles"
