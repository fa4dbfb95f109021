import json
import os
import struct
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

from rules.rules import BOARD_BYTES, DEFAULT_PUZZLE_DIR, GRID_SIZE, PUZZLE_DIR_ENV
from solver.constraints import is_valid_board
from solver.types import Grid
from solver.validation import parse_grid_text, validate_and_normalize_grid, validate_board_number, validate_level


class PuzzleLoadError(ValueError):
    """A board could not be read from its catalog."""


def resolve_puzzle_dir(puzzle_dir: Optional[Union[str, Path]] = None) -> Path:
    if puzzle_dir is not None:
        return Path(puzzle_dir)
    from_env = os.environ.get(PUZZLE_DIR_ENV)
    if from_env:
        return Path(from_env)
    return DEFAULT_PUZZLE_DIR


class PuzzleCatalog:
    """Read-only access to the boards of every difficulty level.

    A level ``L`` is stored either as ``L.bin`` (consecutive boards of 81
    little-endian 32-bit integers) or as ``L.json`` (``{"boards": [...]}``
    holding 81-character strings or 9x9 lists). The binary file wins when
    both exist.
    """

    def __init__(self, puzzle_dir: Optional[Union[str, Path]] = None) -> None:
        self.puzzle_dir = resolve_puzzle_dir(puzzle_dir)

    def board_count(self, level: str) -> int:
        try:
            return validate_level(level)
        except ValueError as exc:
            raise PuzzleLoadError(str(exc)) from exc

    def load(self, level: str, number: int) -> Grid:
        try:
            validate_board_number(level, number)
        except ValueError as exc:
            raise PuzzleLoadError(str(exc)) from exc

        binary_path = self.puzzle_dir / f"{level}.bin"
        json_path = self.puzzle_dir / f"{level}.json"
        if binary_path.exists():
            grid = _read_binary_board(binary_path, number)
        elif json_path.exists():
            grid = _read_json_board(json_path, number)
        else:
            logger.warning("No catalog for level {} in {}", level, self.puzzle_dir)
            raise PuzzleLoadError(f"Could not load board from disk: no catalog for level {level!r} in {self.puzzle_dir}")

        if not is_valid_board(grid):
            raise PuzzleLoadError(f"board {number} of level {level!r} repeats a value within a row, column or box")

        logger.debug("Loaded board {} of level {}", number, level)
        return grid


def _read_binary_board(path: Path, number: int) -> Grid:
    try:
        payload = path.read_bytes()
    except OSError as exc:
        raise PuzzleLoadError(f"Could not load board from disk: {path}") from exc

    if len(payload) % BOARD_BYTES != 0:
        raise PuzzleLoadError(f"catalog size is not a multiple of {BOARD_BYTES} bytes: {path}")

    offset = (number - 1) * BOARD_BYTES
    if offset + BOARD_BYTES > len(payload):
        raise PuzzleLoadError(f"catalog {path} holds only {len(payload) // BOARD_BYTES} boards")

    values = struct.unpack_from(f"<{GRID_SIZE * GRID_SIZE}i", payload, offset)
    grid = [list(values[r * GRID_SIZE : (r + 1) * GRID_SIZE]) for r in range(GRID_SIZE)]
    return _normalize_board(grid, path)


def _read_json_board(path: Path, number: int) -> Grid:
    try:
        payload: Any = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PuzzleLoadError(f"Could not load board from disk: {path}") from exc
    except json.JSONDecodeError as exc:
        raise PuzzleLoadError(f"catalog is not valid JSON: {path}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("boards"), list):
        raise PuzzleLoadError(f"catalog must be an object with a 'boards' list: {path}")

    boards = payload["boards"]
    if number > len(boards):
        raise PuzzleLoadError(f"catalog {path} holds only {len(boards)} boards")

    board = boards[number - 1]
    if isinstance(board, str):
        try:
            return parse_grid_text(board)
        except ValueError as exc:
            raise PuzzleLoadError(f"board {number} in {path}: {exc}") from exc
    return _normalize_board(board, path)


def _normalize_board(board: Any, path: Path) -> Grid:
    try:
        return validate_and_normalize_grid(board)
    except ValueError as exc:
        raise PuzzleLoadError(f"malformed board in {path}: {exc}") from exc


def write_binary_catalog(path: Union[str, Path], boards: list[Grid]) -> None:
    chunks = []
    for board in boards:
        grid = validate_and_normalize_grid(board)
        chunks.append(struct.pack(f"<{GRID_SIZE * GRID_SIZE}i", *(value for row in grid for value in row)))
    Path(path).write_bytes(b"".join(chunks))
