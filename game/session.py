import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger

from rules.rules import CENTER, EMPTY, GRID_SIZE, MAX_VALUE, MIN_VALUE
from solver.constraints import invalid_units, is_valid_board, is_valid_placement, is_won
from solver.grid import all_cells, copy_grid
from solver.solver import UnsatisfiablePuzzleError, solve_sudoku
from solver.types import Cell, Grid
from solver.validation import validate_and_normalize_grid, validate_coordinates

from .hints import HintKind, check, hint
from .history import History
from .puzzles import PuzzleCatalog
from .state import BoardState, message_for


@dataclass(frozen=True)
class Transition:
    accepted: bool
    state: BoardState
    changed: list[Cell] = field(default_factory=list)
    focus: Optional[Cell] = None


Listener = Callable[[Transition], None]


class GameSession:
    """One active puzzle: current grid, starting snapshot, solution and history.

    Every trigger runs to completion and returns a ``Transition`` describing
    the resulting board state, the cells that changed and the focus cell.
    Gameplay conditions (locked cells, empty stacks, a won board) never
    raise; they produce a rejected transition. Only loading can fail.
    """

    def __init__(
        self,
        puzzle: Grid,
        rng: Optional[random.Random] = None,
        level: Optional[str] = None,
        number: Optional[int] = None,
        catalog: Optional[PuzzleCatalog] = None,
        clock: Callable[[], float] = time.monotonic,
        listener: Optional[Listener] = None,
        stop_requested: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.level = level
        self.number = number
        self._catalog = catalog
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._listener = listener
        self._load(puzzle, number=number, stop_requested=stop_requested)

    # Lifecycle

    def _load(
        self,
        puzzle: Grid,
        number: Optional[int],
        solution: Optional[Grid] = None,
        stop_requested: Optional[Callable[[], bool]] = None,
    ) -> None:
        grid = validate_and_normalize_grid(puzzle)
        if solution is None:
            try:
                solution = solve_sudoku(grid, stop_requested=stop_requested)
            except UnsatisfiablePuzzleError:
                logger.warning("Board {} of level {} has no solution", number, self.level)
                raise

        # Nothing below can fail, so a session never holds a half-loaded puzzle.
        self.number = number
        self._puzzle = copy_grid(grid)
        self._current = copy_grid(grid)
        self._starting = copy_grid(grid)
        self._solution = solution
        self._history = History()
        self._state = BoardState.OK
        self._started_at = self._clock()
        self._ended_at: Optional[float] = None
        self.focus: Cell = CENTER
        logger.info("Started board {} of level {}", number, self.level)

    def restart(self) -> Transition:
        self._load(self._puzzle, number=self.number, solution=self._solution)
        return self._notify(Transition(True, self._state, all_cells(), self.focus))

    def new_game(self) -> Transition:
        if self._catalog is None or self.level is None:
            raise ValueError("new_game needs a session started from a puzzle catalog")
        number = self._rng.randrange(self._catalog.board_count(self.level)) + 1
        puzzle = self._catalog.load(self.level, number)
        self._load(puzzle, number=number)
        return self._notify(Transition(True, self._state, all_cells(), self.focus))

    # Read access

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def message(self) -> str:
        return message_for(self._state)

    @property
    def board(self) -> Grid:
        return copy_grid(self._current)

    @property
    def starting(self) -> Grid:
        return copy_grid(self._starting)

    @property
    def solution(self) -> Grid:
        return copy_grid(self._solution)

    @property
    def history(self) -> History:
        return self._history

    @property
    def elapsed_seconds(self) -> float:
        if self._state is BoardState.WON and self._ended_at is not None:
            return self._ended_at - self._started_at
        return self._clock() - self._started_at

    def is_locked(self, row: int, col: int) -> bool:
        return self._starting[row][col] != EMPTY

    def can_undo(self) -> bool:
        return self._state is not BoardState.WON and self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    def snapshot(self) -> dict[str, object]:
        return {
            "level": self.level,
            "number": self.number,
            "state": self._state.value,
            "message": self.message,
            "board": self.board,
            "starting": self.starting,
            "locked": [[self.is_locked(r, c) for c in range(GRID_SIZE)] for r in range(GRID_SIZE)],
            "focus": list(self.focus),
            "can_undo": self.can_undo(),
            "can_redo": self.can_redo(),
            "elapsed_seconds": self.elapsed_seconds,
            "invalid": invalid_units(self._current),
        }

    # Triggers

    def enter_digit(self, row: int, col: int, digit: int) -> Transition:
        if isinstance(digit, bool) or not isinstance(digit, int) or not MIN_VALUE <= digit <= MAX_VALUE:
            return self._reject("digit out of range")
        if not self._editable(row, col):
            return self._reject(f"cell ({row}, {col}) is not editable")

        self._history.record_and_apply(self._current, row, col, digit)
        self.focus = (row, col)
        return self._commit(self._classify_placement(row, col), [(row, col)])

    def erase(self, row: int, col: int) -> Transition:
        if not self._editable(row, col):
            return self._reject(f"cell ({row}, {col}) is not editable")

        self._history.record_and_apply(self._current, row, col, EMPTY)
        self.focus = (row, col)
        state = BoardState.OK if is_valid_board(self._current) else BoardState.INVALID_BOARD
        return self._commit(state, [(row, col)])

    def undo(self) -> Transition:
        if self._state is BoardState.WON:
            return self._reject("board is already won")
        move = self._history.undo(self._current)
        if move is None:
            return self._reject("nothing to undo")

        self.focus = (move.row, move.col)
        if not is_valid_board(self._current):
            state = BoardState.INVALID_BOARD
        elif self._state is BoardState.CHECK_FAILED and not check(self._current, self._solution):
            state = BoardState.CHECK_FAILED
        else:
            state = BoardState.OK
        return self._commit(state, [(move.row, move.col)])

    def redo(self) -> Transition:
        move = self._history.redo(self._current)
        if move is None:
            return self._reject("nothing to redo")

        self.focus = (move.row, move.col)
        return self._commit(self._classify_placement(move.row, move.col), [(move.row, move.col)])

    def check(self) -> Transition:
        if self._state is BoardState.WON:
            return self._reject("board is already won")
        if not check(self._current, self._solution):
            return self._commit(BoardState.CHECK_FAILED, [])

        newly_locked = [
            (r, c) for r, c in all_cells() if self._current[r][c] != EMPTY and self._starting[r][c] == EMPTY
        ]
        self._history.clear()
        self._starting = copy_grid(self._current)
        return self._commit(BoardState.CHECKED, newly_locked)

    def hint(self) -> Transition:
        if self._state is BoardState.WON:
            return self._reject("board is already won")

        outcome = hint(self._current, self._solution, self._history, self._rng)
        if outcome.cell is not None:
            self.focus = outcome.cell

        if outcome.kind is HintKind.FIXED_VIA_UNDO:
            return self._commit(BoardState.HINT_FIXED, outcome.changed)
        if outcome.kind is HintKind.COMPLETE:
            if is_won(self._current):
                return self._commit(BoardState.WON, [])
            return self._reject("no empty cell left to reveal")

        state = BoardState.WON if is_won(self._current) else BoardState.HINTED
        return self._commit(state, outcome.changed)

    def move_focus(self, d_row: int, d_col: int) -> Transition:
        row, col = self.focus
        self.focus = ((row + d_row) % GRID_SIZE, (col + d_col) % GRID_SIZE)
        return self._notify(Transition(True, self._state, [], self.focus))

    # Internals

    def _editable(self, row: int, col: int) -> bool:
        if not validate_coordinates(row, col):
            return False
        return self._state is not BoardState.WON and not self.is_locked(row, col)

    def _classify_placement(self, row: int, col: int) -> BoardState:
        if not is_valid_placement(self._current, row, col):
            return BoardState.INVALID_PLACEMENT
        if not is_valid_board(self._current):
            return BoardState.INVALID_BOARD
        if is_won(self._current):
            return BoardState.WON
        return BoardState.OK

    def _commit(self, state: BoardState, changed: list[Cell]) -> Transition:
        if state is BoardState.WON and self._state is not BoardState.WON:
            self._ended_at = self._clock()
            elapsed = self._ended_at - self._started_at
            logger.info("Board {} of level {} solved in {:.0f}s", self.number, self.level, elapsed)
        self._state = state
        return self._notify(Transition(True, state, changed, self.focus))

    def _reject(self, reason: str) -> Transition:
        logger.debug("Ignored request: {}", reason)
        return self._notify(Transition(False, self._state, [], self.focus))

    def _notify(self, transition: Transition) -> Transition:
        if self._listener is not None:
            self._listener(transition)
        return transition


def start_game(
    level: str,
    number: Optional[int] = None,
    puzzle_dir: Optional[Union[str, Path]] = None,
    seed: Optional[int] = None,
    clock: Callable[[], float] = time.monotonic,
    listener: Optional[Listener] = None,
) -> GameSession:
    """Load a board from the catalog and start a session on it.

    An explicit ``number`` also seeds the session's random generator, so the
    same board replays the same hints and the same sequence of new games.
    """
    catalog = PuzzleCatalog(puzzle_dir)
    board_count = catalog.board_count(level)

    if number is not None:
        rng = random.Random(number)
    else:
        rng = random.Random(seed if seed is not None else time.time())
        number = rng.randrange(board_count) + 1

    puzzle = catalog.load(level, number)
    return GameSession(puzzle, rng=rng, level=level, number=number, catalog=catalog, clock=clock, listener=listener)
