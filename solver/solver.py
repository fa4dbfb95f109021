from typing import Callable, Optional

from loguru import logger

from .grid import copy_grid, empty_cells
from .search import search_first_solution
from .state import build_initial_state, starting_constraints_met
from .types import Grid, TraceLog, TraceStep
from .utils import trace as _trace


class UnsatisfiablePuzzleError(ValueError):
    """The starting grid has no valid completion."""


class SolveCancelledError(RuntimeError):
    """The search was stopped before it finished."""


def solve_sudoku(
    starting: Grid,
    trace: bool = False,
    trace_log: Optional[TraceLog] = None,
    trace_steps: Optional[list[TraceStep]] = None,
    trace_meta: Optional[dict[str, bool]] = None,
    trace_max_steps: int = 1000,
    stop_requested: Optional[Callable[[], bool]] = None,
) -> Grid:
    """Return a completed copy of ``starting``.

    Raises ``ValueError`` for malformed input, ``UnsatisfiablePuzzleError``
    when no completion exists and ``SolveCancelledError`` when
    ``stop_requested`` returned true mid-search. ``starting`` is never
    modified.
    """
    if trace_max_steps < 1:
        raise ValueError("trace_max_steps must be >= 1")

    grid = build_initial_state(starting)
    unknown_count = len(empty_cells(grid))
    _trace(trace, trace_log, f"Initialized search: unknown_cells={unknown_count}")
    logger.debug("Solving grid with {} empty cells", unknown_count)

    if not starting_constraints_met(grid):
        _trace(trace, trace_log, "Starting grid breaks a row, column or box constraint")
        raise UnsatisfiablePuzzleError("starting grid repeats a value within a row, column or box")

    solved, stopped = search_first_solution(
        grid=grid,
        trace_enabled=trace,
        trace_log=trace_log,
        trace_steps=trace_steps,
        trace_meta=trace_meta,
        trace_max_steps=trace_max_steps,
        stop_requested=stop_requested,
        depth=0,
    )
    if stopped:
        logger.debug("Solve cancelled")
        raise SolveCancelledError("solve was cancelled before completion")
    if not solved:
        raise UnsatisfiablePuzzleError("No valid solution for the provided grid")

    return copy_grid(grid)
