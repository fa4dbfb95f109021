from typing import Callable, Optional

from rules.rules import MAX_VALUE, MIN_VALUE

from .constraints import is_valid_placement
from .state import apply_value, revert_value, select_next_cell
from .types import Grid, TraceLog, TraceStep
from .utils import indent, trace


def search_first_solution(
    grid: Grid,
    trace_enabled: bool,
    trace_log: Optional[TraceLog],
    trace_steps: Optional[list[TraceStep]],
    trace_meta: Optional[dict[str, bool]],
    trace_max_steps: int,
    stop_requested: Optional[Callable[[], bool]],
    depth: int,
) -> tuple[bool, bool]:
    """Fill ``grid`` in place by depth-first backtracking.

    ``grid`` must satisfy every unit constraint on entry. Each trial value is
    checked only against the units of its own cell, which is equivalent to
    re-validating the whole board because the rest of it was already valid.

    Returns ``(solved, stopped)``. On ``solved`` the grid holds the completed
    board; otherwise every cell this call touched is empty again.
    """

    def record_step(
        event: str,
        message: str,
        row: Optional[int] = None,
        col: Optional[int] = None,
        value: Optional[int] = None,
    ) -> None:
        if trace_steps is None:
            return
        if len(trace_steps) >= trace_max_steps:
            if trace_meta is not None:
                trace_meta["truncated"] = True
            return
        trace_steps.append(
            {
                "event": event,
                "message": message,
                "depth": depth,
                "row": row,
                "col": col,
                "value": value,
                "grid": [grid_row[:] for grid_row in grid],
            }
        )

    if stop_requested is not None and stop_requested():
        return False, True

    choice = select_next_cell(grid)
    if choice is None:
        message = f"{indent(depth)}All cells assigned; board is complete"
        trace(trace_enabled, trace_log, message)
        record_step("validate_complete", message)
        return True, False

    r, c = choice
    message = f"{indent(depth)}Select cell ({r}, {c})"
    trace(trace_enabled, trace_log, message)
    record_step("select_cell", message, row=r, col=c)

    for value in range(MIN_VALUE, MAX_VALUE + 1):
        message = f"{indent(depth)}Try value {value} at ({r}, {c})"
        trace(trace_enabled, trace_log, message)
        record_step("try_value", message, row=r, col=c, value=value)
        apply_value(value, r, c, grid)

        if not is_valid_placement(grid, r, c):
            continue

        solved, stopped = search_first_solution(
            grid=grid,
            trace_enabled=trace_enabled,
            trace_log=trace_log,
            trace_steps=trace_steps,
            trace_meta=trace_meta,
            trace_max_steps=trace_max_steps,
            stop_requested=stop_requested,
            depth=depth + 1,
        )
        if solved:
            message = f"{indent(depth)}Accept value {value} at ({r}, {c})"
            trace(trace_enabled, trace_log, message)
            record_step("accept_value", message, row=r, col=c, value=value)
            return True, False
        if stopped:
            revert_value(r, c, grid)
            return False, True

        message = f"{indent(depth)}Backtrack on ({r}, {c}) value {value}"
        trace(trace_enabled, trace_log, message)
        record_step("backtrack", message, row=r, col=c, value=value)

    revert_value(r, c, grid)
    message = f"{indent(depth)}No valid values remain for ({r}, {c})"
    trace(trace_enabled, trace_log, message)
    record_step("prune_branch", message, row=r, col=c)
    return False, False
