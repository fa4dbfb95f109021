import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from loguru import logger

from rules.rules import EMPTY, GRID_SIZE
from solver.types import Cell, Grid

from .history import History


class HintKind(str, Enum):
    FILLED = "filled"
    FIXED_VIA_UNDO = "fixed_via_undo"
    COMPLETE = "complete"


@dataclass(frozen=True)
class HintOutcome:
    kind: HintKind
    cell: Optional[Cell] = None
    changed: list[Cell] = field(default_factory=list)


def check(grid: Grid, solution: Grid) -> bool:
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            value = grid[row][col]
            if value != EMPTY and value != solution[row][col]:
                return False
    return True


def hint(grid: Grid, solution: Grid, history: History, rng: random.Random) -> HintOutcome:
    """Fix mistakes or reveal one cell.

    When the board disagrees with ``solution`` the most recent moves are
    undone until it agrees again. Otherwise a uniformly chosen empty cell is
    filled from ``solution`` through ``history`` so the hint can be undone.
    """
    if not check(grid, solution):
        changed: list[Cell] = []
        while not check(grid, solution):
            move = history.undo(grid)
            if move is None:
                # Only reachable when the starting snapshot itself disagrees with the solution.
                logger.warning("Ran out of moves to undo while fixing mistakes")
                break
            changed.append((move.row, move.col))
        logger.debug("Hint undid {} move(s) to fix mistakes", len(changed))
        return HintOutcome(HintKind.FIXED_VIA_UNDO, cell=changed[-1] if changed else None, changed=changed)

    empty_squares = sum(1 for row in grid for value in row if value == EMPTY)
    if empty_squares == 0:
        return HintOutcome(HintKind.COMPLETE)

    target = rng.randrange(empty_squares)
    seen = 0
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            if grid[row][col] != EMPTY:
                continue
            if seen == target:
                history.record_and_apply(grid, row, col, solution[row][col])
                return HintOutcome(HintKind.FILLED, cell=(row, col), changed=[(row, col)])
            seen += 1

    raise AssertionError("hint target index exceeded the number of empty cells")
