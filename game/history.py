from dataclasses import dataclass
from typing import Optional

from solver.grid import cell_at, set_cell
from solver.types import Grid


@dataclass(frozen=True)
class Move:
    row: int
    col: int
    previous_value: int


class History:
    """Undo and redo stacks of prior cell values.

    Both stacks are plain lists with the most recent move last. A move is
    pushed once and popped once; undo and redo always push a fresh record of
    the value they are about to overwrite.
    """

    def __init__(self) -> None:
        self._undo: list[Move] = []
        self._redo: list[Move] = []

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def record_and_apply(self, grid: Grid, row: int, col: int, new_value: int) -> None:
        self._undo.append(Move(row, col, cell_at(grid, row, col)))
        # redo never branches
        self._redo.clear()
        set_cell(grid, row, col, new_value)

    def undo(self, grid: Grid) -> Optional[Move]:
        if not self._undo:
            return None
        move = self._undo.pop()
        self._redo.append(Move(move.row, move.col, cell_at(grid, move.row, move.col)))
        set_cell(grid, move.row, move.col, move.previous_value)
        return move

    def redo(self, grid: Grid) -> Optional[Move]:
        if not self._redo:
            return None
        move = self._redo.pop()
        self._undo.append(Move(move.row, move.col, cell_at(grid, move.row, move.col)))
        set_cell(grid, move.row, move.col, move.previous_value)
        return move

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def snapshot(self) -> tuple[tuple[Move, ...], tuple[Move, ...]]:
        return tuple(self._undo), tuple(self._redo)
