from typing import Optional

from .types import TraceLog


def trace(enabled: bool, trace_log: Optional[TraceLog], message: str) -> None:
    if not enabled:
        return
    if trace_log is not None:
        trace_log.append(message)
    else:
        print(message)


def indent(depth: int) -> str:
    return "  " * depth


def format_grid_rows(grid: list[list[int]]) -> list[str]:
    return [" ".join(str(value) if value else "." for value in row) for row in grid]
