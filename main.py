import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from game.session import GameSession, start_game
from rules.rules import LEVELS
from solver.solver import solve_sudoku
from solver.utils import format_grid_rows


ACTIONS = {"enter", "erase", "undo", "redo", "check", "hint", "restart", "new", "focus"}


def run(
    level: str,
    number: Optional[int] = None,
    puzzle_dir: Optional[str] = None,
    moves: Optional[list[dict[str, Any]]] = None,
    seed: Optional[int] = None,
) -> dict[str, Any]:
    # boundary validation
    if level not in LEVELS:
        raise ValueError(f"level must be one of: {', '.join(LEVELS)}")
    if number is not None:
        if not isinstance(number, int):
            raise ValueError("board number must be an integer")
        if number < 1 or number > LEVELS[level]:
            raise ValueError("That board # does not exist!")

    session = start_game(level=level, number=number, puzzle_dir=puzzle_dir, seed=seed)
    for move in moves or []:
        apply_move(session, move)

    result = session.snapshot()
    result["grid_rows"] = format_grid_rows(session.board)
    return result


def run_with_trace(
    level: str,
    number: Optional[int] = None,
    puzzle_dir: Optional[str] = None,
    seed: Optional[int] = None,
) -> tuple[dict[str, Any], list[str]]:
    session = start_game(level=level, number=number, puzzle_dir=puzzle_dir, seed=seed)
    trace_log: list[str] = []
    solution = solve_sudoku(session.starting, trace=True, trace_log=trace_log)
    result = session.snapshot()
    result["solution"] = solution
    return result, trace_log


def apply_move(session: GameSession, move: dict[str, Any]) -> None:
    action = move.get("action")
    if action == "enter":
        session.enter_digit(_field(move, "row"), _field(move, "col"), _field(move, "value"))
    elif action == "erase":
        session.erase(_field(move, "row"), _field(move, "col"))
    elif action == "undo":
        session.undo()
    elif action == "redo":
        session.redo()
    elif action == "check":
        session.check()
    elif action == "hint":
        session.hint()
    elif action == "restart":
        session.restart()
    elif action == "new":
        session.new_game()
    elif action == "focus":
        session.move_focus(move.get("d_row", 0), move.get("d_col", 0))
    else:
        raise ValueError(f"move action must be one of: {', '.join(sorted(ACTIONS))}")


def _field(move: dict[str, Any], name: str) -> Any:
    if name not in move:
        raise ValueError(f"'{move.get('action')}' move must include '{name}'")
    return move[name]


def load_moves_from_file(input_path: str) -> list[dict[str, Any]]:
    path = Path(input_path)
    try:
        payload: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"moves file not found: {input_path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"moves file is not valid JSON: {input_path}") from exc

    if not isinstance(payload, list):
        raise ValueError("JSON root must be a list of moves")
    for move in payload:
        if not isinstance(move, dict) or "action" not in move:
            raise ValueError("every move must be an object with an 'action'")

    return payload


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load a Sudoku board, solve it and replay moves against it")
    parser.add_argument("level", choices=sorted(LEVELS), help="Difficulty level")
    parser.add_argument("number", nargs="?", type=int, help="Board number; also seeds hints and new games")
    parser.add_argument("--puzzle-dir", help="Directory holding the level catalogs")
    parser.add_argument("--moves", help="Path to a JSON list of moves to replay")
    parser.add_argument("--seed", type=int, help="Seed used to pick a board when no number is given")
    parser.add_argument("--trace", action="store_true", help="Include solver trace output")
    parser.add_argument("--log-level", default="WARNING", help="Log level for stderr output")
    return parser


if __name__ == "__main__":
    args = _build_parser().parse_args()

    logger.remove()
    logger.add(sys.stderr, level=args.log_level)

    try:
        if args.trace:
            result, trace_log = run_with_trace(
                level=args.level, number=args.number, puzzle_dir=args.puzzle_dir, seed=args.seed
            )
            print(json.dumps({**result, "trace": trace_log}, indent=2))
        else:
            moves = load_moves_from_file(args.moves) if args.moves else None
            result = run(level=args.level, number=args.number, puzzle_dir=args.puzzle_dir, moves=moves, seed=args.seed)
            print(json.dumps(result, indent=2))
    except ValueError as exc:
        raise SystemExit(f"Error: {exc}")
