import threading
import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from game.session import GameSession, Transition, start_game
from solver.solver import solve_sudoku
from solver.utils import format_grid_rows


class SolveRequest(BaseModel):
    grid: list[list[Optional[int]]] = Field(
        ...,
        description="9x9 grid with digits 1-9 for givens and 0 or null for empty cells",
    )
    trace: bool = Field(default=False, description="Include solver trace output in the response")
    trace_steps: bool = Field(default=False, description="Include structured trace steps for walkthrough/debugging.")
    trace_max_steps: int = Field(default=1000, ge=1, le=20000, description="Maximum number of trace steps to return.")


class TraceStepResponse(BaseModel):
    event: str
    message: str
    depth: int
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[int] = None
    grid: list[list[int]]


class SolveResponse(BaseModel):
    solution: list[list[int]]
    grid_rows: list[str]
    grid_text: str
    trace: Optional[list[str]] = None
    trace_steps: Optional[list[TraceStepResponse]] = None
    trace_truncated: bool = False


class StartGameRequest(BaseModel):
    level: str = Field(default="debug", description="Difficulty level: debug, n00b or l33t")
    number: Optional[int] = Field(default=None, ge=1, description="Board number; random when omitted")
    seed: Optional[int] = Field(default=None, description="Seed used to pick a board when no number is given")


class CellRequest(BaseModel):
    row: int = Field(..., ge=0, le=8)
    col: int = Field(..., ge=0, le=8)
    value: int = Field(..., ge=0, le=9, description="Digit to enter; 0 erases the cell")


class FocusRequest(BaseModel):
    d_row: int = Field(default=0, description="Rows to move; wraps around the grid")
    d_col: int = Field(default=0, description="Columns to move; wraps around the grid")


class InvalidUnitsResponse(BaseModel):
    rows: list[int]
    columns: list[int]
    boxes: list[int]


class GameResponse(BaseModel):
    game_id: str
    level: Optional[str] = None
    number: Optional[int] = None
    state: str
    message: str
    board: list[list[int]]
    starting: list[list[int]]
    locked: list[list[bool]]
    focus: list[int]
    accepted: bool = True
    changed: list[list[int]] = Field(default_factory=list)
    can_undo: bool
    can_redo: bool
    elapsed_seconds: float
    invalid: InvalidUnitsResponse


app = FastAPI(
    title="Sudoku Game API",
    description="Play Sudoku boards with undo/redo, progress checks and hints.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://127.0.0.1:5173", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_GAMES: dict[str, GameSession] = {}
_GAMES_LOCK = threading.Lock()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/solve", response_model=SolveResponse)
def solve(request: SolveRequest) -> SolveResponse:
    try:
        if request.trace or request.trace_steps:
            trace_log: list[str] = []
            trace_steps: list[dict[str, object]] = []
            trace_meta = {"truncated": False}
            solution = solve_sudoku(
                request.grid,
                trace=request.trace,
                trace_log=trace_log,
                trace_steps=trace_steps if request.trace_steps else None,
                trace_meta=trace_meta,
                trace_max_steps=request.trace_max_steps,
            )
            grid_rows = format_grid_rows(solution)
            return SolveResponse(
                solution=solution,
                grid_rows=grid_rows,
                grid_text="\n".join(grid_rows),
                trace=trace_log if request.trace else None,
                trace_steps=trace_steps if request.trace_steps else None,
                trace_truncated=trace_meta["truncated"],
            )

        solution = solve_sudoku(request.grid)
        grid_rows = format_grid_rows(solution)
        return SolveResponse(solution=solution, grid_rows=grid_rows, grid_text="\n".join(grid_rows))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/games", response_model=GameResponse, status_code=status.HTTP_201_CREATED)
def create_game(request: StartGameRequest) -> GameResponse:
    try:
        session = start_game(level=request.level, number=request.number, seed=request.seed)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    game_id = str(uuid.uuid4())
    with _GAMES_LOCK:
        _GAMES[game_id] = session
        logger.info("Created game {} (level {}, board {})", game_id, session.level, session.number)
        return _build_game_response(game_id, session)


@app.get("/games/{game_id}", response_model=GameResponse)
def get_game(game_id: str) -> GameResponse:
    with _GAMES_LOCK:
        return _build_game_response(game_id, _get_session(game_id))


@app.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_game(game_id: str) -> None:
    with _GAMES_LOCK:
        _get_session(game_id)
        del _GAMES[game_id]


@app.post("/games/{game_id}/cells", response_model=GameResponse)
def set_cell(game_id: str, request: CellRequest) -> GameResponse:
    with _GAMES_LOCK:
        session = _get_session(game_id)
        if request.value == 0:
            transition = session.erase(request.row, request.col)
        else:
            transition = session.enter_digit(request.row, request.col, request.value)
        return _build_game_response(game_id, session, transition)


@app.post("/games/{game_id}/undo", response_model=GameResponse)
def undo(game_id: str) -> GameResponse:
    with _GAMES_LOCK:
        session = _get_session(game_id)
        return _build_game_response(game_id, session, session.undo())


@app.post("/games/{game_id}/redo", response_model=GameResponse)
def redo(game_id: str) -> GameResponse:
    with _GAMES_LOCK:
        session = _get_session(game_id)
        return _build_game_response(game_id, session, session.redo())


@app.post("/games/{game_id}/check", response_model=GameResponse)
def check(game_id: str) -> GameResponse:
    with _GAMES_LOCK:
        session = _get_session(game_id)
        return _build_game_response(game_id, session, session.check())


@app.post("/games/{game_id}/hint", response_model=GameResponse)
def hint(game_id: str) -> GameResponse:
    with _GAMES_LOCK:
        session = _get_session(game_id)
        return _build_game_response(game_id, session, session.hint())


@app.post("/games/{game_id}/focus", response_model=GameResponse)
def focus(game_id: str, request: FocusRequest) -> GameResponse:
    with _GAMES_LOCK:
        session = _get_session(game_id)
        return _build_game_response(game_id, session, session.move_focus(request.d_row, request.d_col))


@app.post("/games/{game_id}/restart", response_model=GameResponse)
def restart(game_id: str) -> GameResponse:
    with _GAMES_LOCK:
        session = _get_session(game_id)
        return _build_game_response(game_id, session, session.restart())


@app.post("/games/{game_id}/new", response_model=GameResponse)
def new_game(game_id: str) -> GameResponse:
    with _GAMES_LOCK:
        session = _get_session(game_id)
        try:
            transition = session.new_game()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _build_game_response(game_id, session, transition)


def _get_session(game_id: str) -> GameSession:
    session = _GAMES.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _build_game_response(game_id: str, session: GameSession, transition: Optional[Transition] = None) -> GameResponse:
    snapshot = session.snapshot()
    return GameResponse(
        game_id=game_id,
        level=snapshot["level"],
        number=snapshot["number"],
        state=snapshot["state"],
        message=snapshot["message"],
        board=snapshot["board"],
        starting=snapshot["starting"],
        locked=snapshot["locked"],
        focus=snapshot["focus"],
        accepted=transition.accepted if transition is not None else True,
        changed=[list(cell) for cell in transition.changed] if transition is not None else [],
        can_undo=snapshot["can_undo"],
        can_redo=snapshot["can_redo"],
        elapsed_seconds=snapshot["elapsed_seconds"],
        invalid=InvalidUnitsResponse(**snapshot["invalid"]),
    )
