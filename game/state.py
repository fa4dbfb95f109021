from enum import Enum


class BoardState(str, Enum):
    OK = "ok"
    INVALID_PLACEMENT = "invalid_placement"
    INVALID_BOARD = "invalid_board"
    WON = "won"
    CHECKED = "checked"
    CHECK_FAILED = "check_failed"
    HINTED = "hinted"
    HINT_FIXED = "hint_fixed"


MESSAGES: dict[BoardState, str] = {
    BoardState.OK: "",
    BoardState.INVALID_PLACEMENT: "Oops! That number can't go there. Use 'u' to undo moves.",
    BoardState.INVALID_BOARD: "Oops! There's still a problem somewhere. Use 'u' to undo moves.",
    BoardState.WON: "Congratulations! You solved the puzzle!",
    BoardState.CHECKED: "So far, so good...",
    BoardState.CHECK_FAILED: "Oops! You've made a mistake somewhere. Use 'u' to undo moves or 'h' to fix.",
    BoardState.HINTED: "Hope that helps!",
    BoardState.HINT_FIXED: "Any mistakes are now fixed!",
}


def message_for(state: BoardState) -> str:
    return MESSAGES[state]
