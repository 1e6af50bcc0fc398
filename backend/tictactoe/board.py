"""
Определение исхода партии по полю 3x3.
Единственное место, где решается, закончена ли игра.
"""
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from .constants import BOARD_CELLS, WIN_LINES, Cell, Symbol


@dataclass(frozen=True)
class Outcome:
    state: Literal["ongoing", "won", "draw"]
    winner_symbol: Symbol | None = None
    line: tuple[int, int, int] | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state != "ongoing"


ONGOING = Outcome("ongoing")
DRAW = Outcome("draw")


def evaluate(board: Sequence[Cell]) -> Outcome:
    """Проверяет 8 линий; ничья, когда все клетки заняты и линии нет."""
    if len(board) != BOARD_CELLS:
        raise ValueError(f"board must have {BOARD_CELLS} cells, got {len(board)}")
    for line in WIN_LINES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return Outcome("won", winner_symbol=board[a], line=line)
    if all(cell is not None for cell in board):
        return DRAW
    return ONGOING
