"""Константы игрового поля."""
from typing import Literal

Symbol = Literal["X", "O"]
Cell = Symbol | None

BOARD_CELLS = 9

# 3 строки, 3 столбца, 2 диагонали
WIN_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

SYMBOLS: tuple[Symbol, Symbol] = ("X", "O")

DEFAULT_MAX_NAME_LENGTH = 20
