import itertools

import pytest

from tictactoe.board import evaluate
from tictactoe.constants import WIN_LINES


def test_empty_board_is_ongoing():
    assert evaluate([None] * 9).state == "ongoing"


def test_top_row_win():
    outcome = evaluate(["X", "X", "X", "O", "O", None, None, None, None])
    assert outcome.state == "won"
    assert outcome.winner_symbol == "X"
    assert outcome.line == (0, 1, 2)
    assert outcome.is_terminal


def test_anti_diagonal_win_for_o():
    outcome = evaluate(["X", "X", "O", None, "O", "X", "O", None, None])
    assert outcome.state == "won"
    assert outcome.winner_symbol == "O"
    assert outcome.line == (2, 4, 6)


def test_full_board_without_line_is_draw():
    outcome = evaluate(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    assert outcome.state == "draw"
    assert outcome.winner_symbol is None
    assert outcome.line is None


def test_win_on_last_cell_is_not_a_draw():
    outcome = evaluate(["X", "O", "X", "O", "X", "O", "O", "X", "X"])
    assert outcome.state == "won"
    assert outcome.line == (0, 4, 8)


def test_rejects_wrong_board_size():
    with pytest.raises(ValueError):
        evaluate([None] * 8)


def test_every_board_has_consistent_outcome():
    for cells in itertools.product((None, "X", "O"), repeat=9):
        board = list(cells)
        outcome = evaluate(board)
        has_line = any(board[a] is not None and board[a] == board[b] == board[c] for a, b, c in WIN_LINES)
        if outcome.state == "won":
            a, b, c = outcome.line
            assert board[a] == board[b] == board[c] == outcome.winner_symbol
        elif outcome.state == "draw":
            assert None not in board
            assert not has_line
        else:
            assert outcome.state == "ongoing"
            assert None in board
            assert not has_line
