# game/ai/fork_detector.py
from __future__ import annotations

from .board import BOARD_CELLS, EMPTY, LINES, Board, with_move


def count_threats(board: Board, symbol: str) -> int:
    """Number of lines holding exactly two `symbol` and one empty cell."""
    threats = 0
    for line in LINES:
        mine = sum(1 for i in line if board[i] == symbol)
        empty = sum(1 for i in line if board[i] == EMPTY)
        if mine == 2 and empty == 1:
            threats += 1
    return threats


def creates_fork(board: Board, cell_index: int, symbol: str) -> bool:
    """
    One-ply fork check: does placing `symbol` here open two or more threats
    at once? Deeper forced sequences are not looked at.
    """
    if not 0 <= cell_index < BOARD_CELLS or board[cell_index] != EMPTY:
        return False
    return count_threats(with_move(board, cell_index, symbol), symbol) >= 2
