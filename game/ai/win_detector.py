# game/ai/win_detector.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

from .board import AI, BOARD_CELLS, EMPTY, HUMAN, LINES, Board, with_move


def _in_bounds(cell_index: int) -> bool:
    return 0 <= cell_index < BOARD_CELLS


def has_line(board: Board, symbol: str) -> bool:
    return any(all(board[i] == symbol for i in line) for line in LINES)


def is_winning_move(board: Board, cell_index: int, symbol: str) -> bool:
    """
    True if placing `symbol` at `cell_index` completes a line.
    Occupied or out-of-range cells are simply not winning moves.
    """
    if not _in_bounds(cell_index) or board[cell_index] != EMPTY:
        return False
    return has_line(with_move(board, cell_index, symbol), symbol)


def find_winning_moves(board: Board, symbol: str) -> Set[int]:
    return {i for i in range(BOARD_CELLS) if is_winning_move(board, i, symbol)}


def is_board_full(board: Board) -> bool:
    return all(cell != EMPTY for cell in board)


def find_winning_line(board: Board) -> Optional[List[int]]:
    for line in LINES:
        a, b, c = line
        if board[a] in (HUMAN, AI) and board[a] == board[b] == board[c]:
            return list(line)
    return None


def check_winner(board: Board) -> Optional[str]:
    """Returns "X", "O" or None."""
    line = find_winning_line(board)
    return board[line[0]] if line else None


def check_winner_board(board: Board) -> Dict[str, Any]:
    """
    Terminal check used after every move:
      {"winner": "X"|"O"|None, "winning_line": [i, j, k] or [], "draw": bool}
    """
    line = find_winning_line(board)
    if line:
        return {"winner": board[line[0]], "winning_line": line, "draw": False}
    return {"winner": None, "winning_line": [], "draw": is_board_full(board)}
