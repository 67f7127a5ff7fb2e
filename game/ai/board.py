# game/ai/board.py
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from .errors import InvalidBoardError

Board = List[str]  # "" | "X" | "O", row-major, 9 cells

HUMAN = "X"
AI = "O"
EMPTY = ""

BOARD_CELLS = 9

# 3 rows, 3 columns, 2 diagonals
LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

CENTER = 4
CORNERS = (0, 2, 6, 8)
EDGES = (1, 3, 5, 7)
OPPOSITE_CORNER = {0: 8, 2: 6, 6: 2, 8: 0}


def opponent_of(symbol: str) -> str:
    return HUMAN if symbol == AI else AI


def empty_board() -> Board:
    return [EMPTY] * BOARD_CELLS


def empty_cells(board: Board) -> List[int]:
    return [i for i in range(BOARD_CELLS) if board[i] == EMPTY]


def with_move(board: Board, cell_index: int, symbol: str) -> Board:
    """Copy of `board` with `symbol` placed at `cell_index` (no legality check)."""
    placed = list(board)
    placed[cell_index] = symbol
    return placed


def normalize_board(raw: Optional[Iterable[Any]]) -> Board:
    """
    Turn a wire board (None / "" for empty, "X", "O") into the engine encoding.
    None means "no board sent" and yields an empty board.
    """
    if raw is None:
        return empty_board()
    cells = list(raw)
    if len(cells) != BOARD_CELLS:
        raise InvalidBoardError(f"Board must have {BOARD_CELLS} cells, got {len(cells)}")

    board: Board = []
    for idx, value in enumerate(cells):
        if value in (None, EMPTY):
            board.append(EMPTY)
        elif value in (HUMAN, AI):
            board.append(value)
        else:
            raise InvalidBoardError(f"Cell {idx} has invalid value {value!r}")
    return board


def to_wire(board: Board) -> List[Optional[str]]:
    return [cell or None for cell in board]
