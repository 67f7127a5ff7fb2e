"""
Game session for one human (X) vs engine (O) game.

Holds the board and turn state that the browser keeps on its side and
funnels every change through a few mutation points: apply_move, rollback,
reset and play_turn.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from game.ai.board import AI, BOARD_CELLS, EMPTY, HUMAN, Board, empty_board
from game.ai.errors import EngineError, IllegalCellError
from game.ai.quantum_engine import AnalysisResult, select_move
from game.ai.win_detector import check_winner_board

logger = logging.getLogger(__name__)

MoveProvider = Callable[[Board], AnalysisResult]

ONGOING = "ongoing"
HUMAN_WON = "human_won"
AI_WON = "ai_won"
DRAW = "draw"
ERROR = "error"

ENGINE_FAILURE_NOTICE = "Quantum engine unavailable, your move was undone. Try again."


@dataclass
class TurnResult:
    status: str
    ai_cell: Optional[int] = None
    analysis: Optional[AnalysisResult] = None
    notice: Optional[str] = None


@dataclass
class GameSession:
    """
    Tracks:
    - the 9-cell board
    - how many moves were played
    - whether the engine is thinking (input locked)
    - game result (winner, draw)
    """
    board: Board = field(default_factory=empty_board)
    move_count: int = 0
    is_processing: bool = False
    winner: Optional[str] = None
    winning_line: List[int] = field(default_factory=list)
    is_draw: bool = False

    @property
    def is_game_over(self) -> bool:
        return self.winner is not None or self.is_draw

    def apply_move(self, index: int, symbol: str) -> None:
        if self.is_game_over:
            raise IllegalCellError("Game is already over")
        if not 0 <= index < BOARD_CELLS:
            raise IllegalCellError(f"Invalid position {index}. Must be 0-8.")
        if self.board[index] != EMPTY:
            raise IllegalCellError(f"Cell {index} is already occupied by {self.board[index]}")
        self.board[index] = symbol
        self.move_count += 1

    def rollback(self, index: int) -> None:
        """Undo the move at `index` (used when the engine call fails)."""
        if self.board[index] == EMPTY:
            return
        self.board[index] = EMPTY
        self.move_count -= 1
        self.winner = None
        self.winning_line = []
        self.is_draw = False

    def reset(self) -> None:
        self.board = empty_board()
        self.move_count = 0
        self.is_processing = False
        self.winner = None
        self.winning_line = []
        self.is_draw = False

    def _update_result(self) -> str:
        result = check_winner_board(self.board)
        self.winner = result["winner"]
        self.winning_line = result["winning_line"]
        self.is_draw = result["draw"]
        if self.winner == HUMAN:
            return HUMAN_WON
        if self.winner == AI:
            return AI_WON
        if self.is_draw:
            return DRAW
        return ONGOING

    def play_turn(self, index: int, provider: MoveProvider = select_move) -> TurnResult:
        """
        Human plays X at `index`, then (unless the game ended) the engine
        answers with O. If the engine fails the human move is rolled back
        so the board is exactly as before the click.
        """
        if self.is_processing:
            raise IllegalCellError("Engine is still thinking")

        self.apply_move(index, HUMAN)
        status = self._update_result()
        if status != ONGOING:
            return TurnResult(status=status)

        self.is_processing = True
        try:
            analysis = provider(list(self.board))
            self.apply_move(analysis.chosen_cell, AI)
        except (EngineError, OSError, ValueError) as exc:
            logger.warning("[GameSession] Engine failed on move %d: %s", index, exc)
            self.rollback(index)
            return TurnResult(status=ERROR, notice=ENGINE_FAILURE_NOTICE)
        finally:
            self.is_processing = False

        status = self._update_result()
        return TurnResult(status=status, ai_cell=analysis.chosen_cell, analysis=analysis)
