# game/ai/quantum_engine.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .board import (
    AI,
    BOARD_CELLS,
    CENTER,
    CORNERS,
    EDGES,
    EMPTY,
    HUMAN,
    OPPOSITE_CORNER,
    Board,
    with_move,
)
from .errors import NoLegalMoveError
from .features import N_STATES, QuantumFeatures, extract_features
from .fork_detector import creates_fork
from .win_detector import is_winning_move

logger = logging.getLogger(__name__)

# ==================== Constants & Configuration ====================

# Tier scores: each tier dominates everything below it
WINNING_SCORE = 100_000
BLOCK_WIN_SCORE = 90_000
FORK_BONUS = 5_000
BLOCK_FORK_BONUS = 4_000
CENTER_BONUS = 3_000
OPPOSITE_CORNER_BONUS = 2_500
CORNER_BONUS = 2_000
EDGE_BONUS = 500

# Feature contribution (at most ~140 points, always a tie-breaker)
MAX_ENTROPY = 4
ENTROPY_WEIGHT = 10
PURITY_WEIGHT = 50
DOMINANT_STATE_BONUS = 30
TOP_PROBABILITY_WEIGHT = 20

# Strategy tags
WINNING_MOVE = "winning_move"
BLOCK_WIN = "block_win"
FORK = "fork"
BLOCK_FORK = "block_fork"
CENTER_TAG = "center"
OPPOSITE_CORNER_TAG = "opposite_corner"
CORNER_TAG = "corner"
EDGE_TAG = "edge"
DEFAULT_TAG = "quantum"
INVALID_TAG = "invalid"

MEASURED_TEXT = "Strategic choice based on quantum feature analysis"


# ==================== Result Types ====================


@dataclass
class MoveCandidate:
    cell_index: int
    score: float
    strategy: str = DEFAULT_TAG
    entropy: Optional[float] = None
    purity: Optional[float] = None

    @property
    def is_legal(self) -> bool:
        return self.strategy != INVALID_TAG

    def tag(self, strategy: str) -> None:
        # first tier reached wins; later tiers only label untagged candidates
        if self.strategy == DEFAULT_TAG:
            self.strategy = strategy


@dataclass
class FeatureSummary:
    measured: str
    classical_register: int
    probabilities: List[float]
    entropy: str
    purity: str
    quantum_state: str


@dataclass
class AnalysisResult:
    chosen_cell: int
    ranked_candidates: List[MoveCandidate]
    feature_summary: FeatureSummary
    symbol: str = AI

    @property
    def chosen(self) -> MoveCandidate:
        return self.ranked_candidates[0]


# ==================== Move Scoring ====================


def _feature_contribution(cell_index: int, features: QuantumFeatures) -> float:
    score = (MAX_ENTROPY - features.entropy) * ENTROPY_WEIGHT
    score += features.purity * PURITY_WEIGHT
    if any(state % BOARD_CELLS == cell_index for state, _ in features.dominant_states):
        score += DOMINANT_STATE_BONUS
    score += features.top_probability * TOP_PROBABILITY_WEIGHT
    return score


def _takes_opposite_corner(board: Board, cell_index: int) -> bool:
    corner = OPPOSITE_CORNER.get(cell_index)
    return corner is not None and board[corner] == HUMAN


def score_move(board: Board, cell_index: int) -> MoveCandidate:
    """
    Score one candidate cell for O.

    Ladder (top-down): immediate win, block of an X win, then cumulative
    fork / block-fork / center / opposite-corner / corner bonuses, the
    feature tie-breaker and finally the edge bonus.
    Occupied or out-of-range cells get -inf and the "invalid" tag instead of an exception.
    """
    if not 0 <= cell_index < BOARD_CELLS or board[cell_index] != EMPTY:
        return MoveCandidate(cell_index=cell_index, score=-math.inf, strategy=INVALID_TAG)

    features = extract_features(with_move(board, cell_index, AI))
    candidate = MoveCandidate(
        cell_index=cell_index,
        score=0.0,
        entropy=features.entropy,
        purity=features.purity,
    )

    # 1. Immediate win
    if is_winning_move(board, cell_index, AI):
        candidate.score = WINNING_SCORE
        candidate.strategy = WINNING_MOVE
        return candidate

    # 2. Block opponent's immediate win
    if is_winning_move(board, cell_index, HUMAN):
        candidate.score = BLOCK_WIN_SCORE
        candidate.strategy = BLOCK_WIN
        return candidate

    # 3. Cumulative positional tiers
    if creates_fork(board, cell_index, AI):
        candidate.score += FORK_BONUS
        candidate.tag(FORK)

    if creates_fork(board, cell_index, HUMAN):
        candidate.score += BLOCK_FORK_BONUS
        candidate.tag(BLOCK_FORK)

    if cell_index == CENTER:
        candidate.score += CENTER_BONUS
        candidate.tag(CENTER_TAG)

    if _takes_opposite_corner(board, cell_index):
        candidate.score += OPPOSITE_CORNER_BONUS
        candidate.tag(OPPOSITE_CORNER_TAG)

    if cell_index in CORNERS:
        candidate.score += CORNER_BONUS
        candidate.tag(CORNER_TAG)

    candidate.score += _feature_contribution(cell_index, features)

    if cell_index in EDGES:
        candidate.score += EDGE_BONUS
        candidate.tag(EDGE_TAG)

    return candidate


# ==================== Move Selection ====================


def _summarize(board: Board, chosen: MoveCandidate, analyzed: int) -> FeatureSummary:
    final = extract_features(with_move(board, chosen.cell_index, AI))
    return FeatureSummary(
        measured=MEASURED_TEXT,
        classical_register=chosen.cell_index,
        probabilities=final.probabilities[:N_STATES],
        entropy=f"{final.entropy:.3f}",
        purity=f"{final.purity:.3f}",
        quantum_state=(
            f"Analyzed {analyzed} moves, chose cell {chosen.cell_index} "
            f"(score: {chosen.score:.2f})"
        ),
    )


def select_move(board: Board) -> AnalysisResult:
    """
    Score every empty cell and pick the best one for O.
    Ties keep enumeration order (stable sort), so the same board always
    yields the same choice and the same ranking.
    """
    candidates = [
        score_move(board, cell_index)
        for cell_index in range(BOARD_CELLS)
        if board[cell_index] == EMPTY
    ]
    if not candidates:
        raise NoLegalMoveError("No legal move: board is full")

    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    chosen = ranked[0]

    for c in ranked:
        logger.debug(
            "[QuantumEngine] cell=%d score=%.2f strategy=%s", c.cell_index, c.score, c.strategy
        )
    logger.info(
        "[QuantumEngine] Chose cell %d (%s, score %.2f) among %d moves",
        chosen.cell_index,
        chosen.strategy,
        chosen.score,
        len(ranked),
    )

    return AnalysisResult(
        chosen_cell=chosen.cell_index,
        ranked_candidates=ranked,
        feature_summary=_summarize(board, chosen, len(ranked)),
    )
