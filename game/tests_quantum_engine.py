import math

from django.test import SimpleTestCase

from game.ai.board import AI, CORNERS, EDGES, EMPTY, HUMAN, empty_board, normalize_board
from game.ai.errors import NoLegalMoveError
from game.ai.features import N_STATES, extract_features
from game.ai.quantum_engine import (
    BLOCK_FORK_BONUS,
    BLOCK_WIN_SCORE,
    CENTER_BONUS,
    CORNER_BONUS,
    EDGE_BONUS,
    FORK_BONUS,
    OPPOSITE_CORNER_BONUS,
    WINNING_SCORE,
    _feature_contribution,
    score_move,
    select_move,
)
from game.ai.win_detector import check_winner, find_winning_moves


def positions_with_o_to_move():
    """Every reachable, unfinished position where O (the engine) is on move."""
    seen = set()
    found = []

    def walk(board, to_move):
        key = tuple(board)
        if key in seen:
            return
        seen.add(key)
        if check_winner(board) or EMPTY not in board:
            return
        if to_move == AI:
            found.append(list(board))
        for i in range(9):
            if board[i] == EMPTY:
                board[i] = to_move
                walk(board, AI if to_move == HUMAN else HUMAN)
                board[i] = EMPTY

    walk(empty_board(), HUMAN)
    return found


class FeatureTransformTests(SimpleTestCase):
    def test_empty_board_distribution(self):
        features = extract_features(empty_board())
        self.assertEqual(len(features.probabilities), N_STATES)
        self.assertAlmostEqual(features.probabilities[0], 0.5)
        self.assertAlmostEqual(features.probabilities[8], 0.5)
        self.assertAlmostEqual(features.entropy, 1.0)
        self.assertAlmostEqual(features.purity, 0.5)
        self.assertEqual({s for s, _ in features.dominant_states[:2]}, {0, 8})

    def test_bounds_hold_for_many_boards(self):
        boards = [
            empty_board(),
            normalize_board(["X", None, None, None, None, None, None, None, None]),
            normalize_board(["X", "O", "X", "O", "X", "O", "O", "X", None]),
            normalize_board(["O", "O", "O", "O", "O", "O", "O", "O", "O"]),
            normalize_board(["X", "O", None, None, "X", None, "O", None, None]),
        ]
        for board in boards:
            features = extract_features(board)
            self.assertGreaterEqual(features.entropy, 0.0)
            self.assertLessEqual(features.entropy, 4.0 + 1e-9)
            self.assertGreaterEqual(features.purity, 0.0)
            self.assertLessEqual(features.purity, 1.0)
            self.assertAlmostEqual(sum(features.probabilities), 1.0)
            self.assertEqual(len(features.dominant_states), 3)
            probs = [p for _, p in features.dominant_states]
            self.assertEqual(probs, sorted(probs, reverse=True))

    def test_reproducible(self):
        board = normalize_board(["X", None, "O", None, "X", None, None, None, None])
        self.assertEqual(extract_features(board), extract_features(list(board)))

    def test_board_sensitive(self):
        one_x = normalize_board(["X", None, None, None, None, None, None, None, None])
        self.assertNotEqual(
            extract_features(empty_board()).probabilities,
            extract_features(one_x).probabilities,
        )

    def test_feature_contribution_stays_small(self):
        for cell in range(9):
            features = extract_features(normalize_board(["O" if i == cell else None for i in range(9)]))
            contribution = _feature_contribution(cell, features)
            self.assertGreaterEqual(contribution, 0.0)
            self.assertLessEqual(contribution, 140.0 + 1e-9)


class MoveScorerTests(SimpleTestCase):
    def test_tier_gaps(self):
        positional_max = (
            FORK_BONUS + BLOCK_FORK_BONUS + CENTER_BONUS + OPPOSITE_CORNER_BONUS
            + CORNER_BONUS + EDGE_BONUS + 140
        )
        self.assertLess(positional_max, BLOCK_WIN_SCORE)
        self.assertLess(BLOCK_WIN_SCORE, WINNING_SCORE)

    def test_occupied_cell_is_invalid(self):
        board = normalize_board(["X", None, None, None, None, None, None, None, None])
        candidate = score_move(board, 0)
        self.assertEqual(candidate.score, -math.inf)
        self.assertEqual(candidate.strategy, "invalid")
        self.assertIsNone(candidate.entropy)
        self.assertIsNone(candidate.purity)
        self.assertFalse(candidate.is_legal)

    def test_out_of_range_cell_is_invalid(self):
        board = empty_board()
        for cell in (-1, 9):
            candidate = score_move(board, cell)
            self.assertEqual(candidate.cell_index, cell)
            self.assertEqual(candidate.score, -math.inf)
            self.assertEqual(candidate.strategy, "invalid")
            self.assertFalse(candidate.is_legal)

    def test_winning_move(self):
        board = normalize_board(["O", "O", None, "X", "X", None, None, None, None])
        candidate = score_move(board, 2)
        self.assertEqual(candidate.score, WINNING_SCORE)
        self.assertEqual(candidate.strategy, "winning_move")
        self.assertIsNotNone(candidate.entropy)
        self.assertIsNotNone(candidate.purity)

    def test_block_win(self):
        board = normalize_board(["O", "O", None, "X", "X", None, None, None, None])
        candidate = score_move(board, 5)
        self.assertEqual(candidate.score, BLOCK_WIN_SCORE)
        self.assertEqual(candidate.strategy, "block_win")

    def test_fork_tag_keeps_priority_over_corner(self):
        board = normalize_board(["O", None, None, None, "X", None, None, None, "O"])
        candidate = score_move(board, 2)
        self.assertEqual(candidate.strategy, "fork")
        self.assertGreaterEqual(candidate.score, FORK_BONUS + CORNER_BONUS)

    def test_block_fork(self):
        board = normalize_board(["X", None, None, None, "O", None, None, None, "X"])
        candidate = score_move(board, 2)
        self.assertEqual(candidate.strategy, "block_fork")
        self.assertGreaterEqual(candidate.score, BLOCK_FORK_BONUS + CORNER_BONUS)
        self.assertLess(candidate.score, BLOCK_FORK_BONUS + CORNER_BONUS + 141)

    def test_opposite_corner(self):
        board = normalize_board(["X", None, None, None, None, None, None, None, None])
        candidate = score_move(board, 8)
        self.assertEqual(candidate.strategy, "opposite_corner")
        self.assertGreaterEqual(candidate.score, OPPOSITE_CORNER_BONUS + CORNER_BONUS)

    def test_center_corner_edge_on_empty_board(self):
        board = empty_board()
        self.assertEqual(score_move(board, 4).strategy, "center")
        for cell in CORNERS:
            candidate = score_move(board, cell)
            self.assertEqual(candidate.strategy, "corner")
            self.assertGreaterEqual(candidate.score, CORNER_BONUS)
            self.assertLess(candidate.score, CENTER_BONUS)
        for cell in EDGES:
            candidate = score_move(board, cell)
            self.assertEqual(candidate.strategy, "edge")
            self.assertGreaterEqual(candidate.score, EDGE_BONUS)
            self.assertLess(candidate.score, CORNER_BONUS)


class MoveSelectorTests(SimpleTestCase):
    def test_empty_board_takes_center(self):
        result = select_move(empty_board())
        self.assertEqual(result.chosen_cell, 4)
        self.assertEqual(result.chosen.strategy, "center")
        self.assertEqual(len(result.ranked_candidates), 9)
        self.assertEqual(result.symbol, "O")

    def test_takes_the_win(self):
        board = normalize_board(["O", "O", None, "X", "X", None, None, None, None])
        result = select_move(board)
        self.assertEqual(result.chosen_cell, 2)
        self.assertEqual(result.chosen.score, WINNING_SCORE)
        # the block is still ranked, just below the win
        self.assertEqual(result.ranked_candidates[1].cell_index, 5)
        self.assertEqual(result.ranked_candidates[1].strategy, "block_win")

    def test_blocks_the_opponent(self):
        board = normalize_board(["X", "X", None, None, "O", None, None, None, None])
        result = select_move(board)
        self.assertEqual(result.chosen_cell, 2)
        self.assertEqual(result.chosen.score, BLOCK_WIN_SCORE)
        self.assertEqual(result.chosen.strategy, "block_win")

    def test_answers_center_with_a_corner(self):
        board = normalize_board([None, None, None, None, "X", None, None, None, None])
        result = select_move(board)
        self.assertIn(result.chosen_cell, CORNERS)
        self.assertEqual(result.chosen.strategy, "corner")
        self.assertGreaterEqual(result.chosen.score, CORNER_BONUS)

    def test_tied_candidates_keep_board_order(self):
        board = normalize_board([None, None, None, None, "X", None, None, None, None])
        result = select_move(board)
        self.assertEqual(result.chosen_cell, 0)
        top = result.ranked_candidates[:3]
        self.assertEqual([c.cell_index for c in top], [0, 6, 8])
        self.assertEqual(len({c.score for c in top}), 1)

    def test_opposite_corner_beats_center(self):
        board = normalize_board(["X", None, None, None, None, None, None, None, None])
        self.assertEqual(select_move(board).chosen_cell, 8)

    def test_one_ply_fork_block_is_kept(self):
        board = normalize_board(["X", None, None, None, "O", None, None, None, "X"])
        result = select_move(board)
        self.assertIn(result.chosen_cell, (2, 6))
        self.assertEqual(result.chosen.strategy, "block_fork")

    def test_full_board_raises(self):
        board = normalize_board(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
        with self.assertRaises(NoLegalMoveError):
            select_move(board)

    def test_ranking_is_sorted_and_only_empty_cells(self):
        board = normalize_board(["X", None, "O", None, "X", None, None, None, None])
        result = select_move(board)
        scores = [c.score for c in result.ranked_candidates]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual(
            sorted(c.cell_index for c in result.ranked_candidates),
            [i for i in range(9) if board[i] == EMPTY],
        )

    def test_idempotent(self):
        board = normalize_board([None, "X", None, None, "O", None, "X", None, None])
        first = select_move(board)
        second = select_move(list(board))
        self.assertEqual(first.chosen_cell, second.chosen_cell)
        self.assertEqual(
            [(c.cell_index, c.score, c.strategy) for c in first.ranked_candidates],
            [(c.cell_index, c.score, c.strategy) for c in second.ranked_candidates],
        )

    def test_does_not_mutate_board(self):
        board = normalize_board(["X", None, None, None, None, None, None, None, None])
        snapshot = list(board)
        select_move(board)
        self.assertEqual(board, snapshot)

    def test_feature_summary(self):
        result = select_move(empty_board())
        summary = result.feature_summary
        self.assertEqual(summary.classical_register, 4)
        self.assertEqual(len(summary.probabilities), 16)
        self.assertRegex(summary.entropy, r"^\d+\.\d{3}$")
        self.assertRegex(summary.purity, r"^\d\.\d{3}$")
        self.assertTrue(summary.quantum_state.startswith("Analyzed 9 moves, chose cell 4 (score: "))

    def test_win_then_block_priority_on_every_reachable_position(self):
        for board in positions_with_o_to_move():
            wins = find_winning_moves(board, AI)
            blocks = find_winning_moves(board, HUMAN)
            if not wins and not blocks:
                continue
            result = select_move(board)
            if wins:
                self.assertIn(result.chosen_cell, wins, board)
                self.assertEqual(result.chosen.score, WINNING_SCORE)
            elif blocks:
                self.assertIn(result.chosen_cell, blocks, board)
                self.assertEqual(result.chosen.score, BLOCK_WIN_SCORE)
