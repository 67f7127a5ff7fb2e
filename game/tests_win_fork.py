from django.test import SimpleTestCase

from game.ai.board import AI, HUMAN, LINES, normalize_board
from game.ai.fork_detector import count_threats, creates_fork
from game.ai.win_detector import (
    check_winner,
    check_winner_board,
    find_winning_moves,
    is_board_full,
    is_winning_move,
)


def swap_labels(board):
    swap = {HUMAN: AI, AI: HUMAN}
    return [swap.get(cell, cell) for cell in board]


class WinDetectorTests(SimpleTestCase):
    def setUp(self):
        self.board = normalize_board(["O", "O", None, "X", "X", None, None, None, None])

    def test_completing_a_row_is_winning(self):
        self.assertTrue(is_winning_move(self.board, 2, AI))
        self.assertTrue(is_winning_move(self.board, 5, HUMAN))

    def test_non_completing_cell_is_not_winning(self):
        self.assertFalse(is_winning_move(self.board, 8, AI))
        self.assertFalse(is_winning_move(self.board, 2, HUMAN))

    def test_occupied_cell_reports_false_without_error(self):
        self.assertFalse(is_winning_move(self.board, 0, AI))
        self.assertFalse(is_winning_move(self.board, 4, HUMAN))

    def test_out_of_range_cell_reports_false(self):
        self.assertFalse(is_winning_move(self.board, 9, AI))
        self.assertFalse(is_winning_move(self.board, -1, AI))

    def test_find_winning_moves(self):
        self.assertEqual(find_winning_moves(self.board, AI), {2})
        self.assertEqual(find_winning_moves(self.board, HUMAN), {5})
        self.assertEqual(find_winning_moves(normalize_board(None), AI), set())

    def test_double_threat_lists_both_cells(self):
        board = normalize_board(["X", None, "X", None, None, None, "X", None, None])
        self.assertEqual(find_winning_moves(board, HUMAN), {1, 3, 4})

    def test_diagonal_and_column_wins(self):
        diag = normalize_board(["O", None, None, None, "O", None, None, None, None])
        self.assertTrue(is_winning_move(diag, 8, AI))
        col = normalize_board([None, "X", None, None, "X", None, None, None, None])
        self.assertTrue(is_winning_move(col, 7, HUMAN))

    def test_symmetric_under_relabeling(self):
        boards = [
            self.board,
            normalize_board(["X", "O", "X", None, "O", None, None, None, None]),
            normalize_board([None, "X", "O", "O", "X", None, "X", None, None]),
        ]
        for board in boards:
            swapped = swap_labels(board)
            for cell in range(9):
                for symbol, other in ((AI, HUMAN), (HUMAN, AI)):
                    self.assertEqual(
                        is_winning_move(board, cell, symbol),
                        is_winning_move(swapped, cell, other),
                    )

    def test_check_winner_and_terminal_payload(self):
        won = normalize_board(["X", "X", "X", "O", "O", None, None, None, None])
        self.assertEqual(check_winner(won), HUMAN)
        self.assertEqual(
            check_winner_board(won),
            {"winner": "X", "winning_line": [0, 1, 2], "draw": False},
        )

        draw = normalize_board(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
        self.assertIsNone(check_winner(draw))
        self.assertTrue(is_board_full(draw))
        self.assertEqual(check_winner_board(draw), {"winner": None, "winning_line": [], "draw": True})

        self.assertEqual(
            check_winner_board(normalize_board(None)),
            {"winner": None, "winning_line": [], "draw": False},
        )

    def test_eight_lines(self):
        self.assertEqual(len(LINES), 8)
        self.assertEqual(len({tuple(sorted(line)) for line in LINES}), 8)


class ForkDetectorTests(SimpleTestCase):
    def setUp(self):
        # X on opposite corners, O in the center
        self.board = normalize_board(["X", None, None, None, "O", None, None, None, "X"])

    def test_fork_cells_for_x(self):
        self.assertTrue(creates_fork(self.board, 2, HUMAN))
        self.assertTrue(creates_fork(self.board, 6, HUMAN))

    def test_single_threat_is_not_a_fork(self):
        self.assertFalse(creates_fork(self.board, 1, AI))
        self.assertFalse(creates_fork(self.board, 1, HUMAN))

    def test_occupied_cell_is_not_a_fork(self):
        self.assertFalse(creates_fork(self.board, 4, HUMAN))

    def test_count_threats(self):
        self.assertEqual(count_threats(normalize_board(None), AI), 0)
        board = normalize_board(["X", None, "X", None, None, None, "X", None, "X"])
        self.assertEqual(count_threats(board, HUMAN), 6)

    def test_blocked_line_is_not_a_threat(self):
        board = normalize_board(["O", "O", "X", None, None, None, None, None, None])
        self.assertEqual(count_threats(board, AI), 0)

    def test_fork_matches_threat_count_everywhere(self):
        boards = [
            self.board,
            normalize_board(["O", None, None, None, "X", None, None, None, "O"]),
            normalize_board(["X", "O", None, None, "X", None, None, None, "O"]),
        ]
        for board in boards:
            for cell in range(9):
                if board[cell]:
                    continue
                for symbol in (AI, HUMAN):
                    placed = list(board)
                    placed[cell] = symbol
                    self.assertEqual(
                        creates_fork(board, cell, symbol),
                        count_threats(placed, symbol) >= 2,
                    )
