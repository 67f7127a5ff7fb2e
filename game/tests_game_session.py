from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase

from game.ai.board import normalize_board
from game.ai.errors import IllegalCellError, TransportError
from game.services.game_session import (
    AI_WON,
    DRAW,
    ENGINE_FAILURE_NOTICE,
    ERROR,
    HUMAN_WON,
    ONGOING,
    GameSession,
)


def failing_provider(board):
    raise TransportError("connection refused")


def unreachable_provider(board):
    raise ConnectionRefusedError("engine host down")


def garbage_provider(board):
    raise ValueError("Expecting value: line 1 column 1")


class GameSessionTests(SimpleTestCase):
    def setUp(self):
        self.session = GameSession()

    def test_turn_applies_human_and_engine_moves(self):
        turn = self.session.play_turn(1)
        self.assertEqual(turn.status, ONGOING)
        self.assertEqual(turn.ai_cell, 4)
        self.assertEqual(self.session.board[1], "X")
        self.assertEqual(self.session.board[4], "O")
        self.assertEqual(self.session.move_count, 2)
        self.assertFalse(self.session.is_processing)

    def test_occupied_cell_is_refused(self):
        self.session.play_turn(1)
        with self.assertRaises(IllegalCellError):
            self.session.play_turn(4)
        with self.assertRaises(IllegalCellError):
            self.session.play_turn(9)
        self.assertEqual(self.session.move_count, 2)

    def test_engine_failure_rolls_back_human_move(self):
        turn = self.session.play_turn(3, provider=failing_provider)
        self.assertEqual(turn.status, ERROR)
        self.assertEqual(turn.notice, ENGINE_FAILURE_NOTICE)
        self.assertEqual(self.session.board, normalize_board(None))
        self.assertEqual(self.session.move_count, 0)
        self.assertFalse(self.session.is_processing)
        # input is usable again
        self.assertEqual(self.session.play_turn(3).status, ONGOING)

    def test_raw_provider_errors_also_roll_back(self):
        for provider in (unreachable_provider, garbage_provider):
            turn = self.session.play_turn(5, provider=provider)
            self.assertEqual(turn.status, ERROR)
            self.assertEqual(turn.notice, ENGINE_FAILURE_NOTICE)
            self.assertEqual(self.session.board, normalize_board(None))
            self.assertEqual(self.session.move_count, 0)
            self.assertFalse(self.session.is_processing)

    def test_human_win_stops_before_engine(self):
        self.session.board = normalize_board(["X", "X", None, "O", "O", None, None, None, None])
        self.session.move_count = 4
        turn = self.session.play_turn(2, provider=failing_provider)
        self.assertEqual(turn.status, HUMAN_WON)
        self.assertIsNone(turn.ai_cell)
        self.assertEqual(self.session.winner, "X")
        self.assertEqual(self.session.winning_line, [0, 1, 2])
        self.assertTrue(self.session.is_game_over)
        with self.assertRaises(IllegalCellError):
            self.session.play_turn(8)

    def test_engine_win(self):
        self.session.board = normalize_board(["O", "O", None, "X", None, None, "X", None, None])
        self.session.move_count = 4
        turn = self.session.play_turn(8)
        self.assertEqual(turn.status, AI_WON)
        self.assertEqual(turn.ai_cell, 2)
        self.assertEqual(self.session.winner, "O")
        self.assertEqual(turn.analysis.chosen.strategy, "winning_move")

    def test_draw_on_last_human_move(self):
        self.session.board = normalize_board(["X", "O", "X", "X", "O", "O", "O", "X", None])
        self.session.move_count = 8
        turn = self.session.play_turn(8)
        self.assertEqual(turn.status, DRAW)
        self.assertTrue(self.session.is_draw)

    def test_reset(self):
        self.session.play_turn(0)
        self.session.reset()
        self.assertEqual(self.session.board, normalize_board(None))
        self.assertEqual(self.session.move_count, 0)
        self.assertFalse(self.session.is_game_over)

    def test_engine_never_loses_to_straight_line(self):
        for cell in (0, 1, 2, 3, 5, 6, 7, 8):
            if self.session.is_game_over or self.session.board[cell]:
                continue
            self.session.play_turn(cell)
        self.assertNotEqual(self.session.winner, "X")


class PlayQuantumCommandTests(SimpleTestCase):
    def test_analyze_single_board(self):
        out = StringIO()
        call_command("play_quantum", board="O,O,,X,X,,,,", stdout=out)
        output = out.getvalue()
        self.assertIn("O plays 2 (winning_move)", output)
        self.assertIn("block_win", output)
        self.assertIn("Analyzed 5 moves, chose cell 2", output)

    def test_analyze_rejects_bad_board(self):
        with self.assertRaises(CommandError):
            call_command("play_quantum", board="X,O", stdout=StringIO())
        with self.assertRaises(CommandError):
            call_command("play_quantum", board="X,O,X,X,O,O,O,X,X", stdout=StringIO())

    def test_interactive_game(self):
        out, err = StringIO(), StringIO()
        call_command("play_quantum", stdin=StringIO("1\n1\nabc\nq\n"), stdout=out, stderr=err)
        self.assertIn("O plays 4 (center)", out.getvalue())
        self.assertIn("already occupied", err.getvalue())
        self.assertIn("Not a cell number", err.getvalue())
