import sys

from django.core.management.base import BaseCommand, CommandError

from game.ai.board import normalize_board
from game.ai.errors import EngineError, IllegalCellError
from game.ai.quantum_engine import AnalysisResult, select_move
from game.services.game_session import AI_WON, DRAW, ERROR, HUMAN_WON, GameSession

RESULT_MESSAGES = {
    HUMAN_WON: "X wins! You beat the quantum engine!",
    AI_WON: "O wins! The quantum engine defeated you!",
    DRAW: "Draw! The quantum engine couldn't beat you!",
}


class Command(BaseCommand):
    help = "Play tic-tac-toe against the quantum engine in the terminal (you are X)."

    stealth_options = ("stdin",)

    def add_arguments(self, parser):
        parser.add_argument(
            "--board",
            help='Analyze one board and exit, e.g. "X,,O,,,,,," (9 comma-separated cells).',
        )

    def handle(self, *args, **options):
        if options.get("board") is not None:
            self._analyze_once(options["board"])
            return

        stdin = options.get("stdin", sys.stdin)
        session = GameSession()
        self.stdout.write("Quantum Tic-Tac-Toe. You are X. Cells are numbered 0-8, 'q' quits.")
        self._print_board(session.board)

        for line in stdin:
            choice = line.strip().lower()
            if choice in ("q", "quit", "exit"):
                break
            try:
                index = int(choice)
            except ValueError:
                self.stderr.write(f"Not a cell number: {choice!r}")
                continue

            try:
                turn = session.play_turn(index)
            except IllegalCellError as exc:
                self.stderr.write(str(exc))
                continue

            if turn.status == ERROR:
                self.stderr.write(turn.notice)
                continue
            if turn.analysis is not None:
                self._print_analysis(turn.analysis)
            self._print_board(session.board)

            if turn.status in RESULT_MESSAGES:
                self.stdout.write(self.style.SUCCESS(RESULT_MESSAGES[turn.status]))
                session.reset()
                self.stdout.write("New game! You are X.")
                self._print_board(session.board)

    def _analyze_once(self, raw: str):
        cells = [c.strip().upper() or None for c in raw.split(",")]
        try:
            board = normalize_board(cells)
            result = select_move(board)
        except EngineError as exc:
            raise CommandError(str(exc)) from exc
        self._print_analysis(result)

    def _print_board(self, board):
        for row in range(3):
            cells = [board[row * 3 + col] or str(row * 3 + col) for col in range(3)]
            self.stdout.write(" " + " | ".join(cells))

    def _print_analysis(self, result: AnalysisResult):
        summary = result.feature_summary
        self.stdout.write(
            f"O plays {result.chosen_cell} ({result.chosen.strategy}) "
            f"entropy={summary.entropy} purity={summary.purity}"
        )
        self.stdout.write(f"{'cell':>5} {'strategy':<16} {'score':>10} {'entropy':>8} {'purity':>7}")
        for c in result.ranked_candidates:
            marker = "*" if c.cell_index == result.chosen_cell else " "
            self.stdout.write(
                f"{c.cell_index:>4}{marker} {c.strategy:<16} {c.score:>10.0f} "
                f"{c.entropy:>8.2f} {c.purity:>7.2f}"
            )
        self.stdout.write(summary.quantum_state)
