import tempfile
from pathlib import Path

from django.test import SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient


class MoveApiTests(SimpleTestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = "/api/move"

    def test_health(self):
        response = self.client.get("/api/health/", format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"status": "ok"})

    def test_missing_board_plays_on_empty_board(self):
        response = self.client.post(self.url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["chosenCell"], 4)
        self.assertEqual(response.data["symbol"], "O")
        self.assertEqual(len(response.data["moveAnalysis"]), 9)

    def test_null_board_plays_on_empty_board(self):
        response = self.client.post(self.url, {"boardState": None}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["chosenCell"], 4)

    def test_winning_move_response_shape(self):
        board = ["O", "O", None, "X", "X", None, None, None, None]
        response = self.client.post(self.url, {"boardState": board}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        data = response.data
        self.assertEqual(data["chosenCell"], 2)
        best = data["moveAnalysis"][0]
        self.assertEqual(
            set(best.keys()), {"cellIndex", "score", "entropy", "purity", "strategy"}
        )
        self.assertEqual(best["cellIndex"], 2)
        self.assertEqual(best["score"], 100000.0)
        self.assertEqual(best["strategy"], "winning_move")
        self.assertEqual(
            [m["cellIndex"] for m in data["moveAnalysis"]][1], 5
        )

        raw = data["rawQuantumResult"]
        self.assertEqual(
            set(raw.keys()),
            {"measured", "classicalRegister", "probabilities", "entropy", "purity", "quantumState"},
        )
        self.assertEqual(raw["classicalRegister"], 2)
        self.assertEqual(len(raw["probabilities"]), 16)
        self.assertRegex(raw["entropy"], r"^\d+\.\d{3}$")
        self.assertRegex(raw["purity"], r"^\d\.\d{3}$")
        self.assertIn("chose cell 2", raw["quantumState"])

    def test_block_through_api(self):
        board = ["X", "X", None, None, "O", None, None, None, None]
        response = self.client.post(self.url, {"boardState": board}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["chosenCell"], 2)
        self.assertEqual(response.data["moveAnalysis"][0]["strategy"], "block_win")

    def test_empty_strings_count_as_empty(self):
        board = ["", "", "", "", "X", "", "", "", ""]
        response = self.client.post(self.url, {"boardState": board}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(response.data["chosenCell"], (0, 2, 6, 8))

    def test_trailing_slash_is_accepted(self):
        response = self.client.post("/api/move/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_wrong_length_is_rejected(self):
        response = self.client.post(self.url, {"boardState": [None] * 8}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("boardState", response.data)

    def test_unknown_symbol_is_rejected(self):
        board = ["Z", None, None, None, None, None, None, None, None]
        response = self.client.post(self.url, {"boardState": board}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("boardState", response.data)

    def test_full_board_is_a_conflict(self):
        board = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]
        response = self.client.post(self.url, {"boardState": board}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {"detail": "No legal move: board is full"})

    def test_get_is_not_allowed(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)


class FrontendTests(SimpleTestCase):
    def test_unknown_route_serves_default_page(self):
        with tempfile.TemporaryDirectory() as tmp, override_settings(FRONTEND_DIR=tmp):
            response = self.client.get("/some/client/route")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Quantum Tic-Tac-Toe")

    def test_root_serves_default_page(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "/api/move")

    def test_default_page_undoes_whole_turn_on_failure(self):
        response = self.client.get("/")
        self.assertContains(response, "if (aiCell !== null) session.board[aiCell] = null;")
        self.assertContains(response, "session.board[index] = null;")

    def test_existing_asset_is_served(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "script.js").write_text("console.log('hi');")
            with override_settings(FRONTEND_DIR=tmp):
                response = self.client.get("/script.js")
                body = b"".join(response.streaming_content)
                response.close()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(body, b"console.log('hi');")
        self.assertIn("javascript", response["Content-Type"])
