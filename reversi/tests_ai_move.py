import random
import threading
import time
from unittest.mock import PropertyMock, patch

from django.apps import apps
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from reversi.ai.ai_router import MoveOrchestrator
from reversi.ai.engines.base import Cell, Text
from reversi.serializers import MoveRequestSerializer
from reversi.tests_ai_router import FakeReasoningClient

URL = "/api/ai-move"

OPENING_MOVES = [
    {"row": 2, "col": 3},
    {"row": 3, "col": 2},
    {"row": 4, "col": 5},
    {"row": 5, "col": 4},
]


def opening_board():
    board = [[0] * 8 for _ in range(8)]
    board[3][3] = board[4][4] = 2
    board[3][4] = board[4][3] = 1
    return board


def payload(**overrides):
    body = {
        "board": opening_board(),
        "difficulty": "easy",
        "validMoves": OPENING_MOVES,
        "currentPlayer": 1,
    }
    body.update(overrides)
    return body


class AIMoveViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def _orchestrator(self, **client_kwargs):
        return MoveOrchestrator(FakeReasoningClient(**client_kwargs), random.Random(7))

    def test_easy_opening_returns_listed_move(self):
        with patch("reversi.views.get_orchestrator", return_value=self._orchestrator(configured=False)):
            for _ in range(20):
                response = self.client.post(URL, payload(), format="json")
                self.assertEqual(response.status_code, status.HTTP_200_OK)
                self.assertIn(response.data["move"], OPENING_MOVES)
                self.assertIn(
                    response.data["source"],
                    {"heuristic", "ai", "fallback", "error-fallback"},
                )
                self.assertIsInstance(response.data["reasoning"], str)

    @patch("reversi.views.get_orchestrator")
    def test_ai_answer(self, mock_get):
        raw = '{"row": 3, "col": 2, "reasoning": "keeps mobility"}'
        mock_get.return_value = self._orchestrator(outcome=Text(raw))

        response = self.client.post(URL, payload(difficulty="hard"), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data,
            {"move": {"row": 3, "col": 2}, "reasoning": raw, "source": "ai"},
        )

    @patch("reversi.views.get_orchestrator")
    def test_non_json_answer_is_fallback(self, mock_get):
        mock_get.return_value = self._orchestrator(outcome=Text("Playing c4 feels right."))

        response = self.client.post(URL, payload(difficulty="medium"), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["source"], "fallback")
        self.assertIn(response.data["move"], OPENING_MOVES)

    @patch("reversi.views.get_orchestrator")
    def test_client_error_is_error_fallback(self, mock_get):
        mock_get.return_value = self._orchestrator(error=ConnectionError("reset by peer"))

        response = self.client.post(URL, payload(difficulty="medium"), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["source"], "error-fallback")
        self.assertIn(response.data["move"], OPENING_MOVES)

    def test_empty_valid_moves_is_400(self):
        response = self.client.post(URL, payload(validMoves=[]), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {"error": "Invalid request: missing board or validMoves"})

    def test_missing_board_is_400(self):
        body = payload()
        del body["board"]
        response = self.client.post(URL, body, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("error", response.data)

    def test_malformed_json_is_400(self):
        response = self.client.post(URL, "{not json", content_type="application/json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("error", response.data)

    def test_bad_board_shape_is_400(self):
        response = self.client.post(URL, payload(board=[[0] * 8] * 7), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data["error"].startswith("Invalid request: board"))

    def test_move_off_board_is_400(self):
        response = self.client.post(URL, payload(validMoves=[{"row": 8, "col": 0}]), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("validMoves", response.data["error"])

    def test_bad_player_is_400(self):
        response = self.client.post(URL, payload(currentPlayer=3), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @patch("reversi.views.get_orchestrator")
    def test_unknown_difficulty_treated_as_medium(self, mock_get):
        fake = FakeReasoningClient(outcome=Text('{"row": 2, "col": 3}'))
        mock_get.return_value = MoveOrchestrator(fake, random.Random(7))

        response = self.client.post(URL, payload(difficulty="nightmare"), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(fake.calls[0][1].value, "medium")

    @patch("reversi.views.get_orchestrator", side_effect=RuntimeError("bootstrap failed"))
    def test_unexpected_failure_with_moves_is_error_fallback(self, mock_get):
        response = self.client.post(URL, payload(difficulty="hard"), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["source"], "error-fallback")
        self.assertIn(response.data["move"], OPENING_MOVES)

    def test_unexpected_failure_without_moves_is_500(self):
        with patch.object(
            MoveRequestSerializer,
            "validated_data",
            new_callable=PropertyMock,
            return_value={"validMoves": []},
        ):
            response = self.client.post(URL, payload(difficulty="hard"), format="json")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["error"], "AI service unavailable")
        self.assertIn("details", response.data)

    def test_health(self):
        response = self.client.get("/api/health/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"status": "ok"})


class OrchestratorBootstrapTests(TestCase):
    def setUp(self):
        self.config = apps.get_app_config("reversi")
        self._saved = self.config._orchestrator
        self.config._orchestrator = None

    def tearDown(self):
        self.config._orchestrator = self._saved

    @override_settings(GOOGLE_API_KEY="")
    def test_single_instance_without_credential(self):
        first = self.config.get_orchestrator()
        second = self.config.get_orchestrator()

        self.assertIs(first, second)
        self.assertFalse(first._client.configured())

    @override_settings(GOOGLE_API_KEY="")
    def test_default_orchestrator_serves_heuristic(self):
        client = APIClient()
        response = client.post(URL, payload(difficulty="hard"), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["source"], "heuristic")
        self.assertIn(response.data["move"], OPENING_MOVES)

    def test_concurrent_first_calls_build_one_client(self):
        workers = 8
        barrier = threading.Barrier(workers)
        results = []

        def slow_client(config):
            time.sleep(0.05)
            return FakeReasoningClient(configured=False)

        def worker():
            barrier.wait()
            results.append(self.config.get_orchestrator())

        with patch(
            "reversi.ai.engines.gemini_engine.GeminiReasoningClient",
            side_effect=slow_client,
        ) as mock_client_cls:
            threads = [threading.Thread(target=worker) for _ in range(workers)]
            for t in threads:
                t.start()
            for t in threads:
                t.join(timeout=5)

        self.assertEqual(mock_client_cls.call_count, 1)
        self.assertEqual(len(results), workers)
        self.assertTrue(all(r is results[0] for r in results))


class MoveRequestSerializerTests(TestCase):
    def test_valid_moves_become_cells(self):
        ser = MoveRequestSerializer(data=payload(difficulty="hard", currentPlayer=2))
        self.assertTrue(ser.is_valid(), ser.errors)

        move_request = ser.to_move_request()

        self.assertEqual(move_request.valid_moves[0], Cell(2, 3))
        self.assertTrue(all(isinstance(m, Cell) for m in move_request.valid_moves))
        self.assertEqual(move_request.difficulty.value, "hard")
        self.assertEqual(move_request.current_player.value, 2)
