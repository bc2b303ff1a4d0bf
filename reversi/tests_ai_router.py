import random
from unittest.mock import patch

from django.test import SimpleTestCase

from reversi.ai.ai_router import (
    REASONING_API_ERROR,
    REASONING_INVALID_AI,
    REASONING_SHORTCUT,
    REASONING_UNCONFIGURED,
    MoveOrchestrator,
    MoveRequest,
)
from reversi.ai.board_codec import decode_board
from reversi.ai.difficulty import Difficulty
from reversi.ai.engines.base import (
    Cell,
    CellState,
    InvalidMoveRequest,
    MoveSource,
    Text,
    Unavailable,
)

OPENING_MOVES = (Cell(2, 3), Cell(3, 2), Cell(4, 5), Cell(5, 4))


def opening_board():
    raw = [[0] * 8 for _ in range(8)]
    raw[3][3] = raw[4][4] = 2
    raw[3][4] = raw[4][3] = 1
    return decode_board(raw)


class FakeReasoningClient:
    def __init__(self, outcome=None, error=None, configured=True):
        self.outcome = outcome
        self.error = error
        self._configured = configured
        self.calls = []

    def configured(self):
        return self._configured

    def ask(self, prompt, difficulty):
        self.calls.append((prompt, difficulty))
        if self.error is not None:
            raise self.error
        return self.outcome


def make_request(difficulty=Difficulty.MEDIUM, moves=OPENING_MOVES):
    return MoveRequest(
        board=opening_board(),
        difficulty=difficulty,
        valid_moves=tuple(moves),
        current_player=CellState.BLACK,
    )


class MoveOrchestratorTests(SimpleTestCase):
    def test_ai_move_accepted(self):
        raw = '{"row": 4, "col": 5, "reasoning": "opens the diagonal"}'
        client = FakeReasoningClient(outcome=Text(raw))

        result = MoveOrchestrator(client, random.Random(1)).pick_move(make_request())

        self.assertEqual(result.source, MoveSource.AI)
        self.assertEqual(result.move, Cell(4, 5))
        self.assertEqual(result.reasoning, raw)
        prompt, difficulty = client.calls[0]
        self.assertIs(difficulty, Difficulty.MEDIUM)
        self.assertIn("Valid moves for your turn: (2, 3), (3, 2), (4, 5), (5, 4)", prompt)

    def test_non_json_text_falls_back(self):
        client = FakeReasoningClient(outcome=Text("I'd go with d3, it looks solid."))

        result = MoveOrchestrator(client, random.Random(1)).pick_move(make_request())

        self.assertEqual(result.source, MoveSource.FALLBACK)
        self.assertEqual(result.reasoning, REASONING_INVALID_AI)
        self.assertIn(result.move, OPENING_MOVES)

    def test_illegal_ai_move_falls_back(self):
        client = FakeReasoningClient(outcome=Text('{"row": 0, "col": 0}'))

        result = MoveOrchestrator(client, random.Random(1)).pick_move(make_request())

        self.assertEqual(result.source, MoveSource.FALLBACK)
        self.assertIn(result.move, OPENING_MOVES)

    def test_unavailable_is_error_fallback(self):
        client = FakeReasoningClient(outcome=Unavailable("DeadlineExceeded"))

        result = MoveOrchestrator(client, random.Random(1)).pick_move(make_request(Difficulty.HARD))

        self.assertEqual(result.source, MoveSource.ERROR_FALLBACK)
        self.assertEqual(result.reasoning, REASONING_API_ERROR)
        self.assertIn(result.move, OPENING_MOVES)

    def test_client_exception_is_error_fallback(self):
        client = FakeReasoningClient(error=RuntimeError("socket closed"))

        with self.assertLogs("reversi.ai.ai_router", level="ERROR"):
            result = MoveOrchestrator(client, random.Random(1)).pick_move(make_request())

        self.assertEqual(result.source, MoveSource.ERROR_FALLBACK)
        self.assertIn(result.move, OPENING_MOVES)

    def test_unconfigured_client_uses_heuristic(self):
        client = FakeReasoningClient(configured=False)
        moves = (Cell(2, 3), Cell(0, 7))

        result = MoveOrchestrator(client, random.Random(1)).pick_move(make_request(moves=moves))

        self.assertEqual(result.source, MoveSource.HEURISTIC)
        self.assertEqual(result.reasoning, REASONING_UNCONFIGURED)
        self.assertEqual(result.move, Cell(0, 7))
        self.assertEqual(client.calls, [])

    def test_fallback_prefers_corner(self):
        client = FakeReasoningClient(outcome=Text("garbage"))
        moves = (Cell(2, 3), Cell(7, 0), Cell(0, 3))

        result = MoveOrchestrator(client, random.Random(1)).pick_move(make_request(moves=moves))

        self.assertEqual(result.move, Cell(7, 0))

    def test_empty_moves_rejected(self):
        client = FakeReasoningClient(outcome=Text('{"row": 2, "col": 3}'))
        with self.assertRaises(InvalidMoveRequest):
            MoveOrchestrator(client).pick_move(make_request(moves=()))
        self.assertEqual(client.calls, [])

    def test_missing_board_rejected(self):
        request = MoveRequest(board=None, difficulty=Difficulty.EASY, valid_moves=OPENING_MOVES)
        with self.assertRaises(InvalidMoveRequest):
            MoveOrchestrator(FakeReasoningClient()).pick_move(request)


class EasyShortcutTests(SimpleTestCase):
    def test_shortcut_success_skips_reasoning(self):
        rng = random.Random(3)
        client = FakeReasoningClient(outcome=Text('{"row": 2, "col": 3}'))

        with patch.object(rng, "random", return_value=0.1):
            result = MoveOrchestrator(client, rng).pick_move(make_request(Difficulty.EASY))

        self.assertEqual(result.source, MoveSource.HEURISTIC)
        self.assertEqual(result.reasoning, REASONING_SHORTCUT)
        self.assertEqual(client.calls, [])

    def test_shortcut_failure_calls_reasoning(self):
        rng = random.Random(3)
        client = FakeReasoningClient(outcome=Text('{"row": 5, "col": 4}'))

        with patch.object(rng, "random", return_value=0.95):
            result = MoveOrchestrator(client, rng).pick_move(make_request(Difficulty.EASY))

        self.assertEqual(len(client.calls), 1)
        self.assertIs(client.calls[0][1], Difficulty.EASY)
        self.assertEqual(result.source, MoveSource.AI)
        self.assertEqual(result.move, Cell(5, 4))

    def test_boundary_probability_is_not_a_shortcut(self):
        rng = random.Random(3)
        client = FakeReasoningClient(outcome=Text('{"row": 5, "col": 4}'))

        with patch.object(rng, "random", return_value=0.7):
            MoveOrchestrator(client, rng).pick_move(make_request(Difficulty.EASY))

        self.assertEqual(len(client.calls), 1)

    def test_hard_never_draws_shortcut(self):
        rng = random.Random(3)
        client = FakeReasoningClient(outcome=Text('{"row": 2, "col": 3}'))

        with patch.object(rng, "random", return_value=0.0) as mock_random:
            result = MoveOrchestrator(client, rng).pick_move(make_request(Difficulty.HARD))

        mock_random.assert_not_called()
        self.assertEqual(result.source, MoveSource.AI)
