from django.test import SimpleTestCase

from reversi.ai.board_codec import decode_board
from reversi.ai.difficulty import Difficulty, get_difficulty_config, parse_difficulty
from reversi.ai.engines.base import Cell, CellState
from reversi.ai.prompts import build_prompt


def _board():
    raw = [[0] * 8 for _ in range(8)]
    raw[3][3] = raw[4][4] = 2
    raw[3][4] = raw[4][3] = 1
    return decode_board(raw)


MOVES = (Cell(2, 3), Cell(3, 2), Cell(4, 5), Cell(5, 4))


class PromptBuilderTests(SimpleTestCase):
    def test_common_header(self):
        for difficulty in Difficulty:
            prompt = build_prompt(difficulty, _board(), MOVES, CellState.BLACK)
            self.assertIn("You are playing Othello/Reversi as Black (B).", prompt)
            self.assertIn("3: [. . . W B . . .]", prompt)
            self.assertIn("Valid moves for your turn: (2, 3), (3, 2), (4, 5), (5, 4)", prompt)

    def test_white_player_label(self):
        prompt = build_prompt(Difficulty.EASY, _board(), MOVES, CellState.WHITE)
        self.assertIn("as White (W)", prompt)

    def test_easy_asks_for_row_col_only(self):
        prompt = build_prompt(Difficulty.EASY, _board(), MOVES, CellState.BLACK)
        self.assertIn("Choose any valid move", prompt)
        self.assertTrue(prompt.endswith('{"row": <number>, "col": <number>}'))
        self.assertNotIn("reasoning", prompt)

    def test_medium_strategy(self):
        prompt = build_prompt(Difficulty.MEDIUM, _board(), MOVES, CellState.BLACK)
        self.assertIn("PRIORITIZE corners", prompt)
        self.assertIn("Maximize the number of discs you flip", prompt)
        self.assertIn('"reasoning": "<brief explanation>"', prompt)

    def test_hard_strategy_lists_squares(self):
        prompt = build_prompt(Difficulty.HARD, _board(), MOVES, CellState.BLACK)
        self.assertIn("CORNER SQUARES: (0,0), (0,7), (7,0), (7,7)", prompt)
        self.assertIn("X-SQUARES (dangerous): (1,1), (1,6), (6,1), (6,6)", prompt)
        self.assertLess(prompt.index("CORNERS:"), prompt.index("STABLE DISCS"))
        self.assertLess(prompt.index("MOBILITY"), prompt.index("PARITY"))
        self.assertIn('"reasoning": "<strategic analysis>"', prompt)

    def test_deterministic(self):
        a = build_prompt(Difficulty.HARD, _board(), MOVES, CellState.WHITE)
        b = build_prompt(Difficulty.HARD, _board(), MOVES, CellState.WHITE)
        self.assertEqual(a, b)


class DifficultyTests(SimpleTestCase):
    def test_parse_defaults_to_medium(self):
        self.assertIs(parse_difficulty(None), Difficulty.MEDIUM)
        self.assertIs(parse_difficulty(""), Difficulty.MEDIUM)
        self.assertIs(parse_difficulty("insane"), Difficulty.MEDIUM)
        self.assertIs(parse_difficulty("HARD"), Difficulty.HARD)

    def test_temperatures_decrease_with_skill(self):
        easy = get_difficulty_config(Difficulty.EASY)
        medium = get_difficulty_config("medium")
        hard = get_difficulty_config(Difficulty.HARD)
        self.assertGreater(easy.temperature, medium.temperature)
        self.assertGreater(medium.temperature, hard.temperature)
        self.assertEqual(easy.shortcut_probability, 0.7)
        self.assertEqual(hard.shortcut_probability, 0.0)
        self.assertEqual(hard.max_output_tokens, 200)
