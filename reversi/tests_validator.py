from django.test import SimpleTestCase

from reversi.ai.board_codec import (
    board_to_text,
    decode_board,
    decode_moves,
    extract_json_object,
    moves_to_text,
)
from reversi.ai.engines.base import Cell, CellState
from reversi.ai.validator import is_legal, parse_move


def starting_board():
    board = [[0] * 8 for _ in range(8)]
    board[3][3] = board[4][4] = 2
    board[3][4] = board[4][3] = 1
    return board


class BoardCodecTests(SimpleTestCase):
    def test_board_to_text(self):
        text = board_to_text(decode_board(starting_board()))
        lines = text.split("\n")
        self.assertEqual(len(lines), 8)
        self.assertEqual(lines[0], "0: [. . . . . . . .]")
        self.assertEqual(lines[3], "3: [. . . W B . . .]")
        self.assertEqual(lines[4], "4: [. . . B W . . .]")

    def test_moves_to_text(self):
        moves = decode_moves([{"row": 2, "col": 3}, {"row": 5, "col": 4}])
        self.assertEqual(moves_to_text(moves), "(2, 3), (5, 4)")

    def test_decode_board_values(self):
        board = decode_board(starting_board())
        self.assertIs(board[3][4], CellState.BLACK)
        self.assertIs(board[3][3], CellState.WHITE)
        self.assertIs(board[0][0], CellState.EMPTY)

    def test_decode_board_rejects_bad_shape(self):
        with self.assertRaises(ValueError):
            decode_board([[0] * 8 for _ in range(7)])
        with self.assertRaises(ValueError):
            decode_board([[0] * 7 for _ in range(8)])

    def test_extract_json_object_from_prose(self):
        data = extract_json_object('I play {"row": 1, "col": 2, "reasoning": "x"} now')
        self.assertEqual(data, {"row": 1, "col": 2, "reasoning": "x"})

    def test_extract_json_object_none(self):
        self.assertIsNone(extract_json_object(""))
        self.assertIsNone(extract_json_object("no braces here"))
        self.assertIsNone(extract_json_object("{not json}"))


class ResponseValidatorTests(SimpleTestCase):
    def test_parse_embedded_object(self):
        self.assertEqual(parse_move('move is {"row": 2, "col": 3}'), Cell(2, 3))

    def test_parse_ignores_extra_fields(self):
        raw = '{"row": 0, "col": 7, "reasoning": "corner is permanent"}'
        self.assertEqual(parse_move(raw), Cell(0, 7))

    def test_parse_first_object_wins(self):
        self.assertEqual(parse_move('{"row": 1, "col": 1} or {"row": 2, "col": 2}'), Cell(1, 1))

    def test_parse_rejects_non_json(self):
        self.assertIsNone(parse_move("I would play d3"))
        self.assertIsNone(parse_move(""))

    def test_parse_rejects_non_numeric_fields(self):
        self.assertIsNone(parse_move('{"row": "2", "col": "3"}'))
        self.assertIsNone(parse_move('{"row": true, "col": 3}'))
        self.assertIsNone(parse_move('{"row": null, "col": 3}'))

    def test_parse_rejects_missing_fields(self):
        self.assertIsNone(parse_move('{"row": 2}'))
        self.assertIsNone(parse_move('{"x": 2, "y": 3}'))

    def test_parse_integral_float(self):
        self.assertEqual(parse_move('{"row": 2.0, "col": 3}'), Cell(2, 3))
        self.assertIsNone(parse_move('{"row": 2.5, "col": 3}'))

    def test_parse_nested_object_is_not_decoded(self):
        self.assertIsNone(parse_move('{"move": {"row": 2, "col": 3}}'))

    def test_is_legal(self):
        moves = [Cell(2, 3), Cell(3, 2)]
        self.assertTrue(is_legal(Cell(2, 3), moves))
        self.assertFalse(is_legal(Cell(3, 3), moves))
