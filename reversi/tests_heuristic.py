import random

from django.test import SimpleTestCase

from reversi.ai.engines.base import Cell
from reversi.ai.heuristic import CORNERS, is_edge, select_heuristic_move


class HeuristicSelectorTests(SimpleTestCase):
    def test_corner_wins_over_edge_and_inner(self):
        moves = [Cell(3, 3), Cell(0, 4), Cell(7, 7)]
        self.assertEqual(select_heuristic_move(moves), Cell(7, 7))

    def test_first_corner_in_input_order(self):
        # tie-break inside a group is first-match; flagged here so a change is noticed
        moves = [Cell(2, 2), Cell(7, 0), Cell(0, 0)]
        self.assertEqual(select_heuristic_move(moves), Cell(7, 0))

    def test_edge_when_no_corner(self):
        moves = [Cell(2, 3), Cell(5, 7), Cell(0, 3)]
        self.assertEqual(select_heuristic_move(moves), Cell(5, 7))

    def test_random_inner_move_uses_rng(self):
        moves = [Cell(2, 3), Cell(3, 2), Cell(4, 5), Cell(5, 4)]
        rng = random.Random(0)
        expected = moves[random.Random(0).randrange(len(moves))]
        self.assertEqual(select_heuristic_move(moves, rng), expected)

    def test_always_returns_a_legal_move(self):
        rng = random.Random(42)
        all_cells = [Cell(r, c) for r in range(8) for c in range(8)]
        for _ in range(200):
            moves = rng.sample(all_cells, rng.randint(1, 10))
            move = select_heuristic_move(moves, rng)
            self.assertIn(move, moves)
            if any(m in CORNERS for m in moves):
                self.assertIn(move, CORNERS)
            elif any(is_edge(m) for m in moves):
                self.assertTrue(is_edge(move))

    def test_single_move(self):
        self.assertEqual(select_heuristic_move([Cell(4, 4)]), Cell(4, 4))

    def test_empty_moves_rejected(self):
        with self.assertRaises(ValueError):
            select_heuristic_move([])
