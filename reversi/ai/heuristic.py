# reversi/ai/heuristic.py
from __future__ import annotations

import random
from typing import Optional, Sequence

from .engines.base import BOARD_SIZE, Cell

_LAST = BOARD_SIZE - 1

CORNERS = frozenset(
    {Cell(0, 0), Cell(0, _LAST), Cell(_LAST, 0), Cell(_LAST, _LAST)}
)


def is_corner(cell: Cell) -> bool:
    return cell in CORNERS


def is_edge(cell: Cell) -> bool:
    return cell.row in (0, _LAST) or cell.col in (0, _LAST)


def select_heuristic_move(
    valid_moves: Sequence[Cell],
    rng: Optional[random.Random] = None,
) -> Cell:
    """
    Coup de secours, toujours légal :

    - un coin si possible (premier dans l'ordre reçu)
    - sinon un bord (premier dans l'ordre reçu)
    - sinon un coup légal au hasard
    """
    if not valid_moves:
        raise ValueError("select_heuristic_move() needs at least one legal move")

    for cell in valid_moves:
        if is_corner(cell):
            return cell

    for cell in valid_moves:
        if is_edge(cell):
            return cell

    rng = rng or random.Random()
    return valid_moves[rng.randrange(len(valid_moves))]
