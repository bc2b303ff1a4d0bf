# reversi/ai/validator.py
from __future__ import annotations

import logging
from numbers import Real
from typing import Any, Iterable, Optional

from .board_codec import extract_json_object
from .engines.base import Cell

logger = logging.getLogger(__name__)


def _as_coordinate(value: Any) -> Optional[int]:
    # bool is an int subclass; JSON true/false are not coordinates
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    return int(value)


def parse_move(raw: str) -> Optional[Cell]:
    """
    Extract the first JSON object from the model text and read numeric
    ``row``/``col`` from it. Extra keys are ignored. Never raises.
    """
    data = extract_json_object(raw)
    if data is None:
        return None

    if "row" not in data or "col" not in data:
        logger.warning("[ResponseValidator] Clés 'row'/'col' manquantes dans: %r", data)
        return None

    row = _as_coordinate(data["row"])
    col = _as_coordinate(data["col"])
    if row is None or col is None:
        logger.warning("[ResponseValidator] 'row'/'col' ne sont pas numériques: %r", data)
        return None

    return Cell(row=row, col=col)


def is_legal(move: Cell, valid_moves: Iterable[Cell]) -> bool:
    return any(move == m for m in valid_moves)
