# reversi/ai/board_codec.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .engines.base import BOARD_SIZE, Board, Cell, CellState

logger = logging.getLogger(__name__)

GLYPHS = {
    CellState.EMPTY: ".",
    CellState.BLACK: "B",
    CellState.WHITE: "W",
}

# First brace-delimited object, no nesting.
_JSON_OBJECT_RE = re.compile(r"\{[^}]+\}")


def decode_board(raw: Sequence[Sequence[int]]) -> Board:
    """
    Convertit la grille JSON (0/1/2) en plateau immuable.
    Lève ValueError si la forme ou les valeurs sont invalides.
    """
    if len(raw) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in raw):
        raise ValueError(f"board must be {BOARD_SIZE}x{BOARD_SIZE}")
    return tuple(tuple(CellState(int(v)) for v in row) for row in raw)


def decode_moves(raw: Iterable[Dict[str, Any]]) -> List[Cell]:
    return [Cell(row=int(m["row"]), col=int(m["col"])) for m in raw]


def player_label(player: CellState) -> str:
    return "Black (B)" if player == CellState.BLACK else "White (W)"


def board_to_text(board: Board) -> str:
    """
    One line per row: "<index>: [. B W ...]".
    """
    lines: list[str] = []
    for i, row in enumerate(board):
        glyphs = " ".join(GLYPHS.get(CellState(v), ".") for v in row)
        lines.append(f"{i}: [{glyphs}]")
    return "\n".join(lines)


def moves_to_text(valid_moves: Iterable[Cell]) -> str:
    return ", ".join(f"({m.row}, {m.col})" for m in valid_moves)


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Return the first brace-delimited JSON object found in free-form text,
    or None when there is none or it does not decode to an object.
    """
    if not text:
        return None
    match = _JSON_OBJECT_RE.search(text)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        logger.debug("[BoardCodec] JSON invalide: %s", match.group(0))
        return None
    if not isinstance(data, dict):
        return None
    return data
