# reversi/ai/engines/base.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Tuple, Union

BOARD_SIZE = 8


class CellState(IntEnum):
    EMPTY = 0
    BLACK = 1  # player A, moves first
    WHITE = 2  # player B


Board = Tuple[Tuple[CellState, ...], ...]


@dataclass(frozen=True)
class Cell:
    row: int
    col: int

    def to_dict(self) -> Dict[str, int]:
        return {"row": self.row, "col": self.col}


class MoveSource(str, Enum):
    """Provenance of a chosen move. Observability only, never game logic."""

    HEURISTIC = "heuristic"
    AI = "ai"
    FALLBACK = "fallback"
    ERROR_FALLBACK = "error-fallback"


@dataclass(frozen=True)
class MoveResult:
    move: Cell
    reasoning: str
    source: MoveSource

    def to_dict(self) -> Dict[str, Any]:
        return {
            "move": self.move.to_dict(),
            "reasoning": self.reasoning,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class Text:
    raw: str


@dataclass(frozen=True)
class Unavailable:
    reason: str


ReasoningOutcome = Union[Text, Unavailable]


class ReversiAIError(Exception):
    """Base class for move-engine errors."""


class InvalidMoveRequest(ReversiAIError):
    def __init__(self, message: str = "Invalid request: missing board or validMoves"):
        self.message = message
        super().__init__(message)
