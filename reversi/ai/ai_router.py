# reversi/ai/ai_router.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

from .difficulty import Difficulty, get_difficulty_config
from .engines.base import (
    Board,
    Cell,
    CellState,
    InvalidMoveRequest,
    MoveResult,
    MoveSource,
    ReasoningOutcome,
    Text,
)
from .heuristic import select_heuristic_move
from .prompts import build_prompt
from .validator import is_legal, parse_move

logger = logging.getLogger(__name__)

REASONING_SHORTCUT = "Simple heuristic move"
REASONING_UNCONFIGURED = "Heuristic move (API key not configured)"
REASONING_INVALID_AI = "Fallback heuristic move (AI response was invalid)"
REASONING_API_ERROR = "Fallback move due to API error"


class ReasoningClient(Protocol):
    def configured(self) -> bool: ...

    def ask(self, prompt: str, difficulty: Difficulty) -> ReasoningOutcome: ...


@dataclass(frozen=True)
class MoveRequest:
    board: Board
    difficulty: Difficulty
    valid_moves: Tuple[Cell, ...]
    current_player: CellState = CellState.BLACK


class MoveOrchestrator:
    """
    Picks exactly one legal move per request.

    easy tier: 70% of requests short-circuit to the heuristic. Otherwise the
    reasoning client is asked once; its answer is used only if it parses to
    one of the legal moves. Anything else falls back to the heuristic, so the
    returned move is always in ``request.valid_moves``.
    """

    def __init__(self, client: ReasoningClient, rng: Optional[random.Random] = None) -> None:
        self._client = client
        self._rng = rng or random.Random()

    def pick_move(self, request: MoveRequest) -> MoveResult:
        if request.board is None or not request.valid_moves:
            raise InvalidMoveRequest()

        tier = get_difficulty_config(request.difficulty)
        if tier.shortcut_probability and self._rng.random() < tier.shortcut_probability:
            return self._heuristic(request.valid_moves, MoveSource.HEURISTIC, REASONING_SHORTCUT)

        if not self._client.configured():
            return self._heuristic(request.valid_moves, MoveSource.HEURISTIC, REASONING_UNCONFIGURED)

        prompt = build_prompt(
            request.difficulty,
            request.board,
            request.valid_moves,
            request.current_player,
        )

        try:
            outcome = self._client.ask(prompt, request.difficulty)
        except Exception as exc:
            # Toute erreur du client -> fallback
            logger.exception("[MoveOrchestrator] Erreur lors de l'appel IA -> fallback: %r", exc)
            return self._heuristic(request.valid_moves, MoveSource.ERROR_FALLBACK, REASONING_API_ERROR)

        if not isinstance(outcome, Text):
            logger.warning("[MoveOrchestrator] IA indisponible (%s) -> fallback.", outcome.reason)
            return self._heuristic(request.valid_moves, MoveSource.ERROR_FALLBACK, REASONING_API_ERROR)

        move = parse_move(outcome.raw)
        if move is not None and is_legal(move, request.valid_moves):
            logger.info("[MoveOrchestrator] Coup choisi par l'IA: (%d, %d)", move.row, move.col)
            return MoveResult(move=move, reasoning=outcome.raw, source=MoveSource.AI)

        logger.warning("[MoveOrchestrator] Coup IA invalide ou illisible -> fallback.")
        return self._heuristic(request.valid_moves, MoveSource.FALLBACK, REASONING_INVALID_AI)

    def _heuristic(self, valid_moves: Sequence[Cell], source: MoveSource, reasoning: str) -> MoveResult:
        move = select_heuristic_move(valid_moves, self._rng)
        logger.info(
            "[MoveOrchestrator] Coup heuristique (%d, %d), source=%s",
            move.row,
            move.col,
            source.value,
        )
        return MoveResult(move=move, reasoning=reasoning, source=source)
