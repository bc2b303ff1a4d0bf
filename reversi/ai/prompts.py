# reversi/ai/prompts.py
from __future__ import annotations

from typing import Sequence

from .board_codec import board_to_text, moves_to_text, player_label
from .difficulty import Difficulty
from .engines.base import Board, Cell, CellState

SYSTEM_INSTRUCTION = (
    "You are an expert Othello/Reversi player. "
    "Always respond with valid JSON containing your move coordinates."
)

_EASY_BODY = (
    "Choose any valid move. Just pick one randomly from the valid moves.\n"
    "\n"
    "Respond with ONLY a JSON object in this exact format:\n"
    '{"row": <number>, "col": <number>}'
)

_MEDIUM_BODY = (
    "Apply basic Othello strategy:\n"
    "1. PRIORITIZE corners (0,0), (0,7), (7,0), (7,7) - they cannot be flipped\n"
    "2. AVOID squares adjacent to corners if corner is empty\n"
    "3. Prefer edge positions\n"
    "4. Maximize the number of discs you flip\n"
    "\n"
    "Analyze the board and choose the best move based on these priorities.\n"
    "\n"
    "Respond with ONLY a JSON object in this exact format:\n"
    '{"row": <number>, "col": <number>, "reasoning": "<brief explanation>"}'
)

_HARD_BODY = (
    "Apply advanced Othello strategy:\n"
    "\n"
    "STRATEGIC PRIORITIES (in order):\n"
    "1. CORNERS: Always take corners when available - they are permanent\n"
    "2. STABLE DISCS: Build chains of discs that cannot be flipped\n"
    "3. AVOID X-SQUARES: Never play diagonally adjacent to empty corners "
    "(positions like (1,1) when (0,0) is empty)\n"
    "4. AVOID C-SQUARES: Avoid positions adjacent to corners on edges when corner is empty\n"
    "5. EDGE CONTROL: Secure edges, especially completed edge lines\n"
    "6. MOBILITY: Prefer moves that maximize your future valid moves while "
    "minimizing opponent's\n"
    "7. PARITY: In endgame, try to play last in each region\n"
    "8. TEMPO: Sometimes sacrifice discs early to gain positional advantage\n"
    "\n"
    "CORNER SQUARES: (0,0), (0,7), (7,0), (7,7)\n"
    "X-SQUARES (dangerous): (1,1), (1,6), (6,1), (6,6)\n"
    "C-SQUARES (risky): Adjacent to corners on edges\n"
    "\n"
    "Analyze deeply and choose the optimal move.\n"
    "\n"
    "Respond with ONLY a JSON object in this exact format:\n"
    '{"row": <number>, "col": <number>, "reasoning": "<strategic analysis>"}'
)

_BODIES = {
    Difficulty.EASY: _EASY_BODY,
    Difficulty.MEDIUM: _MEDIUM_BODY,
    Difficulty.HARD: _HARD_BODY,
}


def build_prompt(
    difficulty: Difficulty,
    board: Board,
    valid_moves: Sequence[Cell],
    current_player: CellState,
) -> str:
    """
    Prompt utilisateur : en-tête commun (plateau + coups légaux) puis
    consignes propres au niveau. Pur, même entrée -> même texte.
    """
    header = (
        f"You are playing Othello/Reversi as {player_label(current_player)}.\n"
        "\n"
        "Current Board State (. = empty, B = Black, W = White):\n"
        f"{board_to_text(board)}\n"
        "\n"
        f"Valid moves for your turn: {moves_to_text(valid_moves)}\n"
        "\n"
    )
    return header + _BODIES[difficulty]
