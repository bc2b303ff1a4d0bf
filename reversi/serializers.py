from rest_framework import serializers

from .ai.ai_router import MoveRequest
from .ai.board_codec import decode_board, decode_moves
from .ai.difficulty import parse_difficulty
from .ai.engines.base import BOARD_SIZE, CellState


class CellSerializer(serializers.Serializer):
    row = serializers.IntegerField(min_value=0, max_value=BOARD_SIZE - 1)
    col = serializers.IntegerField(min_value=0, max_value=BOARD_SIZE - 1)


class MoveRequestSerializer(serializers.Serializer):
    """
    Body of POST /api/ai-move:

    {
      "board": [[0, 0, ...], ...],         # 8x8, 0=vide 1=noir 2=blanc
      "difficulty": "easy" | "medium" | "hard",
      "validMoves": [{"row": 2, "col": 3}, ...],
      "currentPlayer": 1 | 2
    }
    """

    board = serializers.ListField(
        child=serializers.ListField(
            child=serializers.IntegerField(min_value=0, max_value=2),
            min_length=BOARD_SIZE,
            max_length=BOARD_SIZE,
        ),
        min_length=BOARD_SIZE,
        max_length=BOARD_SIZE,
    )
    difficulty = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="medium")
    validMoves = CellSerializer(many=True, allow_empty=False)
    currentPlayer = serializers.ChoiceField(choices=[1, 2], required=False, default=1)

    def validate_difficulty(self, value):
        # niveaux inconnus -> medium
        return parse_difficulty(value)

    def validate_validMoves(self, value):
        return decode_moves(value)

    def to_move_request(self) -> MoveRequest:
        data = self.validated_data
        return MoveRequest(
            board=decode_board(data["board"]),
            difficulty=data["difficulty"],
            valid_moves=tuple(data["validMoves"]),
            current_player=CellState(int(data["currentPlayer"])),
        )


def first_error_message(errors) -> str:
    """Flattens DRF's nested error structure down to one readable line."""
    path = []
    node = errors
    while True:
        if isinstance(node, dict) and node:
            key = next(iter(node))
            path.append(str(key))
            node = node[key]
        elif isinstance(node, list) and node:
            # list errors of ListField children are dicts keyed by index
            node = next((n for n in node if n), node[0])
        else:
            break
    where = ".".join(p for p in path if p != "non_field_errors")
    message = str(node)
    return f"Invalid request: {where}: {message}" if where else f"Invalid request: {message}"
