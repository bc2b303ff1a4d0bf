# reversi/views.py
import logging

from django.apps import apps
from rest_framework import permissions, status
from rest_framework.exceptions import ParseError
from rest_framework.response import Response
from rest_framework.views import APIView

from .ai.engines.base import InvalidMoveRequest, MoveResult, MoveSource
from .ai.ai_router import REASONING_API_ERROR
from .ai.heuristic import select_heuristic_move
from .serializers import MoveRequestSerializer, first_error_message

logger = logging.getLogger(__name__)

MISSING_FIELDS_ERROR = "Invalid request: missing board or validMoves"


def get_orchestrator():
    return apps.get_app_config("reversi").get_orchestrator()


class HealthView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({"status": "ok"})


class AIMoveView(APIView):
    """
    POST /api/ai-move
    Body JSON:
    {
      "board": [[0, 0, 0, 0, 0, 0, 0, 0], ...],   # 8x8
      "difficulty": "easy" | "medium" | "hard",
      "validMoves": [{"row": 2, "col": 3}, ...],
      "currentPlayer": 1 | 2
    }
    Réponse: {"move": {"row", "col"}, "reasoning": str, "source": str}
    """

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        try:
            body = request.data if isinstance(request.data, dict) else {}
        except ParseError:
            body = {}
        if not body.get("board") or not body.get("validMoves"):
            return Response({"error": MISSING_FIELDS_ERROR}, status=status.HTTP_400_BAD_REQUEST)

        ser = MoveRequestSerializer(data=body)
        if not ser.is_valid():
            return Response(
                {"error": first_error_message(ser.errors)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            move_request = ser.to_move_request()
            result = get_orchestrator().pick_move(move_request)
        except InvalidMoveRequest as exc:
            return Response({"error": exc.message}, status=status.HTTP_400_BAD_REQUEST)
        except Exception as exc:
            logger.exception("[AIMoveView] AI Move Error: %r", exc)
            valid_moves = ser.validated_data.get("validMoves") or []
            if not valid_moves:
                return Response(
                    {"error": "AI service unavailable", "details": str(exc)},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                )
            result = MoveResult(
                move=select_heuristic_move(valid_moves),
                reasoning=REASONING_API_ERROR,
                source=MoveSource.ERROR_FALLBACK,
            )

        return Response(result.to_dict(), status=status.HTTP_200_OK)
