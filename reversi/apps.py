import threading

from django.apps import AppConfig


class ReversiConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "reversi"

    def ready(self):
        self._orchestrator = None
        self._orchestrator_lock = threading.Lock()

    def get_orchestrator(self):
        """
        Builds the move orchestrator on first use, once per process.
        Concurrent first calls share a single instance.
        """
        if self._orchestrator is None:
            with self._orchestrator_lock:
                if self._orchestrator is None:
                    # imported here: the Gemini SDK must not load before settings
                    from reversi.ai.ai_router import MoveOrchestrator
                    from reversi.ai.engines.gemini_engine import (
                        GeminiReasoningClient,
                        ReasoningConfig,
                    )

                    client = GeminiReasoningClient(ReasoningConfig.from_settings())
                    self._orchestrator = MoveOrchestrator(client)
        return self._orchestrator
