# reversi/ai/engines/gemini_engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final

import google.generativeai as genai
from django.conf import settings
from google.api_core.exceptions import GoogleAPICallError, RetryError
from google.auth.exceptions import GoogleAuthError

from ..difficulty import Difficulty, get_difficulty_config
from ..prompts import SYSTEM_INSTRUCTION
from .base import ReasoningOutcome, Text, Unavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReasoningConfig:
    api_key: str | None
    api_endpoint: str | None = None
    model_name: str = "gemini-2.5-flash"
    timeout_seconds: float = 8.0

    @classmethod
    def from_settings(cls) -> "ReasoningConfig":
        return cls(
            api_key=getattr(settings, "GOOGLE_API_KEY", None) or None,
            api_endpoint=getattr(settings, "GEMINI_API_ENDPOINT", None) or None,
            model_name=getattr(settings, "GEMINI_MODEL", None) or cls.model_name,
            timeout_seconds=float(
                getattr(settings, "REASONING_TIMEOUT_SECONDS", cls.timeout_seconds)
            ),
        )


class GeminiReasoningClient:
    """
    Client Gemini pour le choix de coup Othello.

    - Configuration injectée (clé, endpoint, modèle, timeout), résolue une
      seule fois par le bootstrap de l'app
    - Un seul appel bloquant par requête, borné par un timeout, sans retry
    - Toute erreur réseau/auth/fournisseur -> ``Unavailable``

    Utilisation :

        client = GeminiReasoningClient(ReasoningConfig.from_settings())
        if client.configured():
            outcome = client.ask(prompt, Difficulty.HARD)
    """

    RESPONSE_MIME_TYPE: Final[str] = "application/json"

    def __init__(self, config: ReasoningConfig) -> None:
        self._config = config
        self._model = None

        if not self.configured():
            logger.warning(
                "[GeminiReasoningClient] Aucune GOOGLE_API_KEY détectée. "
                "Les coups seront choisis par heuristique."
            )
            return

        client_options: dict[str, Any] | None = None
        if config.api_endpoint:
            client_options = {"api_endpoint": config.api_endpoint}

        genai.configure(api_key=config.api_key, client_options=client_options)
        self._model = genai.GenerativeModel(
            config.model_name,
            system_instruction=SYSTEM_INSTRUCTION,
        )

    def configured(self) -> bool:
        return bool(self._config.api_key)

    def ask(self, prompt: str, difficulty: Difficulty) -> ReasoningOutcome:
        if self._model is None:
            return Unavailable("reasoning client not configured")

        tier = get_difficulty_config(difficulty)
        generation_config: dict[str, Any] = {
            "temperature": tier.temperature,
            "max_output_tokens": tier.max_output_tokens,
            "response_mime_type": self.RESPONSE_MIME_TYPE,
        }

        logger.info(
            "[GeminiReasoningClient] Appel %s (difficulty=%s, timeout=%.1fs)...",
            self._config.model_name,
            difficulty.value,
            self._config.timeout_seconds,
        )
        try:
            response = self._model.generate_content(
                prompt,
                generation_config=generation_config,
                # un seul essai, sans le retry par défaut du client gRPC
                request_options={"timeout": self._config.timeout_seconds, "retry": None},
            )
        except (
            GoogleAPICallError,
            GoogleAuthError,
            RetryError,
            TimeoutError,
            ConnectionError,
        ) as exc:
            logger.warning("[GeminiReasoningClient] Appel échoué: %r", exc)
            return Unavailable(f"{type(exc).__name__}: {exc}")

        text = self._extract_text(response)
        logger.debug("[GeminiReasoningClient] Réponse brute: %s", text[:200])
        return Text(text)

    @staticmethod
    def _extract_text(response: Any) -> str:
        """
        ``response.text`` lève ValueError quand la réponse n'a pas de partie
        texte (bloquée par les filtres, par exemple). On renvoie alors "".
        """
        try:
            return (response.text or "").strip()
        except ValueError:
            logger.warning("[GeminiReasoningClient] Réponse sans texte exploitable.")
            return ""
