from unittest.mock import MagicMock, PropertyMock, patch

from django.test import SimpleTestCase, override_settings
from google.ai.generativelanguage_v1beta.services.generative_service.transports.grpc import (
    GenerativeServiceGrpcTransport,
)
from google.api_core.exceptions import DeadlineExceeded, ServiceUnavailable
from google.auth.exceptions import RefreshError

from reversi.ai.difficulty import Difficulty
from reversi.ai.engines.base import Text, Unavailable
from reversi.ai.engines.gemini_engine import GeminiReasoningClient, ReasoningConfig
from reversi.ai.prompts import SYSTEM_INSTRUCTION


class ReasoningConfigTests(SimpleTestCase):
    @override_settings(
        GOOGLE_API_KEY="k-123",
        GEMINI_API_ENDPOINT="llm.internal:443",
        GEMINI_MODEL="gemini-test",
        REASONING_TIMEOUT_SECONDS=3,
    )
    def test_from_settings(self):
        config = ReasoningConfig.from_settings()
        self.assertEqual(config.api_key, "k-123")
        self.assertEqual(config.api_endpoint, "llm.internal:443")
        self.assertEqual(config.model_name, "gemini-test")
        self.assertEqual(config.timeout_seconds, 3.0)

    @override_settings(GOOGLE_API_KEY="", GEMINI_API_ENDPOINT="", GEMINI_MODEL="")
    def test_blank_values_mean_absent(self):
        config = ReasoningConfig.from_settings()
        self.assertIsNone(config.api_key)
        self.assertIsNone(config.api_endpoint)
        self.assertEqual(config.model_name, "gemini-2.5-flash")


@patch("reversi.ai.engines.gemini_engine.genai")
class GeminiReasoningClientTests(SimpleTestCase):
    def _client(self, **kwargs):
        config = ReasoningConfig(api_key="k-123", timeout_seconds=5.0, **kwargs)
        return GeminiReasoningClient(config)

    def test_unconfigured_never_touches_sdk(self, mock_genai):
        client = GeminiReasoningClient(ReasoningConfig(api_key=None))
        self.assertFalse(client.configured())
        self.assertIsInstance(client.ask("prompt", Difficulty.HARD), Unavailable)
        mock_genai.configure.assert_not_called()
        mock_genai.GenerativeModel.assert_not_called()

    def test_configures_sdk_once(self, mock_genai):
        client = self._client(api_endpoint="llm.internal:443")
        self.assertTrue(client.configured())
        mock_genai.configure.assert_called_once_with(
            api_key="k-123",
            client_options={"api_endpoint": "llm.internal:443"},
        )
        mock_genai.GenerativeModel.assert_called_once_with(
            "gemini-2.5-flash",
            system_instruction=SYSTEM_INSTRUCTION,
        )

    def test_no_endpoint_override(self, mock_genai):
        self._client()
        mock_genai.configure.assert_called_once_with(api_key="k-123", client_options=None)

    def test_ask_returns_text(self, mock_genai):
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.return_value = MagicMock(text=' {"row": 2, "col": 3} \n')

        outcome = self._client().ask("the prompt", Difficulty.HARD)

        self.assertEqual(outcome, Text('{"row": 2, "col": 3}'))
        model.generate_content.assert_called_once_with(
            "the prompt",
            generation_config={
                "temperature": 0.2,
                "max_output_tokens": 200,
                "response_mime_type": "application/json",
            },
            request_options={"timeout": 5.0, "retry": None},
        )

    def test_temperature_follows_difficulty(self, mock_genai):
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.return_value = MagicMock(text="{}")
        client = self._client()

        client.ask("p", Difficulty.EASY)
        client.ask("p", Difficulty.MEDIUM)

        temps = [c.kwargs["generation_config"]["temperature"] for c in model.generate_content.call_args_list]
        self.assertEqual(temps, [0.9, 0.5])

    def test_provider_error_is_unavailable(self, mock_genai):
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.side_effect = ServiceUnavailable("overloaded")

        outcome = self._client().ask("p", Difficulty.MEDIUM)

        self.assertIsInstance(outcome, Unavailable)
        self.assertIn("ServiceUnavailable", outcome.reason)

    def test_timeout_is_unavailable(self, mock_genai):
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.side_effect = DeadlineExceeded("too slow")

        self.assertIsInstance(self._client().ask("p", Difficulty.HARD), Unavailable)

    def test_blocked_response_is_empty_text(self, mock_genai):
        response = MagicMock()
        type(response).text = PropertyMock(side_effect=ValueError("no parts"))
        mock_genai.GenerativeModel.return_value.generate_content.return_value = response

        self.assertEqual(self._client().ask("p", Difficulty.HARD), Text(""))

    def test_auth_error_is_unavailable(self, mock_genai):
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.side_effect = RefreshError("token expired")

        outcome = self._client().ask("p", Difficulty.HARD)

        self.assertIsInstance(outcome, Unavailable)
        self.assertIn("RefreshError", outcome.reason)


class GeminiTransportTests(SimpleTestCase):
    """Runs the real SDK down to the gRPC stub."""

    def test_provider_503_is_a_single_attempt(self):
        attempts = []

        def rpc(request, **kwargs):
            attempts.append(kwargs.get("timeout"))
            raise ServiceUnavailable("overloaded")

        with patch.object(
            GenerativeServiceGrpcTransport,
            "generate_content",
            new_callable=PropertyMock,
            return_value=rpc,
        ):
            client = GeminiReasoningClient(ReasoningConfig(api_key="k-123", timeout_seconds=3.0))
            outcome = client.ask("p", Difficulty.HARD)

        self.assertIsInstance(outcome, Unavailable)
        self.assertEqual(attempts, [3.0])
