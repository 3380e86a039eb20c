# chess_coach/services/advisory_service.py
"""
Provides a concrete implementation of the `AdvisoryService` protocol backed
by Google's Gemini models through the `google-genai` SDK.

The coach never raises to its caller. Any failure (no API key, network error,
timeout, blocked or empty response) is logged and converted into one of the
fixed placeholder messages from `AdvisorySettings`, so the board stays usable
and the "thinking" indicator is always released.
"""

import asyncio
import time
from typing import TYPE_CHECKING, List, Optional

import structlog
from google import genai
from google.genai import types as genai_types

from chess_coach.exceptions import AdvisoryUnavailableError
from chess_coach.types import FEN, AdvisoryService
from chess_coach.utils import metrics
from chess_coach.utils.retry import retry_with_backoff

if TYPE_CHECKING:
    from chess_coach.config.settings import AdvisorySettings

logger = structlog.get_logger(__name__)

PROMPT_TEMPLATE = """
You are a World Class Chess Coach.
Analyze the following chess position (FEN): {fen}
Previous moves: {moves}

Provide a brief analysis (max 3 sentences):
1. Who has the advantage?
2. What is the main strategic idea for the current player?
3. Suggest a candidate move.
"""


def build_prompt(fen: FEN, moves: List[str]) -> str:
    return PROMPT_TEMPLATE.format(fen=fen, moves=", ".join(moves) if moves else "(none)").strip()


class GeminiAdvisoryService(AdvisoryService):
    """A service that asks a Gemini model to comment on a position."""

    def __init__(self, client: Optional[genai.Client], settings: "AdvisorySettings"):
        """
        Use the `create` class method to build the client from settings.

        Args:
            client: A `genai.Client`, or None when no API key is configured.
            settings: The advisory settings (model, temperature, timeouts, messages).
        """
        self._client = client
        self._settings = settings

    @classmethod
    def create(cls, settings: "AdvisorySettings") -> "GeminiAdvisoryService":
        if not settings.api_key:
            logger.warning("No Gemini API key configured; the coach will be unavailable.")
            return cls(None, settings)
        return cls(genai.Client(api_key=settings.api_key), settings)

    async def _generate(self, prompt: str) -> str:
        response = await asyncio.wait_for(
            self._client.aio.models.generate_content(
                model=self._settings.model,
                contents=prompt,
                config=genai_types.GenerateContentConfig(temperature=self._settings.temperature),
            ),
            timeout=self._settings.timeout_s,
        )
        return (response.text or "").strip()

    async def _request_analysis(self, fen: FEN, moves: List[str]) -> str:
        """
        Runs the request with retries.

        Raises:
            AdvisoryUnavailableError: If the coach cannot produce an answer.
        """
        if self._client is None:
            raise AdvisoryUnavailableError("No Gemini API key configured.")

        generate = retry_with_backoff(
            attempts=self._settings.max_attempts, service="gemini"
        )(self._generate)
        try:
            return await generate(build_prompt(fen, moves))
        except Exception as e:
            raise AdvisoryUnavailableError(f"Gemini request failed: {e}") from e

    async def analyze(self, fen: FEN, moves: List[str]) -> str:
        """
        Returns a short coach commentary for `fen`, or a placeholder message.
        """
        started = time.perf_counter()
        try:
            text = await self._request_analysis(fen, moves)
        except AdvisoryUnavailableError as e:
            logger.warning("Coach analysis unavailable.", error=str(e))
            metrics.ADVISORY_REQUESTS_TOTAL.labels(outcome="unavailable").inc()
            return self._settings.unavailable_message
        finally:
            metrics.ADVISORY_DURATION_SECONDS.observe(time.perf_counter() - started)

        if not text:
            logger.warning("Coach returned an empty response.", fen=fen)
            metrics.ADVISORY_REQUESTS_TOTAL.labels(outcome="empty").inc()
            return self._settings.empty_response_message

        metrics.ADVISORY_REQUESTS_TOTAL.labels(outcome="ok").inc()
        return text
