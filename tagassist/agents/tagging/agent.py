"""
Tagging generation backend.

Wraps the Gemini API behind a single async call: prompt text in, raw
response text out. Retries, quotas and authentication belong to the SDK and
the Google project; this layer only normalizes failures to BackendError.
"""

import logging
from typing import Optional, Protocol

from google import genai
from google.genai import types

from tagassist.agents.tagging.prompts import TAGGING_SYSTEM_PROMPT
from tagassist.config import settings
from tagassist.exceptions import BackendError

logger = logging.getLogger(__name__)


class GenerationBackend(Protocol):
    """An external text generator: one prompt in, one raw text response out."""

    async def generate(self, prompt: str) -> str:
        ...


class GeminiGenerationBackend:
    """
    GenerationBackend implemented with the Google Gen AI SDK.

    The client is created lazily on first use so that constructing the
    backend never needs network access or a configured key.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        system_instruction: str = TAGGING_SYSTEM_PROMPT,
    ):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.temperature = settings.GEMINI_TEMPERATURE if temperature is None else temperature
        self.system_instruction = system_instruction
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is not None:
            return self._client

        if not self.api_key:
            logger.error("GOOGLE_API_KEY not configured")
            raise BackendError(
                "GOOGLE_API_KEY is not configured. "
                "Please set it in your .env file to request tag recommendations."
            )

        self._client = genai.Client(api_key=self.api_key)
        logger.info("Gemini client initialized successfully for tagging")
        return self._client

    async def generate(self, prompt: str) -> str:
        """
        Send the prompt to Gemini and return the raw response text.

        Raises:
            BackendError: If the client is not configured, the API call
                fails, or the model returns no text.
        """
        client = self._get_client()

        config = types.GenerateContentConfig(
            system_instruction=self.system_instruction,
            temperature=self.temperature,
        )

        try:
            logger.info(f"Calling Gemini API (model={self.model})...")
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}")
            raise BackendError(f"Gemini request failed: {e}") from e

        if not response.candidates or not response.candidates[0].content:
            logger.error("Empty response from Gemini API")
            raise BackendError("Gemini returned no candidates")

        # Prefer text from parts; response.text can be None even when parts have text
        content = None
        candidate = response.candidates[0]
        if candidate.content and candidate.content.parts:
            for part in candidate.content.parts:
                if getattr(part, "text", None):
                    content = part.text
                    break

        if not content:
            content = response.text

        if not content:
            logger.error("Empty text in Gemini response")
            raise BackendError("Gemini returned an empty response")

        return content
