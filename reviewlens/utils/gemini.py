"""
Gemini client utility.

Thin request/response wrapper around the hosted generative-language API.
Every call is asynchronous; there is no retry policy.
"""

import json
import logging
from typing import Any, Callable, Optional

import google.generativeai as genai

import config.settings as settings
from reviewlens.errors import ExternalServiceError, InputValidationError

logger = logging.getLogger(__name__)


def language_instruction(language: str, fallback: str) -> str:
    """
    Resolve the output-language phrase used in prompts.

    "Auto-detect" (any case) becomes the fallback phrase, e.g.
    "the same language as the reviews".
    """
    if language.lower() == "auto-detect":
        return fallback
    return language


def context_or_default(context: Optional[str]) -> str:
    return context or "No context provided."


class GeminiClient:
    """
    Issues prompts to Gemini and returns plain text or parsed JSON.

    Structured calls send the response schema with
    response_mime_type="application/json"; the reply must parse as JSON
    and convert into the requested model object or the call fails.
    """

    def __init__(
        self,
        api_key: str,
        temperature: Optional[float] = settings.LLM_TEMPERATURE,
        timeout_seconds: int = settings.LLM_TIMEOUT_SECONDS
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key supplied by the user
            temperature: Sampling temperature, None for the service default
            timeout_seconds: Per-request timeout

        Raises:
            InputValidationError: If no API key is given
        """
        if not api_key or not api_key.strip():
            raise InputValidationError(
                "API Key is not set. Save one with `set-key` or set GOOGLE_API_KEY."
            )

        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

        genai.configure(api_key=api_key.strip())

        logger.info(f"Initialized GeminiClient with timeout={timeout_seconds}s")

    def _model(self, model_name: str, schema: Optional[dict] = None):
        generation_config = {}
        if self.temperature is not None:
            generation_config["temperature"] = self.temperature
        if schema is not None:
            generation_config["response_mime_type"] = "application/json"
            generation_config["response_schema"] = schema

        return genai.GenerativeModel(
            model_name=model_name,
            generation_config=generation_config or None
        )

    async def _generate(
        self,
        prompt: str,
        model_name: str,
        task: str,
        subject: str,
        schema: Optional[dict] = None
    ) -> str:
        model = self._model(model_name, schema)

        try:
            response = await model.generate_content_async(
                prompt,
                request_options={"timeout": self.timeout_seconds}
            )
            text = response.text
        except Exception as e:
            logger.error(f"Gemini call failed ({task}): {e}")
            raise ExternalServiceError(f"Failed to {task}. Gemini API error: {e}") from e

        if not text or not text.strip():
            logger.error(f"Gemini returned an empty response ({task})")
            raise ExternalServiceError(
                f"Failed to {task}. Gemini API error: "
                f"The model did not return {subject}. The response was empty."
            )

        return text

    async def generate_text(
        self,
        prompt: str,
        model_name: str,
        task: str,
        subject: str = "a response"
    ) -> str:
        """
        Run a free-text prompt.

        Raises:
            ExternalServiceError: On API failure or an empty response
        """
        logger.debug(f"Requesting text from {model_name} ({task})")
        return await self._generate(prompt, model_name, task, subject)

    async def generate_structured(
        self,
        prompt: str,
        schema: dict,
        parse: Callable[[Any], Any],
        model_name: str,
        task: str,
        subject: str
    ) -> Any:
        """
        Run a prompt constrained by a response schema.

        Args:
            prompt: Prompt text
            schema: Gemini response schema (OpenAPI subset, upper-case types)
            parse: Converts the decoded JSON into a model object;
                   must raise ValueError on a shape mismatch
            model_name: Gemini model to use
            task: Verb phrase for error messages ("process reviews")
            subject: Noun phrase for empty responses ("a valid summary")

        Raises:
            ExternalServiceError: On API failure, empty, non-JSON or
                                  non-conforming responses
        """
        logger.debug(f"Requesting structured output from {model_name} ({task})")
        text = await self._generate(prompt, model_name, task, subject, schema)

        try:
            data = json.loads(text.strip())
            return parse(data)
        except (json.JSONDecodeError, ValueError, TypeError) as e:
            logger.error(f"Non-conforming Gemini response ({task}): {e}")
            raise ExternalServiceError(
                f"Failed to {task}. Gemini API error: response did not match the expected format ({e})"
            ) from e
