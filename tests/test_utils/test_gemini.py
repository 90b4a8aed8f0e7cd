"""
Unit tests for the Gemini client wrapper.

The Gemini SDK is mocked; no network calls are made.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from reviewlens.errors import ExternalServiceError, InputValidationError
from reviewlens.models.summary import Summary
from reviewlens.utils.gemini import GeminiClient, context_or_default, language_instruction


@pytest.fixture
def mock_genai():
    with patch("reviewlens.utils.gemini.genai") as genai:
        yield genai


def _respond_with(mock_genai, text=None, error=None):
    model = mock_genai.GenerativeModel.return_value
    if error is not None:
        model.generate_content_async = AsyncMock(side_effect=error)
    else:
        model.generate_content_async = AsyncMock(return_value=MagicMock(text=text))
    return model


def test_missing_api_key_rejected(mock_genai):
    with pytest.raises(InputValidationError, match="API Key is not set"):
        GeminiClient(api_key="   ")
    mock_genai.configure.assert_not_called()


def test_client_configures_sdk(mock_genai):
    GeminiClient(api_key=" test-key ")
    mock_genai.configure.assert_called_once_with(api_key="test-key")


def test_structured_call_sends_schema_and_parses(mock_genai, summary_payload):
    _respond_with(mock_genai, text=json.dumps(summary_payload))
    client = GeminiClient(api_key="test-key")
    schema = {"type": "OBJECT"}

    result = asyncio.run(client.generate_structured(
        "prompt", schema, Summary.from_dict, "gemini-2.5-flash", "process reviews", "a valid summary"
    ))

    assert isinstance(result, Summary)
    assert result.pros == summary_payload["pros"]
    _, kwargs = mock_genai.GenerativeModel.call_args
    assert kwargs["model_name"] == "gemini-2.5-flash"
    assert kwargs["generation_config"]["response_mime_type"] == "application/json"
    assert kwargs["generation_config"]["response_schema"] is schema


def test_text_call_has_no_generation_config(mock_genai):
    _respond_with(mock_genai, text="Hello there")
    client = GeminiClient(api_key="test-key")

    assert asyncio.run(client.generate_text("prompt", "gemini-2.5-flash", "answer question")) == "Hello there"
    _, kwargs = mock_genai.GenerativeModel.call_args
    assert kwargs["generation_config"] is None


def test_api_failure_wrapped(mock_genai):
    _respond_with(mock_genai, error=RuntimeError("quota exceeded"))
    client = GeminiClient(api_key="test-key")

    with pytest.raises(ExternalServiceError) as excinfo:
        asyncio.run(client.generate_text("prompt", "gemini-2.5-flash", "answer question"))

    assert str(excinfo.value) == "Failed to answer question. Gemini API error: quota exceeded"


def test_empty_response_is_an_error(mock_genai):
    _respond_with(mock_genai, text="  ")
    client = GeminiClient(api_key="test-key")

    with pytest.raises(ExternalServiceError, match="did not return a valid summary. The response was empty"):
        asyncio.run(client.generate_structured(
            "prompt", {}, Summary.from_dict, "m", "process reviews", "a valid summary"
        ))


@pytest.mark.parametrize("text", ["not json", json.dumps({"pros": []}), json.dumps([1, 2])])
def test_non_conforming_response_is_an_error(mock_genai, text):
    _respond_with(mock_genai, text=text)
    client = GeminiClient(api_key="test-key")

    with pytest.raises(ExternalServiceError, match="Failed to process reviews"):
        asyncio.run(client.generate_structured(
            "prompt", {}, Summary.from_dict, "m", "process reviews", "a valid summary"
        ))


def test_language_instruction():
    assert language_instruction("Auto-detect", "the same language as the reviews") == \
        "the same language as the reviews"
    assert language_instruction("AUTO-DETECT", "fallback") == "fallback"
    assert language_instruction("French", "fallback") == "French"


def test_context_default():
    assert context_or_default("") == "No context provided."
    assert context_or_default("Headphones") == "Headphones"
