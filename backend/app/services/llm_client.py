"""
Language model capability used by the AI assistant.

The rest of the backend talks to the model only through CardAssistantModel, so
tests (and an offline deployment) can swap in a stub without touching the query
engine. OpenAICardModel is the production implementation.

Every call is single-shot (no automatic retries by default) and bounded by
LLMConfig.TIMEOUT_SECONDS. Failures surface as ModelCallError so callers can take
their documented fallback path.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Callable, Iterator, Optional, Sequence, TypeVar

from openai import OpenAI, APIError, APITimeoutError
from pydantic import ValidationError

from app.schemas.ai_schemas import QueryClassification
from app.services.errors import ModelCallError, ModelResponseError

# Configure logging
logger = logging.getLogger(__name__)

T = TypeVar("T")


def _env(name: str, default: T, cast: Callable[[str], T]) -> T:
    """Read and cast an environment variable, falling back to `default` on bad input."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; falling back to default %s", name, raw, default)
        return default


# =============================================================================
# LLM Configuration
# =============================================================================

class LLMConfig:
    """Centralized LLM settings with environment variable overrides"""
    MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
    CHAT_MODEL = os.getenv("LLM_CHAT_MODEL", "gpt-4o-mini")
    TEMPERATURE = _env("LLM_TEMPERATURE", 0.7, float)
    MAX_TOKENS = _env("LLM_MAX_TOKENS", 500, int)
    TIMEOUT_SECONDS = _env("LLM_TIMEOUT", 15.0, float)
    MAX_RETRIES = _env("LLM_MAX_RETRIES", 0, int)


# =============================================================================
# Capability interface
# =============================================================================

class CardAssistantModel(ABC):
    """Narrow interface over the hosted language model."""

    name: str = "abstract"

    @abstractmethod
    def classify_query(self, prompt: str) -> QueryClassification:
        """Classify a question and extract filters. Raises ModelCallError."""

    @abstractmethod
    def summarize(self, prompt: str) -> str:
        """Return a short free-text answer. Raises ModelCallError."""

    @abstractmethod
    def generate_bullets(self, prompt: str) -> str:
        """Return free text expected to contain dash-prefixed lines. Raises ModelCallError."""

    @abstractmethod
    def stream_chat(self, system_prompt: str, messages: Sequence[dict]) -> Iterator[str]:
        """
        Open a streamed chat completion and return an iterator of text deltas.

        The request is sent before this method returns, so connection and API
        errors raise ModelCallError here rather than mid-stream.
        """


# =============================================================================
# OpenAI implementation
# =============================================================================

class OpenAICardModel(CardAssistantModel):
    """
    CardAssistantModel backed by OpenAI chat completions.

    Usage:
        model = OpenAICardModel()                 # reads OPENAI_API_KEY
        model = OpenAICardModel(client=OpenAI())  # explicit client
    """

    def __init__(self, client: Optional[OpenAI] = None, api_key: Optional[str] = None):
        if client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if api_key:
                client = OpenAI(
                    api_key=api_key,
                    timeout=LLMConfig.TIMEOUT_SECONDS,
                    max_retries=LLMConfig.MAX_RETRIES,
                )
                logger.info(f"OpenAI client initialized with model: {LLMConfig.MODEL}")
            else:
                logger.warning(
                    "OPENAI_API_KEY not set. AI assistant will use local fallbacks. "
                    "Set the environment variable to enable AI-powered answers."
                )
        self.client = client
        self.name = LLMConfig.MODEL

    def _require_client(self) -> OpenAI:
        if self.client is None:
            raise ModelCallError("OpenAI API key not configured")
        return self.client

    def _complete(self, messages: list[dict], *, json_mode: bool = False) -> str:
        client = self._require_client()
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = client.chat.completions.create(
                model=LLMConfig.MODEL,
                messages=messages,
                temperature=LLMConfig.TEMPERATURE,
                max_tokens=LLMConfig.MAX_TOKENS,
                **kwargs,
            )
        except APITimeoutError as e:
            raise ModelCallError(f"OpenAI API timeout after {LLMConfig.TIMEOUT_SECONDS}s") from e
        except APIError as e:
            raise ModelCallError(f"OpenAI API error: {e}") from e

        if not response.choices:
            raise ModelResponseError("OpenAI returned no choices")
        return (response.choices[0].message.content or "").strip()

    def classify_query(self, prompt: str) -> QueryClassification:
        text = self._complete(
            [
                {
                    "role": "system",
                    "content": "You classify credit card questions. Reply with a single JSON object only.",
                },
                {"role": "user", "content": prompt},
            ],
            json_mode=True,
        )
        try:
            return QueryClassification.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ModelResponseError(f"Unparseable query classification: {e}") from e

    def summarize(self, prompt: str) -> str:
        return self._complete([
            {"role": "system", "content": "You are a helpful credit card comparison assistant."},
            {"role": "user", "content": prompt},
        ])

    def generate_bullets(self, prompt: str) -> str:
        return self._complete([
            {"role": "system", "content": "You are a helpful credit card analyst. Use '-' bullet points."},
            {"role": "user", "content": prompt},
        ])

    def stream_chat(self, system_prompt: str, messages: Sequence[dict]) -> Iterator[str]:
        client = self._require_client()
        try:
            stream = client.chat.completions.create(
                model=LLMConfig.CHAT_MODEL,
                messages=[{"role": "system", "content": system_prompt}, *messages],
                temperature=0.7,
                max_tokens=500,
                stream=True,
            )
        except APITimeoutError as e:
            raise ModelCallError(f"OpenAI API timeout after {LLMConfig.TIMEOUT_SECONDS}s") from e
        except APIError as e:
            raise ModelCallError(f"OpenAI API error: {e}") from e

        def deltas() -> Iterator[str]:
            for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content

        return deltas()
