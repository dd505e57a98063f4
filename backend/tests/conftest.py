"""
Fixtures for service and API tests: a deterministic stand-in for the language model.
"""

from typing import Iterator, Optional, Sequence

import pytest

from app.schemas.ai_schemas import QueryClassification
from app.services.errors import ModelCallError
from app.services.llm_client import CardAssistantModel


class StubModel(CardAssistantModel):
    """
    CardAssistantModel returning canned answers.

    Pass an Exception instance for any answer to make that call fail. Every
    prompt is recorded in `calls` as (method, prompt).
    """

    name = "stub"

    def __init__(
        self,
        classification=None,
        summary="Here are some cards for you.",
        bullets="",
        chat_chunks: Optional[Sequence[str]] = None,
    ):
        if isinstance(classification, dict):
            classification = QueryClassification.model_validate(classification)
        self.classification = classification
        self.summary = summary
        self.bullets = bullets
        if chat_chunks is None:
            chat_chunks = ["Hello", " there"]
        self.chat_chunks = chat_chunks
        self.calls = []

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return value

    def classify_query(self, prompt: str) -> QueryClassification:
        self.calls.append(("classify_query", prompt))
        if self.classification is None:
            raise ModelCallError("no classification configured")
        return self._answer(self.classification)

    def summarize(self, prompt: str) -> str:
        self.calls.append(("summarize", prompt))
        return self._answer(self.summary)

    def generate_bullets(self, prompt: str) -> str:
        self.calls.append(("generate_bullets", prompt))
        return self._answer(self.bullets)

    def stream_chat(self, system_prompt: str, messages) -> Iterator[str]:
        self.calls.append(("stream_chat", system_prompt))
        chunks = self._answer(self.chat_chunks)
        return iter(chunks)

    def methods_called(self):
        return [method for method, _ in self.calls]


@pytest.fixture
def stub_model_cls():
    return StubModel
