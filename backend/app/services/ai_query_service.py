"""
AI Query Service - the end-to-end pipeline behind POST /ai-query.

Flow:
1. Interpret the question (model call #1)
2. Resolve the intent against the catalog (pure engine functions)
3. Summarize the result set (model call #2)
4. For recommend intents, generate bullets for the top three cards

If interpretation fails for any reason the pipeline degrades to a plain
substring search over the full catalog. Model problems are never raised to the
caller.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from engine.catalog import CardRepository
from engine.models import CardRecord, Intent
from engine.query import search_cards
from app.services.errors import ModelCallError
from app.services.llm_client import CardAssistantModel
from app.services.query_interpreter import QueryInterpreter
from app.services.response_composer import ResponseComposer, fallback_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AIQueryResult:
    cards: list[CardRecord]
    message: str
    comparison: bool = False
    recommendations: Optional[list[str]] = None
    intent: Intent = Intent.SEARCH
    is_fallback: bool = False
    generation_time_ms: Optional[int] = None


class AIQueryService:
    """
    Usage:
        service = AIQueryService(repository, model)
        result = service.process_query("best travel card with lounge access")
    """

    def __init__(self, repository: CardRepository, model: CardAssistantModel):
        self.repository = repository
        self.interpreter = QueryInterpreter(repository, model)
        self.composer = ResponseComposer(model)

    def process_query(self, query: str) -> AIQueryResult:
        start_time = time.time()
        try:
            intent = self.interpreter.interpret(query)
        except ModelCallError as e:
            logger.warning(f"Query interpretation failed: {e}, falling back to text search")
            return self._fallback_search(query, start_time)
        except Exception as e:
            logger.exception(f"Unexpected error during query interpretation: {e}, falling back to text search")
            return self._fallback_search(query, start_time)

        cards = self.interpreter.resolve_cards(intent)
        message = self.composer.summarize(query, intent.intent, len(cards))

        recommendations = self.composer.recommend(
            QueryInterpreter.cards_to_recommend(intent, cards)
        )

        return AIQueryResult(
            cards=cards,
            message=message,
            comparison=intent.intent == Intent.COMPARE,
            recommendations=recommendations or None,
            intent=intent.intent,
            generation_time_ms=int((time.time() - start_time) * 1000),
        )

    def _fallback_search(self, query: str, start_time: float) -> AIQueryResult:
        cards = search_cards(self.repository.all(), query)
        return AIQueryResult(
            cards=cards,
            message=fallback_message(query, len(cards)),
            comparison=False,
            intent=Intent.SEARCH,
            is_fallback=True,
            generation_time_ms=int((time.time() - start_time) * 1000),
        )
