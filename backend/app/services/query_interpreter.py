"""
Query Interpreter - turns a free-text question into a QueryIntent and a result set.

Classification and slot extraction are delegated to the language model with a
fixed instruction prompt; the structured answer is then applied to the card
catalog with the pure functions in engine.query.
"""

import logging
from typing import Sequence

from engine.catalog import CardRepository
from engine.models import CardRecord, Intent, QueryIntent
from engine.query import filter_by_best_for, filter_cards, get_unique_values, match_card_names
from app.services.llm_client import CardAssistantModel

logger = logging.getLogger(__name__)

# Cards forwarded to the composer for recommendation bullets
MAX_RECOMMENDED_CARDS = 3


def build_interpretation_prompt(query: str, cards: Sequence[CardRecord]) -> str:
    """
    Instruction prompt for intent classification.

    The available banks, categories and networks are taken from the catalog so
    the model only ever sees values that can actually match.
    """
    banks = ", ".join(get_unique_values(cards, "bank"))
    categories = ", ".join(get_unique_values(cards, "category"))
    networks = ", ".join(get_unique_values(cards, "network_type"))

    return f"""Analyze this credit card query and extract the user's intent and any filters:
"{query}"

Available banks: {banks}
Available categories: {categories}
Available networks: {networks}

Extract filters based on keywords like:
- "lounge access", "airport lounge" -> filters.loungeAccess: true
- "fuel cashback", "petrol cashback" -> filters.fuelCashback: true
- "no annual fee", "free card" -> filters.noAnnualFee: true
- "best for travel", "travel cards", "dining", "shopping" -> bestFor: ["Travel"], ["Dining"], ["Shopping"]
- "under 5000", "below 2000" -> filters.maxAnnualFee: number

Set intent to "compare" when the user wants to compare specific cards and list the
card or bank names mentioned in cardNames. Use "recommend" when the user asks which
card is best or what they should get, otherwise "search".

Respond with a JSON object of the form:
{{"intent": "search" | "compare" | "recommend",
  "filters": {{"banks": [...], "categories": [...], "networkTypes": [...],
              "loungeAccess": bool, "fuelCashback": bool, "noAnnualFee": bool,
              "maxAnnualFee": number}},
  "cardNames": [...],
  "bestFor": [...]}}
Omit any field that the query does not mention."""


class QueryInterpreter:
    """
    Converts questions into QueryIntent objects and resolves them against the catalog.

    Pattern: Constructor injection for the catalog and model (facilitates testing)

    Usage:
        interpreter = QueryInterpreter(repository, model)
        intent = interpreter.interpret("cards with lounge access under 3000")
        cards = interpreter.resolve_cards(intent)
    """

    def __init__(self, repository: CardRepository, model: CardAssistantModel):
        self.repository = repository
        self.model = model

    def interpret(self, query: str) -> QueryIntent:
        """
        Ask the model to classify `query`.

        Raises:
            ModelCallError: the model failed or returned an unparseable answer
        """
        prompt = build_interpretation_prompt(query, self.repository.all())
        classification = self.model.classify_query(prompt)
        intent = classification.to_intent()
        logger.info(
            f"Interpreted query as {intent.intent.value} "
            f"(filters={intent.criteria}, card_names={intent.card_names}, best_for={intent.best_for})"
        )
        return intent

    def resolve_cards(self, intent: QueryIntent) -> list[CardRecord]:
        """
        Apply an intent to the catalog.

        Rules:
        - Filters first, then the best-for fragments.
        - A compare intent with card names ignores the filters entirely and
          returns every card whose name or bank matches one of the names.
        """
        all_cards = self.repository.all()

        if intent.intent == Intent.COMPARE and intent.card_names:
            return match_card_names(all_cards, intent.card_names)

        results = filter_cards(all_cards, intent.criteria)
        return filter_by_best_for(results, intent.best_for)

    @staticmethod
    def cards_to_recommend(intent: QueryIntent, cards: Sequence[CardRecord]) -> list[CardRecord]:
        """The subset forwarded for recommendation bullets (recommend intent only)."""
        if intent.intent != Intent.RECOMMEND:
            return []
        return list(cards[:MAX_RECOMMENDED_CARDS])
