"""
Chat Service - conversational assistant grounded on a catalog excerpt.
"""

import logging
from typing import Iterator, Sequence

from engine.catalog import CardRepository
from engine.models import CardRecord
from app.schemas.ai_schemas import ConversationTurn
from app.services.llm_client import CardAssistantModel

logger = logging.getLogger(__name__)

# Number of catalog cards embedded in the system prompt
CONTEXT_CARD_COUNT = 10


def build_chat_system_prompt(cards: Sequence[CardRecord]) -> str:
    """
    System prompt for the chat assistant.
    Embeds the first CONTEXT_CARD_COUNT cards so answers stay tied to real data.
    """
    card_lines = "\n".join(
        f"- {card.name} by {card.bank}: {card.category} category, ₹{card.annual_fee} annual fee, "
        f"{card.cashback_rate} cashback rate, {'with' if card.lounge_access else 'without'} lounge access"
        for card in cards[:CONTEXT_CARD_COUNT]
    )
    return f"""You are a helpful credit card comparison assistant. You have access to a comprehensive database of Indian credit cards.

Here are some of the available credit cards in our database:
{card_lines}

When users ask about credit cards, provide helpful, accurate information based on this data. Be conversational and helpful. If asked about specific comparisons, highlight key differences in features, fees, and benefits. Always be honest about the limitations of any card and suggest alternatives when appropriate.

Keep responses concise but informative. Focus on the most relevant details for the user's query."""


class ChatService:
    def __init__(self, repository: CardRepository, model: CardAssistantModel):
        self.repository = repository
        self.model = model

    def open_stream(self, messages: Sequence[ConversationTurn]) -> Iterator[str]:
        """
        Start a streamed reply for the conversation.

        Raises:
            ModelCallError: the stream could not be opened
        """
        system_prompt = build_chat_system_prompt(self.repository.all())
        history = [{"role": turn.role, "content": turn.content} for turn in messages]
        logger.info(f"Opening chat stream with {len(history)} conversation turns")
        return self.model.stream_chat(system_prompt, history)
