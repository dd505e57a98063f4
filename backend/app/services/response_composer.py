"""
Response Composer - natural language around query results.

Produces:
1. A 1-2 sentence summary for a result set
2. Recommendation bullets for up to three cards
3. A pros/cons analysis for a single card

Model output is free text; the parsers below are the exact contract the rest of
the backend relies on:
- bullets: every line that, once trimmed, starts with "-" (marker stripped);
  every other line is discarded
- pros/cons: dash lines between the first header line containing "PROS" and
  the first header line containing "CONS" after it are pros; dash lines after
  "CONS" are cons (header lines are the lines that do not start with "-")

Graceful degradation: every public method catches model failures and returns a
deterministic local fallback instead.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from engine.models import CardRecord, Intent
from app.services.errors import ModelCallError
from app.services.llm_client import CardAssistantModel

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CardAnalysis:
    card_id: str
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)
    is_fallback: bool = False


# =============================================================================
# Parsers
# =============================================================================

def parse_dash_lines(text: str) -> list[str]:
    """Return the content of every dash-prefixed line, marker stripped."""
    items = []
    for line in (text or "").splitlines():
        line = line.strip()
        if line.startswith("-"):
            item = line[1:].strip()
            if item:
                items.append(item)
    return items


def _find_header(lines: list[str], word: str, start: int = 0) -> Optional[int]:
    for i in range(start, len(lines)):
        # list items are never headers ("- Considerable fee" is a pro, not CONS)
        if not lines[i].startswith("-") and word in lines[i].upper():
            return i
    return None


def parse_pros_cons(text: str) -> tuple[list[str], list[str]]:
    """
    Split a PROS/CONS formatted answer into two lists.

    The CONS header is the first one after PROS, or the first one anywhere when
    PROS is missing. A missing header yields an empty list for that side only.
    """
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]

    pros_index = _find_header(lines, "PROS")
    cons_start = pros_index + 1 if pros_index is not None else 0
    cons_index = _find_header(lines, "CONS", cons_start)

    pros: list[str] = []
    if pros_index is not None:
        pros_end = cons_index if cons_index is not None else len(lines)
        pros = parse_dash_lines("\n".join(lines[pros_index + 1:pros_end]))
    cons = parse_dash_lines("\n".join(lines[cons_index + 1:])) if cons_index is not None else []
    return pros, cons


# =============================================================================
# Fallbacks
# =============================================================================

def fallback_message(query: str, count: int) -> str:
    return f'Found {count} credit cards matching your search for "{query}".'


def fallback_pros(card: CardRecord) -> list[str]:
    return [f"{card.cashback_rate} cashback rate", f"{card.reward_type} rewards"]


def fallback_cons(card: CardRecord) -> list[str]:
    return [f"₹{card.annual_fee} annual fee"]


# =============================================================================
# Prompts
# =============================================================================

def build_summary_prompt(query: str, intent: Intent, count: int) -> str:
    return f"""User asked: "{query}"
Intent: {intent.value}
Found {count} credit cards.

Generate a helpful response message that:
1. Acknowledges their query
2. Mentions how many cards were found
3. Gives a brief summary of the results
4. Is conversational and helpful

Keep it concise (1-2 sentences)."""


def build_recommendation_prompt(cards: Sequence[CardRecord]) -> str:
    blocks = []
    for card in cards:
        blocks.append(
            f"{card.name} ({card.bank}):\n"
            f"- Annual Fee: ₹{card.annual_fee}\n"
            f"- Cashback Rate: {card.cashback_rate}\n"
            f"- Best For: {', '.join(card.best_for)}\n"
            f"- Benefits: {', '.join(card.benefits[:2])}"
        )
    cards_str = "\n\n".join(blocks)
    return f"""Analyze these credit cards and provide 3-4 concise bullet points about why each is recommended:

{cards_str}

Format as bullet points starting with "-", one key benefit per card."""


def build_analysis_prompt(card: CardRecord) -> str:
    return f"""Analyze this credit card and provide pros and cons:

{card.name} ({card.bank}):
- Annual Fee: ₹{card.annual_fee}
- Joining Fee: ₹{card.joining_fee}
- Cashback Rate: {card.cashback_rate}
- Lounge Access: {'Yes' if card.lounge_access else 'No'}
- Fuel Cashback: {'Yes' if card.fuel_cashback else 'No'}
- Best For: {', '.join(card.best_for)}
- Benefits: {', '.join(card.benefits)}
- Eligibility: {card.eligibility}

Provide 3-4 pros and 2-3 cons in this format:
PROS:
- [pro 1]
- [pro 2]

CONS:
- [con 1]
- [con 2]"""


# =============================================================================
# Composer
# =============================================================================

class ResponseComposer:
    """
    Wraps the language model calls that describe a result set.

    Usage:
        composer = ResponseComposer(model)
        message = composer.summarize("travel cards", Intent.SEARCH, 4)
        bullets = composer.recommend(cards[:3])
        analysis = composer.analyze_card(card)
    """

    def __init__(self, model: CardAssistantModel):
        self.model = model

    def summarize(self, query: str, intent: Intent, count: int) -> str:
        """One-call summary; falls back to a result-count sentence."""
        try:
            message = self.model.summarize(build_summary_prompt(query, intent, count)).strip()
        except ModelCallError as e:
            logger.warning(f"Summary generation failed: {e}, using fallback")
            return fallback_message(query, count)
        except Exception as e:
            logger.exception(f"Unexpected error during summary generation: {e}, using fallback")
            return fallback_message(query, count)

        if not message:
            logger.warning("LLM returned empty summary, using fallback")
            return fallback_message(query, count)
        return message

    def recommend(self, cards: Sequence[CardRecord]) -> list[str]:
        """Bullet justifications for up to three cards; [] when unavailable."""
        if not cards:
            return []
        try:
            text = self.model.generate_bullets(build_recommendation_prompt(cards))
        except ModelCallError as e:
            logger.warning(f"Recommendation generation failed: {e}")
            return []
        except Exception as e:
            logger.exception(f"Unexpected error during recommendation generation: {e}")
            return []
        return parse_dash_lines(text)

    def analyze_card(self, card: CardRecord) -> CardAnalysis:
        """
        Pros/cons for the card detail view.

        An empty pros or cons list (model failure or format drift) is replaced by
        the fallback derived from the card's own cashback rate, reward type and
        annual fee.
        """
        try:
            text = self.model.generate_bullets(build_analysis_prompt(card))
            pros, cons = parse_pros_cons(text)
        except ModelCallError as e:
            logger.warning(f"Card analysis failed for {card.id}: {e}, using fallback")
            pros, cons = [], []
        except Exception as e:
            logger.exception(f"Unexpected error during card analysis for {card.id}: {e}, using fallback")
            pros, cons = [], []

        is_fallback = False
        if not pros:
            pros = fallback_pros(card)
            is_fallback = True
        if not cons:
            cons = fallback_cons(card)
            is_fallback = True
        if is_fallback:
            logger.info(f"Card analysis for {card.id} used deterministic fallback")
        return CardAnalysis(card_id=card.id, pros=pros, cons=cons, is_fallback=is_fallback)
