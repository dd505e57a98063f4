"""
Query engine: filter, search, sort and facet functions over card collections.
Every function is pure - inputs are never mutated and results preserve input order
unless a sort is requested.
"""

import re
from functools import cmp_to_key
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from engine.models import CardRecord, FilterCriteria


# camelCase keys used by the dataset and the UI -> CardRecord attributes
FIELD_ALIASES = {
    "networkType": "network_type",
    "annualFee": "annual_fee",
    "joiningFee": "joining_fee",
    "cashbackRate": "cashback_rate",
    "rewardType": "reward_type",
    "rewardRate": "reward_rate",
    "onlineShoppingCashback": "online_shopping_cashback",
    "diningCashback": "dining_cashback",
    "loungeAccess": "lounge_access",
    "fuelCashback": "fuel_cashback",
    "bestFor": "best_for",
    "networkTypes": "network_types",
    "noAnnualFee": "no_annual_fee",
    "maxAnnualFee": "max_annual_fee",
}

CARD_FIELDS = frozenset(CardRecord.__dataclass_fields__)
CRITERIA_FIELDS = frozenset(FilterCriteria.__dataclass_fields__)

# First percentage-like numeral, e.g. "5%" in "5% on dining", "1.5" in "1.5% flat"
_RATE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*%")

Criteria = Union[FilterCriteria, Mapping[str, Any], None]


def resolve_field(field: str) -> str:
    """Map a camelCase or snake_case field name onto a CardRecord attribute."""
    attr = FIELD_ALIASES.get(field, field)
    if attr not in CARD_FIELDS:
        raise ValueError(f"Unknown card field: {field!r}")
    return attr


def as_criteria(criteria: Criteria) -> FilterCriteria:
    """
    Normalise UI state or model output into FilterCriteria.

    Accepts an existing FilterCriteria, None, or a mapping with camelCase or
    snake_case keys. Unknown keys are ignored.
    """
    if criteria is None:
        return FilterCriteria()
    if isinstance(criteria, FilterCriteria):
        return criteria
    values = {}
    for key, value in criteria.items():
        attr = FIELD_ALIASES.get(key, key)
        if attr in CRITERIA_FIELDS:
            values[attr] = value
    return FilterCriteria(**values)


def parse_rate(text: str) -> float:
    """
    Extract the first percentage-like numeral from a rate descriptor.

    "5% on dining" -> 5.0, "Up to 1.5% flat" -> 1.5, "10X reward points" -> 0.0.
    """
    match = _RATE_PATTERN.search(text or "")
    return float(match.group(1)) if match else 0.0


def _matches(card: CardRecord, criteria: FilterCriteria) -> bool:
    # Empty sequences are treated exactly like unset fields
    if criteria.banks and card.bank not in criteria.banks:
        return False
    if criteria.categories and card.category not in criteria.categories:
        return False
    if criteria.network_types and card.network_type not in criteria.network_types:
        return False
    if criteria.lounge_access is not None and card.lounge_access != criteria.lounge_access:
        return False
    if criteria.fuel_cashback is not None and card.fuel_cashback != criteria.fuel_cashback:
        return False
    if criteria.no_annual_fee and card.annual_fee > 0:
        return False
    if criteria.max_annual_fee is not None and card.annual_fee > criteria.max_annual_fee:
        return False
    return True


def filter_cards(cards: Iterable[CardRecord], criteria: Criteria) -> list[CardRecord]:
    """
    Return the cards matching every set criterion, in input order.

    Args:
        cards: cards to filter
        criteria: FilterCriteria or an equivalent mapping (None = no constraint)

    Returns:
        New list; the input is not modified
    """
    resolved = as_criteria(criteria)
    return [card for card in cards if _matches(card, resolved)]


def _search_text(card: CardRecord) -> str:
    parts = [
        card.name,
        card.bank,
        card.category,
        card.reward_type,
        card.eligibility,
        *card.benefits,
        *card.best_for,
        card.network_type,
    ]
    return "\n".join(parts).lower()


def search_cards(cards: Iterable[CardRecord], query: str) -> list[CardRecord]:
    """
    AND-of-substrings text search.

    The query is lower-cased and split on whitespace; a card matches when every
    token occurs somewhere in its searchable text. Results keep input order.
    An empty or whitespace-only query returns the cards unchanged.
    """
    cards = list(cards)
    tokens = (query or "").lower().split()
    if not tokens:
        return cards
    return [card for card in cards if all(token in _search_text(card) for token in tokens)]


def _compare_values(a: Any, b: Any) -> int:
    if isinstance(a, bool) and isinstance(b, bool):
        return int(a) - int(b)
    if isinstance(a, str) and isinstance(b, str):
        a_key, b_key = a.casefold(), b.casefold()
        return (a_key > b_key) - (a_key < b_key)
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return (a > b) - (a < b)
    return 0


def sort_cards(cards: Iterable[CardRecord], field: str, order: str = "asc") -> list[CardRecord]:
    """
    Stable sort by a card field.

    Strings compare case-insensitively, numbers by value, booleans False < True.
    cashback_rate is compared by its parsed percentage (see parse_rate).
    'desc' negates the comparison, so equal keys keep their input order in
    both directions.

    Raises:
        ValueError: unknown field or order
    """
    if order not in ("asc", "desc"):
        raise ValueError(f"Invalid sort order: {order!r}. Must be 'asc' or 'desc'.")
    attr = resolve_field(field)
    sign = 1 if order == "asc" else -1

    if attr == "cashback_rate":
        def key_of(card):
            return parse_rate(card.cashback_rate)
    else:
        def key_of(card):
            return getattr(card, attr)

    def comparator(a: CardRecord, b: CardRecord) -> int:
        return sign * _compare_values(key_of(a), key_of(b))

    return sorted(cards, key=cmp_to_key(comparator))


def get_unique_values(cards: Iterable[CardRecord], field: str) -> list[Any]:
    """Distinct values of `field` across the cards, in first-seen order."""
    attr = resolve_field(field)
    seen = set()
    values = []
    for card in cards:
        value = getattr(card, attr)
        if value not in seen:
            seen.add(value)
            values.append(value)
    return values


def filter_by_best_for(cards: Iterable[CardRecord], fragments: Optional[Sequence[str]]) -> list[CardRecord]:
    """Keep cards with a best-for label containing any fragment (case-insensitive)."""
    cards = list(cards)
    needles = [f.lower() for f in fragments or [] if f and f.strip()]
    if not needles:
        return cards
    return [
        card for card in cards
        if any(needle in label.lower() for needle in needles for label in card.best_for)
    ]


def match_card_names(cards: Iterable[CardRecord], fragments: Optional[Sequence[str]]) -> list[CardRecord]:
    """Keep cards whose name or bank contains any fragment (case-insensitive)."""
    needles = [f.lower() for f in fragments or [] if f and f.strip()]
    return [
        card for card in cards
        if any(needle in card.name.lower() or needle in card.bank.lower() for needle in needles)
    ]
