"""
Card Repository - loads a credit card dataset once and exposes it read-only.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union

from engine.models import CardCategory, CardRecord, NetworkType

logger = logging.getLogger(__name__)

# JSON key -> CardRecord attribute
FIELD_MAP = {
    "id": "id",
    "name": "name",
    "bank": "bank",
    "category": "category",
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
    "contactless": "contactless",
    "benefits": "benefits",
    "bestFor": "best_for",
    "eligibility": "eligibility",
    "image": "image",
}

OPTIONAL_KEYS = {"image"}

_CATEGORIES = {c.value for c in CardCategory}
_NETWORKS = {n.value for n in NetworkType}


class CatalogLoadError(ValueError):
    """Raised when the card dataset is malformed."""


def card_from_dict(raw: dict[str, Any]) -> CardRecord:
    """
    Build a CardRecord from one camelCase dataset entry.

    Raises:
        CatalogLoadError: missing fields, negative fees or unknown enum values
    """
    missing = [key for key in FIELD_MAP if key not in raw and key not in OPTIONAL_KEYS]
    if missing:
        raise CatalogLoadError(f"Card {raw.get('id', '?')!r} is missing fields: {', '.join(missing)}")

    if raw["category"] not in _CATEGORIES:
        raise CatalogLoadError(f"Card {raw['id']!r} has unknown category {raw['category']!r}")
    if raw["networkType"] not in _NETWORKS:
        raise CatalogLoadError(f"Card {raw['id']!r} has unknown network type {raw['networkType']!r}")

    for fee_key in ("annualFee", "joiningFee"):
        fee = raw[fee_key]
        if isinstance(fee, bool) or not isinstance(fee, int) or fee < 0:
            raise CatalogLoadError(f"Card {raw['id']!r} has invalid {fee_key}: {fee!r}")

    values = {attr: raw.get(key, "") for key, attr in FIELD_MAP.items()}
    values["id"] = str(values["id"])
    values["benefits"] = tuple(values["benefits"])
    values["best_for"] = tuple(values["best_for"])
    return CardRecord(**values)


def card_to_dict(card: CardRecord) -> dict[str, Any]:
    """Inverse of card_from_dict; collections come back as lists."""
    out: dict[str, Any] = {}
    for key, attr in FIELD_MAP.items():
        value = getattr(card, attr)
        out[key] = list(value) if isinstance(value, tuple) else value
    return out


class CardRepository:
    """
    Immutable, in-memory collection of CardRecord objects.

    Usage:
        repo = CardRepository.from_json_file("credit_cards.json")
        repo.all()          # tuple of every card, dataset order
        repo.get("hdfc-regalia")
    """

    def __init__(self, cards: Iterable[CardRecord]):
        cards = tuple(cards)
        by_id: dict[str, CardRecord] = {}
        for card in cards:
            if card.id in by_id:
                raise CatalogLoadError(f"Duplicate card id: {card.id!r}")
            by_id[card.id] = card
        self._cards = cards
        self._by_id = by_id

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> "CardRepository":
        return cls(card_from_dict(r) for r in records)

    @classmethod
    def from_json_file(cls, path: Union[str, os.PathLike]) -> "CardRepository":
        """Load and validate the JSON array of cards at `path`."""
        data_path = Path(path)
        with open(data_path, "r", encoding="utf-8") as f:
            records = json.load(f)
        if not isinstance(records, list):
            raise CatalogLoadError(f"{data_path} must contain a JSON array of cards")
        repo = cls.from_records(records)
        logger.info(f"Loaded {len(repo)} credit cards from {data_path}")
        return repo

    def all(self) -> tuple[CardRecord, ...]:
        return self._cards

    def get(self, card_id: str) -> Optional[CardRecord]:
        return self._by_id.get(card_id)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[CardRecord]:
        return iter(self._cards)
