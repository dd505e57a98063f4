"""
Data models for the Credit Card Comparison engine.
All models are frozen dataclasses so records loaded at startup cannot be mutated.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence


class CardCategory(str, Enum):
    PREMIUM = "Premium"
    MID_TIER = "Mid-tier"
    ENTRY_LEVEL = "Entry-level"
    CASHBACK = "Cashback"


class NetworkType(str, Enum):
    VISA = "Visa"
    MASTERCARD = "Mastercard"
    RUPAY = "RuPay"


class Intent(str, Enum):
    SEARCH = "search"
    COMPARE = "compare"
    RECOMMEND = "recommend"


@dataclass(frozen=True)
class CardRecord:
    """
    A single credit card from the bundled catalog.

    Fields:
    - id: unique identifier across the catalog
    - name, bank: display name and issuing bank
    - category: 'Premium' | 'Mid-tier' | 'Entry-level' | 'Cashback'
    - network_type: 'Visa' | 'Mastercard' | 'RuPay'
    - annual_fee, joining_fee: whole rupees (>= 0)
    - cashback_rate, reward_type, reward_rate, online_shopping_cashback,
      dining_cashback: free text, may embed percentages (e.g. "5% on dining")
    - lounge_access, fuel_cashback, contactless: feature flags
    - benefits: ordered benefit descriptions
    - best_for: spending category labels (e.g. "Travel", "Dining")
    - eligibility: free-text eligibility description
    - image: display image path
    """
    id: str
    name: str
    bank: str
    category: str
    network_type: str
    annual_fee: int
    joining_fee: int
    cashback_rate: str
    reward_type: str
    reward_rate: str
    online_shopping_cashback: str
    dining_cashback: str
    lounge_access: bool
    fuel_cashback: bool
    contactless: bool
    benefits: tuple[str, ...]
    best_for: tuple[str, ...]
    eligibility: str
    image: str = ""


@dataclass(frozen=True)
class FilterCriteria:
    """
    Structured filter built from UI state or from model extraction.

    A field left as None (or an empty sequence) imposes no constraint.
    Values inside one sequence are OR-combined; different fields are AND-combined.
    """
    banks: Optional[Sequence[str]] = None
    categories: Optional[Sequence[str]] = None
    network_types: Optional[Sequence[str]] = None
    lounge_access: Optional[bool] = None
    fuel_cashback: Optional[bool] = None
    no_annual_fee: Optional[bool] = None
    max_annual_fee: Optional[int] = None


@dataclass(frozen=True)
class QueryIntent:
    """
    Interpretation of a free-text question.

    Fields:
    - intent: search | compare | recommend
    - criteria: filters extracted from the question
    - card_names: card/bank name fragments (compare only)
    - best_for: spending category fragments
    """
    intent: Intent = Intent.SEARCH
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    card_names: tuple[str, ...] = ()
    best_for: tuple[str, ...] = ()
