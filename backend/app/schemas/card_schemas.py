"""
Catalog Schemas - DTOs for browsing, faceting and comparing credit cards.

JSON uses the same camelCase keys as the bundled dataset so the UI can consume
the catalog API and the AI endpoints with one card type.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from engine.catalog import card_to_dict
from engine.models import CardCategory, CardRecord, FilterCriteria, NetworkType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreditCardSchema(CamelModel):
    """Serialized CardRecord."""
    id: str
    name: str
    bank: str
    category: CardCategory
    annual_fee: int = Field(..., ge=0)
    joining_fee: int = Field(..., ge=0)
    reward_type: str
    reward_rate: str
    lounge_access: bool
    fuel_cashback: bool
    eligibility: str
    benefits: List[str]
    cashback_rate: str
    best_for: List[str]
    network_type: NetworkType
    contactless: bool
    online_shopping_cashback: str
    dining_cashback: str
    image: str = ""

    @classmethod
    def from_record(cls, card: CardRecord) -> "CreditCardSchema":
        return cls.model_validate(card_to_dict(card))


class FilterSchema(CamelModel):
    """
    Filter panel state. Every field is optional; an empty list means "any".

    Example:
        {"banks": ["HDFC Bank"], "loungeAccess": true, "maxAnnualFee": 2500}
    """
    banks: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    network_types: Optional[List[str]] = None
    lounge_access: Optional[bool] = None
    fuel_cashback: Optional[bool] = None
    no_annual_fee: Optional[bool] = None
    max_annual_fee: Optional[int] = Field(None, ge=0)

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(**self.model_dump())


SortField = Literal[
    "name",
    "bank",
    "category",
    "annualFee",
    "joiningFee",
    "cashbackRate",
    "rewardType",
    "loungeAccess",
    "fuelCashback",
    "networkType",
]


class CatalogQuery(CamelModel):
    """
    Explicit browse state sent by the catalog page: search text, filters and sort.
    Defaults reproduce the landing page (all cards, cheapest annual fee first).
    """
    search: str = ""
    filters: FilterSchema = Field(default_factory=FilterSchema)
    sort_by: SortField = "annualFee"
    order: Literal["asc", "desc"] = "asc"


class CatalogResponse(CamelModel):
    cards: List[CreditCardSchema]
    total: int


class FacetsResponse(CamelModel):
    """Distinct values available to the filter panel."""
    banks: List[str]
    categories: List[str]
    network_types: List[str]


class CompareRequest(CamelModel):
    ids: List[str] = Field(..., min_length=1, description="Card ids in display order")
