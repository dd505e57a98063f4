"""
AI Assistant Schemas - DTOs for the natural-language query pipeline.

This module defines Pydantic models for structured data transfer between:
- Language model -> Query Interpreter (QueryClassification, strict)
- Query pipeline -> API Response Layer (AIQueryResponse, CardAnalysisResponse)
- Chat UI -> Chat Service (ChatRequest)

The classification schema is the contract the model output is validated against;
anything that does not fit it is treated as a failed model call.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from engine.models import FilterCriteria, Intent, QueryIntent
from app.schemas.card_schemas import CamelModel, CreditCardSchema


class ExtractedFilters(CamelModel):
    """Filters the model may extract from a question. All optional."""
    model_config = ConfigDict(extra="ignore")

    banks: Optional[List[str]] = Field(None, description="Banks to filter by")
    categories: Optional[List[str]] = Field(None, description="Card categories (Premium, Mid-tier, Entry-level, Cashback)")
    lounge_access: Optional[bool] = Field(None, description="Whether lounge access is required")
    fuel_cashback: Optional[bool] = Field(None, description="Whether fuel cashback is required")
    no_annual_fee: Optional[bool] = Field(None, description="Whether no annual fee is required")
    network_types: Optional[List[str]] = Field(None, description="Network types (Visa, Mastercard, RuPay)")
    max_annual_fee: Optional[int] = Field(None, ge=0, description="Maximum annual fee acceptable")


class QueryClassification(CamelModel):
    """
    Strict output schema for query interpretation.

    Example model output:
        {
            "intent": "recommend",
            "filters": {"loungeAccess": true, "maxAnnualFee": 5000},
            "bestFor": ["Travel"]
        }
    """
    model_config = ConfigDict(extra="ignore")

    intent: Intent = Field(..., description="search for cards, compare specific cards, or get recommendations")
    filters: Optional[ExtractedFilters] = None
    card_names: Optional[List[str]] = Field(None, description="Specific card names mentioned for comparison")
    best_for: Optional[List[str]] = Field(None, description="Spending categories of interest (Travel, Dining, Shopping, ...)")

    def to_intent(self) -> QueryIntent:
        filters = self.filters.model_dump() if self.filters else {}
        return QueryIntent(
            intent=self.intent,
            criteria=FilterCriteria(**filters),
            card_names=tuple(self.card_names or ()),
            best_for=tuple(self.best_for or ()),
        )


class AIQueryRequest(BaseModel):
    query: StrictStr = Field(..., min_length=1, description="Free-text question about credit cards")

    model_config = {"json_schema_extra": {"examples": [{"query": "cards with lounge access under 3000"}]}}


class AIQueryResponse(BaseModel):
    """
    Response of POST /ai-query.

    `recommendations` is only present for recommend-intent answers.
    """
    cards: List[CreditCardSchema]
    message: str
    comparison: bool = False
    recommendations: Optional[List[str]] = None


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ConversationTurn] = Field(..., min_length=1)


class CardAnalysisResponse(CamelModel):
    card_id: str
    pros: List[str]
    cons: List[str]
    is_fallback: bool = Field(default=False, description="Whether the deterministic fallback was used")
