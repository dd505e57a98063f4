from typing import Sequence

from engine.catalog import CardRepository
from engine.models import CardRecord
from engine.query import filter_cards, get_unique_values, search_cards, sort_cards
from app.schemas.card_schemas import CatalogQuery
from app.services.errors import CardNotFoundError, ServiceError

# The comparison view shows at most this many cards side by side
MAX_COMPARE_CARDS = 4


class CatalogService:
    def __init__(self, repository: CardRepository):
        self.repository = repository

    def get_catalog(self) -> list[CardRecord]:
        """All cards in the default landing-page order (cheapest annual fee first)."""
        return self.browse(CatalogQuery())

    def browse(self, state: CatalogQuery) -> list[CardRecord]:
        """Apply the catalog page state: search text, then filters, then sort."""
        results = search_cards(self.repository.all(), state.search)
        results = filter_cards(results, state.filters.to_criteria())
        return sort_cards(results, state.sort_by, state.order)

    def facets(self) -> dict[str, list[str]]:
        """Values offered by the filter panel."""
        cards = self.repository.all()
        return {
            "banks": get_unique_values(cards, "bank"),
            "categories": get_unique_values(cards, "category"),
            "network_types": get_unique_values(cards, "network_type"),
        }

    def get_card(self, card_id: str) -> CardRecord:
        card = self.repository.get(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card

    def compare(self, card_ids: Sequence[str]) -> list[CardRecord]:
        """Cards for the side-by-side view, in the requested order (duplicates dropped)."""
        unique_ids = list(dict.fromkeys(card_ids))
        if len(unique_ids) > MAX_COMPARE_CARDS:
            raise ServiceError(
                status_code=400,
                code="VALIDATION_ERROR",
                message=f"At most {MAX_COMPARE_CARDS} cards can be compared at once.",
                details={"requested": len(unique_ids)},
            )
        return [self.get_card(card_id) for card_id in unique_ids]
