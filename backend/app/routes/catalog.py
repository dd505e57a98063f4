from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies.services import get_catalog_service, get_response_composer
from app.schemas.ai_schemas import CardAnalysisResponse
from app.schemas.card_schemas import (
    CatalogQuery,
    CatalogResponse,
    CompareRequest,
    CreditCardSchema,
    FacetsResponse,
)
from app.services.catalog_service import CatalogService
from app.services.errors import ServiceError
from app.services.response_composer import ResponseComposer

router = APIRouter(
    prefix="/api/v1/catalog",
    tags=["catalog"]
)


def _error_response(exc: ServiceError) -> HTTPException:
    return HTTPException(
        status_code=exc.status_code,
        detail={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.details,
            }
        },
    )


def _to_response(cards) -> CatalogResponse:
    return CatalogResponse(
        cards=[CreditCardSchema.from_record(card) for card in cards],
        total=len(cards),
    )


@router.get("/", response_model=CatalogResponse)
def get_catalog(service: CatalogService = Depends(get_catalog_service)):
    return _to_response(service.get_catalog())


@router.post("/search", response_model=CatalogResponse)
def search_catalog(state: CatalogQuery, service: CatalogService = Depends(get_catalog_service)):
    """
    Browse with explicit page state.

    Example:
        POST /api/v1/catalog/search
        {
            "search": "cashback",
            "filters": {"banks": ["Axis Bank"], "noAnnualFee": false},
            "sortBy": "cashbackRate",
            "order": "desc"
        }
    """
    return _to_response(service.browse(state))


@router.get("/facets", response_model=FacetsResponse)
def get_facets(service: CatalogService = Depends(get_catalog_service)):
    return FacetsResponse(**service.facets())


@router.post("/compare", response_model=CatalogResponse)
def compare_cards(request: CompareRequest, service: CatalogService = Depends(get_catalog_service)):
    try:
        return _to_response(service.compare(request.ids))
    except ServiceError as exc:
        raise _error_response(exc)


@router.get("/{card_id}", response_model=CreditCardSchema)
def get_card(card_id: str, service: CatalogService = Depends(get_catalog_service)):
    try:
        return CreditCardSchema.from_record(service.get_card(card_id))
    except ServiceError as exc:
        raise _error_response(exc)


@router.get("/{card_id}/analysis", response_model=CardAnalysisResponse)
def get_card_analysis(
    card_id: str,
    service: CatalogService = Depends(get_catalog_service),
    composer: ResponseComposer = Depends(get_response_composer),
):
    """AI pros/cons for the card detail page; always answers with a non-empty analysis."""
    try:
        card = service.get_card(card_id)
    except ServiceError as exc:
        raise _error_response(exc)

    analysis = composer.analyze_card(card)
    return CardAnalysisResponse(
        card_id=analysis.card_id,
        pros=analysis.pros,
        cons=analysis.cons,
        is_fallback=analysis.is_fallback,
    )
