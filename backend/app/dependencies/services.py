import os
from functools import lru_cache

from fastapi import Depends

from engine.catalog import CardRepository
from app.services.ai_query_service import AIQueryService
from app.services.catalog_service import CatalogService
from app.services.chat_service import ChatService
from app.services.llm_client import CardAssistantModel, OpenAICardModel
from app.services.response_composer import ResponseComposer


DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
BUNDLED_DATA_FILE = os.path.join(DATA_DIR, "credit_cards.json")


def card_data_path() -> str:
    """Dataset location: $CARD_DATA_PATH when set, else the file shipped inside the app package."""
    return os.getenv("CARD_DATA_PATH") or BUNDLED_DATA_FILE


@lru_cache(maxsize=1)
def get_card_repository() -> CardRepository:
    # Loaded once per process and shared read-only across requests.
    return CardRepository.from_json_file(card_data_path())


@lru_cache(maxsize=1)
def get_language_model() -> CardAssistantModel:
    return OpenAICardModel()


def get_catalog_service(repository: CardRepository = Depends(get_card_repository)) -> CatalogService:
    return CatalogService(repository)


def get_ai_query_service(
    repository: CardRepository = Depends(get_card_repository),
    model: CardAssistantModel = Depends(get_language_model),
) -> AIQueryService:
    return AIQueryService(repository, model)


def get_chat_service(
    repository: CardRepository = Depends(get_card_repository),
    model: CardAssistantModel = Depends(get_language_model),
) -> ChatService:
    return ChatService(repository, model)


def get_response_composer(model: CardAssistantModel = Depends(get_language_model)) -> ResponseComposer:
    return ResponseComposer(model)
