from .ai_query_service import AIQueryResult, AIQueryService
from .catalog_service import CatalogService
from .chat_service import ChatService
from .errors import CardNotFoundError, ModelCallError, ModelResponseError, ServiceError
from .llm_client import CardAssistantModel, LLMConfig, OpenAICardModel
from .query_interpreter import QueryInterpreter
from .response_composer import CardAnalysis, ResponseComposer

__all__ = [
    "AIQueryResult",
    "AIQueryService",
    "CatalogService",
    "ChatService",
    "CardNotFoundError",
    "ModelCallError",
    "ModelResponseError",
    "ServiceError",
    "CardAssistantModel",
    "LLMConfig",
    "OpenAICardModel",
    "QueryInterpreter",
    "CardAnalysis",
    "ResponseComposer"
]
