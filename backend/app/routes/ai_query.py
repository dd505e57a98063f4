"""
AI Assistant Routes - natural-language endpoints.

Endpoints:
- POST /ai-query - interpret a question and return matching cards with a summary
- POST /chat     - streamed conversational answer grounded on the catalog
"""

import logging
from typing import Iterator

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse, StreamingResponse

from app.dependencies.services import get_ai_query_service, get_chat_service
from app.schemas.ai_schemas import AIQueryRequest, AIQueryResponse, ChatRequest
from app.schemas.card_schemas import CreditCardSchema
from app.services.ai_query_service import AIQueryService
from app.services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assistant"])


@router.post("/ai-query", response_model=AIQueryResponse, response_model_exclude_none=True)
def ai_query(
    request: AIQueryRequest,
    service: AIQueryService = Depends(get_ai_query_service),
) -> AIQueryResponse:
    """
    Answer a free-text credit card question.

    Example:
        POST /ai-query
        {"query": "compare HDFC Millennia and Axis ACE"}

    Example Response:
        {
            "cards": [...],
            "message": "Here are the two cards side by side...",
            "comparison": true
        }

    Model failures are absorbed: the endpoint still answers 200 using a local
    text search and a result-count message.
    """
    result = service.process_query(request.query)
    source = "local search fallback" if result.is_fallback else f"{result.intent.value} intent"
    logger.info(
        f"Answered {request.query!r} via {source}: {len(result.cards)} cards in {result.generation_time_ms}ms"
    )
    return AIQueryResponse(
        cards=[CreditCardSchema.from_record(card) for card in result.cards],
        message=result.message,
        comparison=result.comparison,
        recommendations=result.recommendations,
    )


def _relay(stream: Iterator[str]) -> Iterator[str]:
    # Headers are already sent once streaming starts; a broken stream can only be cut short.
    try:
        yield from stream
    except Exception as e:
        logger.exception(f"Chat stream interrupted: {e}")


@router.post("/chat")
def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
):
    """Stream a plain-text reply to the conversation in `messages`."""
    try:
        stream = service.open_stream(request.messages)
    except Exception as e:
        logger.exception(f"Error in chat API: {e}")
        return PlainTextResponse("Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return StreamingResponse(_relay(stream), media_type="text/plain; charset=utf-8")
