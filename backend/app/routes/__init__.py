from .catalog import router as catalog_router
from .ai_query import router as ai_query_router

__all__ = [
    "catalog_router",
    "ai_query_router",
]
