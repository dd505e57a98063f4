import logging
import os

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.routes import ai_query_router, catalog_router
from app.dependencies.services import get_card_repository

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS")
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler - runs on startup and shutdown"""
    # Startup: load the card dataset once; a malformed dataset fails fast here
    get_card_repository()
    yield
    # Shutdown


app = FastAPI(
    title="Credit Card Compare API",
    version="0.1.0",
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# CORS middleware - MUST be added first before other middlewares
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _describe_errors(errors: list[dict]) -> str:
    parts = []
    for err in errors:
        location = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
        parts.append(f"{location}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):  # type: ignore[override]
    """Malformed request bodies are client errors (HTTP 400), rejected before any model call."""
    errors = exc.errors()
    return JSONResponse(
        status_code=400,
        content={
            "error": f"Invalid request payload. {_describe_errors(errors)}".strip(),
            "details": {"errors": jsonable_encoder(errors, custom_encoder={Exception: str})},
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):  # type: ignore[override]
    """Handle general exceptions - log and return 500 error"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )


@app.get("/health")
def health_check():
    return {"status": "ok"}


# Register routers
app.include_router(ai_query_router)
app.include_router(catalog_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
