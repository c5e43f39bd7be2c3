# src/api/app.py

"""HTTP surface: FastAPI application factory and routes."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from src.config.settings import Settings
from src.models.errors import SearchError, UpstreamError, ValidationError
from src.services.health_checker import HealthChecker
from src.services.search_orchestrator import SearchOrchestrator

logger = logging.getLogger("shopping_ai.api")

MISSING_QUERY = "Missing query"
WALMART_SIMPLE_FAILURE = "Walmart simple API failed"


def _require_query(query: str | None) -> str:
    """Reject a missing or blank ``query`` parameter."""
    if query is None or not query.strip():
        raise ValidationError(MISSING_QUERY)
    return query


async def _search_error_handler(
    request: Request, exc: Exception,
) -> JSONResponse:
    """Map typed search errors to ``{"error": ...}`` responses."""
    if not isinstance(exc, SearchError):
        return await _unhandled_error_handler(request, exc)
    if isinstance(exc, UpstreamError):
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc,
        )
    else:
        logger.warning(
            "%s %s rejected: %s", request.method, request.url.path, exc,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_message},
    )


async def _unhandled_error_handler(
    request: Request, exc: Exception,
) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500, content={"error": "Internal server error"},
    )


def create_app(
    settings: Settings | None = None,
    orchestrator: SearchOrchestrator | None = None,
) -> FastAPI:
    """Build the application around one immutable Settings instance."""
    if settings is None:
        settings = Settings()
    orchestrator = orchestrator or SearchOrchestrator(settings)
    health = HealthChecker(settings, orchestrator.providers)

    app = FastAPI(title="Shopping AI Backend", version="1.0.0")
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SearchError, _search_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Shopping AI Backend is running!"

    @app.get("/ping")
    async def ping() -> dict[str, str]:
        return {"message": "pong"}

    @app.get("/api/test")
    async def api_test() -> dict[str, str]:
        return {"message": "API is working!"}

    @app.get("/api/health")
    async def api_health() -> dict[str, Any]:
        return {
            "providers": [r.to_dict() for r in health.check_all()],
        }

    @app.get("/api/search/amazon")
    async def search_amazon(query: str | None = None) -> dict[str, Any]:
        """Raw ScraperAPI payload for an Amazon search."""
        query = _require_query(query)
        data = await orchestrator.fetch_raw("amazon", query)
        return {"success": True, "query": query, "data": data}

    @app.get("/api/search/walmart-simple")
    async def search_walmart(query: str | None = None) -> dict[str, Any]:
        query = _require_query(query)
        try:
            products = await orchestrator.search_source("walmart", query)
        except UpstreamError as exc:
            raise UpstreamError(
                exc.provider,
                exc.detail,
                status=exc.status,
                public_message=WALMART_SIMPLE_FAILURE,
            ) from exc
        return {
            "source": "walmart",
            "query": query,
            "total": len(products),
            "products": [p.to_dict() for p in products],
        }

    @app.get("/api/search/ebay")
    async def search_ebay(query: str | None = None) -> dict[str, Any]:
        query = _require_query(query)
        products = await orchestrator.search_source("ebay", query)
        return {
            "source": "ebay",
            "query": query,
            "total": len(products),
            "products": [p.to_dict() for p in products],
        }

    @app.get("/api/search")
    async def combined(query: str | None = None) -> dict[str, Any]:
        """Amazon + Walmart (+ eBay when configured), merged in order."""
        query = _require_query(query)
        result = await orchestrator.combined_search(query)
        return result.to_dict()

    return app
