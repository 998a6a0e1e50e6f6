"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from food_search.api.search_models import SearchRequest, SearchResponseBody
from food_search.app_logging import configure_logging
from food_search.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=container.settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/foods/search")
    async def search_foods(payload: SearchRequest, request: Request) -> JSONResponse:
        """Search foods across the cache, generic and branded sources."""
        state_container: AppContainer = request.app.state.container
        service = state_container.search_service
        query = service.build_query(
            payload.query, payload.country, payload.limit, payload.offset
        )
        try:
            response = await service.search(query)
            body = SearchResponseBody.from_response(response)
        except Exception as exc:
            logger.exception("Food search failed: query=%s", query.text)
            body = SearchResponseBody.failure(str(exc) or "Unknown error")
            return JSONResponse(
                body.to_payload(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return JSONResponse(body.to_payload())

    return app
