"""FastAPI application - composition root.

The lifespan owns the generation client, database engine, plan store and
persistence notifier; routes reach them through ``app.state``.
"""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.llm import router as llm_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.travel import router as travel_router
from backend.app.config import Settings, get_settings
from backend.app.db.engine import (
    create_async_engine_from_settings,
    create_session_factory,
    create_tables,
)
from backend.app.db.repositories import TravelPlanStore
from backend.app.db.sql_repositories import SqlTravelPlanStore
from backend.app.errors import (
    GenerationError,
    GenerationErrorKind,
    InvalidRequestError,
    MalformedResponseError,
)
from backend.app.generation.pipeline import ItineraryPipeline
from backend.app.llm.client import GenerationClient, get_generation_client
from backend.app.models.travel import Visibility
from backend.app.persistence.notifier import PersistenceNotifier
from backend.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
VERSION = "1.0.0"


def _error_body(message: str, error: str, **extra: Any) -> dict[str, Any]:
    return {"success": False, "message": message, "error": error, **extra}


async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
    """400 for caller input faults."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request", exc.reason, field=exc.field),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """400 for bodies and parameters that do not parse."""
    errors = exc.errors()
    field = ".".join(str(part) for part in errors[0]["loc"][1:]) if errors else ""
    message = errors[0]["msg"] if errors else "invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request format", message, field=field),
    )


async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    """503 when the provider is unavailable or rate limited, 502 otherwise."""
    status_code = (
        status.HTTP_502_BAD_GATEWAY
        if exc.kind is GenerationErrorKind.other
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    logger.error(f"Generation provider error: {exc}")
    return JSONResponse(
        status_code=status_code,
        content=_error_body(
            "AI service call failed", exc.message or exc.kind.value, kind=exc.kind.value
        ),
    )


def _encodable(text: str) -> str:
    """Escape code points UTF-8 cannot encode, such as lone surrogates."""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


async def malformed_response_handler(
    request: Request, exc: MalformedResponseError
) -> JSONResponse:
    """502 with the raw generation text attached for diagnostics."""
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=_error_body(
            "Failed to process AI response",
            "response format is invalid",
            reason=_encodable(exc.reason),
            raw_response=_encodable(exc.raw_text),
        ),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap HTTP errors in the standard envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail), "code": exc.status_code},
        headers=getattr(exc, "headers", None),
    )


def create_app(
    settings: Settings | None = None,
    *,
    generation_client: GenerationClient | None = None,
    plan_store: TravelPlanStore | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use (defaults to environment settings)
        generation_client: Injected client; the caller keeps ownership of it
        plan_store: Injected store; skips database engine creation

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)

        owns_client = generation_client is None
        client = generation_client or get_generation_client(settings)

        engine = None
        store = plan_store
        if store is None:
            engine = create_async_engine_from_settings(settings)
            if settings.auto_create_tables:
                await create_tables(engine)
            store = SqlTravelPlanStore(create_session_factory(engine))

        notifier = PersistenceNotifier(
            store,
            max_pending=settings.persistence_max_pending,
            visibility=(
                Visibility.public if settings.plans_public_by_default else Visibility.private
            ),
        )

        app.state.settings = settings
        app.state.engine = engine
        app.state.generation_client = client
        app.state.plan_store = store
        app.state.notifier = notifier
        app.state.pipeline = ItineraryPipeline(
            client,
            notifier=notifier,
            temperature=settings.generation_temperature,
            max_tokens=settings.generation_max_tokens,
        )

        logger.info(f"Travel itinerary service {VERSION} started")

        try:
            yield
        finally:
            unfinished = await notifier.drain(settings.persistence_drain_timeout_seconds)
            if unfinished:
                logger.warning(f"Cancelled {unfinished} unsaved travel plans on shutdown")
            if engine is not None:
                await engine.dispose()
            if owns_client:
                await client.close()

    app = FastAPI(title="Travel Itinerary API", version=VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{response.status_code} - {request.method} {request.url.path} ({latency_ms:.1f}ms)"
        )
        return response

    app.add_exception_handler(InvalidRequestError, invalid_request_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(GenerationError, generation_error_handler)
    app.add_exception_handler(MalformedResponseError, malformed_response_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(travel_router, prefix=API_PREFIX)
    app.include_router(llm_router, prefix=API_PREFIX)

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint."""
        return {
            "message": "Travel Itinerary API",
            "version": VERSION,
            "endpoints": [
                f"POST {API_PREFIX}/travel/generate",
                f"GET {API_PREFIX}/travel/plans",
                f"GET {API_PREFIX}/travel/plans/{{id}}",
                f"GET {API_PREFIX}/travel/stats",
            ],
        }

    return app


app = create_app()
