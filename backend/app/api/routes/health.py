"""Health check endpoints.

- Checks database connectivity
- Reports which generation client is in use
- Returns honest status with component details
"""

import json
from typing import Any

from fastapi import APIRouter, Request, Response
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from backend.app.llm.client import DeterministicStubClient, GenerationClient

router = APIRouter()


async def check_db(engine: AsyncEngine | None) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    if engine is None:
        return (True, "not_configured")

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_generation(client: GenerationClient | None) -> tuple[bool, str]:
    """Check that a generation client is configured.

    Returns:
        (is_ok, status_message)
    """
    if client is None:
        return (False, "not_configured")
    if isinstance(client, DeterministicStubClient):
        return (True, "stub")
    return (True, "ok")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(request: Request) -> dict[str, Any] | Response:
    """Health check endpoint.

    Returns:
        200 with component status if core systems ok
        503 if the database or the generation client is unavailable
    """
    state = request.app.state
    db_ok, db_status = await check_db(getattr(state, "engine", None))
    generation_ok, generation_status = await check_generation(
        getattr(state, "generation_client", None)
    )

    core_ok = db_ok and generation_ok

    response_body = {
        "status": "ok" if core_ok else "degraded",
        "components": {
            "db": db_status,
            "generation": generation_status,
        },
    }

    if not core_ok:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
