"""Travel endpoints - itinerary generation and public plan browsing."""

import logging
from dataclasses import asdict
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend.app.api.deps import get_pipeline, get_plan_store
from backend.app.db.repositories import TravelPlanStore
from backend.app.generation.pipeline import ItineraryPipeline
from backend.app.models.travel import ItineraryRequest

router = APIRouter(prefix="/travel", tags=["travel"])
logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 50


@router.post("/generate")
async def generate_itinerary(
    request: ItineraryRequest,
    pipeline: Annotated[ItineraryPipeline, Depends(get_pipeline)],
    temperature: Annotated[float | None, Query()] = None,
    max_tokens: Annotated[int | None, Query()] = None,
) -> dict[str, Any]:
    """Generate a day-by-day itinerary for a destination.

    Persistence runs in the background; its outcome never affects this response.

    Args:
        request: Destination, duration and optional traveler profile
        pipeline: Itinerary pipeline
        temperature: Optional sampling temperature override
        max_tokens: Optional output token ceiling override

    Returns:
        Envelope with the itinerary under ``data``
    """
    output = await pipeline.generate(request, temperature=temperature, max_tokens=max_tokens)

    return {
        "success": True,
        "data": output.result.model_dump(mode="json"),
        "meta": {
            "destination": request.destination,
            "duration": request.duration,
            "model": output.model,
        },
    }


@router.get("/plans")
async def list_plans(
    store: Annotated[TravelPlanStore, Depends(get_plan_store)],
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = DEFAULT_PAGE_LIMIT,
    destination: Annotated[str, Query()] = "",
) -> dict[str, Any]:
    """List public travel plans, newest first.

    Out-of-range paging falls back to defaults instead of failing.
    """
    if page < 1:
        page = 1
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        limit = DEFAULT_PAGE_LIMIT

    result = await store.list_public_plans(
        page=page, limit=limit, destination=destination.strip() or None
    )

    return {
        "success": True,
        "data": [asdict(plan) for plan in result.items],
        "meta": {
            "page": page,
            "limit": limit,
            "total": result.total,
            "total_pages": (result.total + limit - 1) // limit,
        },
    }


@router.get("/plans/{plan_id}")
async def get_plan(
    plan_id: int,
    store: Annotated[TravelPlanStore, Depends(get_plan_store)],
) -> dict[str, Any]:
    """Get a public travel plan; each read counts as one view."""
    plan = await store.get_public_plan(plan_id)

    if plan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Travel plan not found"
        )

    return {"success": True, "data": asdict(plan)}


@router.get("/stats")
async def travel_stats(
    store: Annotated[TravelPlanStore, Depends(get_plan_store)],
) -> dict[str, Any]:
    """Aggregate statistics over public plans."""
    stats = await store.plan_stats()

    return {
        "success": True,
        "data": {
            "total_plans_generated": stats.total_plans,
            "popular_destinations": stats.popular_destinations,
            "average_duration": stats.average_duration,
        },
    }
