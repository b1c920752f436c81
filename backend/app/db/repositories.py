"""Repository protocol interfaces for travel plan storage."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from backend.app.models.travel import ItineraryRequest, ItineraryResult, Visibility


@dataclass
class TravelPlanRecord:
    """Stored travel plan data record."""

    id: int
    destination: str
    duration: int
    age_group: str | None
    group_size: int | None
    purpose: str | None
    travel_type: str | None
    plan_data: dict[str, Any]
    is_public: bool
    view_count: int
    created_at: datetime
    updated_at: datetime


@dataclass
class TravelPlanPage:
    """One page of stored plans plus the total match count."""

    items: list[TravelPlanRecord]
    total: int


@dataclass
class TravelPlanStats:
    """Aggregate statistics over public plans."""

    total_plans: int
    popular_destinations: list[str] = field(default_factory=list)
    average_duration: float = 0.0


class TravelPlanStore(Protocol):
    """Repository for travel plan operations."""

    async def save(
        self, request: ItineraryRequest, result: ItineraryResult, visibility: Visibility
    ) -> int:
        """Persist a generated itinerary with its originating request.

        Args:
            request: Originating request
            result: Reconciled itinerary
            visibility: public or private

        Returns:
            Plan ID
        """
        ...

    async def list_public_plans(
        self, *, page: int, limit: int, destination: str | None = None
    ) -> TravelPlanPage:
        """List public plans newest first.

        Args:
            page: 1-based page number
            limit: Page size
            destination: Optional case-insensitive substring filter

        Returns:
            Page of plans and total match count
        """
        ...

    async def get_public_plan(self, plan_id: int) -> TravelPlanRecord | None:
        """Get a public plan by ID, counting the read as one view.

        Returns:
            Plan with the incremented view count, or None if not found/not public
        """
        ...

    async def plan_stats(self, top: int = 5) -> TravelPlanStats:
        """Compute statistics over public plans."""
        ...
