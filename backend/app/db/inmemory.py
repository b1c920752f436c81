"""In-memory implementations of repository interfaces."""

from collections import Counter
from datetime import datetime, timezone

from backend.app.db.repositories import TravelPlanPage, TravelPlanRecord, TravelPlanStats
from backend.app.models.travel import ItineraryRequest, ItineraryResult, Visibility


class InMemoryTravelPlanStore:
    """In-memory implementation of TravelPlanStore."""

    def __init__(self) -> None:
        self._plans: dict[int, TravelPlanRecord] = {}
        self._next_id = 1

    @property
    def plans(self) -> list[TravelPlanRecord]:
        """All stored plans in insertion order."""
        return list(self._plans.values())

    async def save(
        self, request: ItineraryRequest, result: ItineraryResult, visibility: Visibility
    ) -> int:
        """Save a new travel plan."""
        plan_id = self._next_id
        self._next_id += 1
        now = datetime.now(timezone.utc)

        self._plans[plan_id] = TravelPlanRecord(
            id=plan_id,
            destination=request.destination.strip(),
            duration=request.duration,
            age_group=request.age_group,
            group_size=request.group_size,
            purpose=request.purpose,
            travel_type=request.travel_type,
            plan_data=result.model_dump(mode="json"),
            is_public=visibility is Visibility.public,
            view_count=0,
            created_at=now,
            updated_at=now,
        )
        return plan_id

    def _public(self, destination: str | None = None) -> list[TravelPlanRecord]:
        plans = [plan for plan in self._plans.values() if plan.is_public]
        if destination:
            needle = destination.lower()
            plans = [plan for plan in plans if needle in plan.destination.lower()]
        return plans

    async def list_public_plans(
        self, *, page: int, limit: int, destination: str | None = None
    ) -> TravelPlanPage:
        """List public plans newest first."""
        plans = sorted(
            self._public(destination), key=lambda p: (p.created_at, p.id), reverse=True
        )
        offset = (page - 1) * limit
        return TravelPlanPage(items=plans[offset : offset + limit], total=len(plans))

    async def get_public_plan(self, plan_id: int) -> TravelPlanRecord | None:
        """Get a public plan by ID and increment its view counter."""
        plan = self._plans.get(plan_id)

        if plan is None or not plan.is_public:
            return None

        plan.view_count += 1
        plan.updated_at = datetime.now(timezone.utc)
        return plan

    async def plan_stats(self, top: int = 5) -> TravelPlanStats:
        """Compute statistics over public plans."""
        plans = self._public()
        if not plans:
            return TravelPlanStats(total_plans=0)

        counts = Counter(plan.destination for plan in plans)
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))

        return TravelPlanStats(
            total_plans=len(plans),
            popular_destinations=[name for name, _ in ranked[:top]],
            average_duration=round(sum(p.duration for p in plans) / len(plans), 1),
        )
