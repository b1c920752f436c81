"""SQL implementations of repository interfaces."""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.db.models import TravelPlan
from backend.app.db.queries import select_public_plans
from backend.app.db.repositories import TravelPlanPage, TravelPlanRecord, TravelPlanStats
from backend.app.models.travel import ItineraryRequest, ItineraryResult, Visibility


def _to_record(row: TravelPlan) -> TravelPlanRecord:
    return TravelPlanRecord(
        id=row.id,
        destination=row.destination,
        duration=row.duration,
        age_group=row.age_group,
        group_size=row.group_size,
        purpose=row.purpose,
        travel_type=row.travel_type,
        plan_data=row.plan_data,
        is_public=row.is_public,
        view_count=row.view_count,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlTravelPlanStore:
    """SQL implementation of TravelPlanStore.

    Each operation opens its own session, so the store is safe to share
    between request handlers and background save tasks.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(
        self, request: ItineraryRequest, result: ItineraryResult, visibility: Visibility
    ) -> int:
        """Insert a new travel plan row."""
        plan = TravelPlan(
            destination=request.destination.strip(),
            duration=request.duration,
            age_group=request.age_group,
            group_size=request.group_size,
            purpose=request.purpose,
            travel_type=request.travel_type,
            plan_data=result.model_dump(mode="json"),
            is_public=visibility is Visibility.public,
            view_count=0,
        )

        async with self._session_factory() as session:
            session.add(plan)
            await session.commit()
            return plan.id

    async def list_public_plans(
        self, *, page: int, limit: int, destination: str | None = None
    ) -> TravelPlanPage:
        """List public plans newest first."""
        query = select_public_plans(destination)

        async with self._session_factory() as session:
            total = await session.scalar(select(func.count()).select_from(query.subquery()))

            result = await session.execute(
                query.order_by(TravelPlan.created_at.desc(), TravelPlan.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            rows = result.scalars().all()

        return TravelPlanPage(items=[_to_record(row) for row in rows], total=total or 0)

    async def get_public_plan(self, plan_id: int) -> TravelPlanRecord | None:
        """Get a public plan by ID and increment its view counter."""
        async with self._session_factory() as session:
            result = await session.execute(
                update(TravelPlan)
                .where(
                    TravelPlan.id == plan_id,
                    TravelPlan.is_public.is_(True),
                    TravelPlan.deleted_at.is_(None),
                )
                .values(view_count=TravelPlan.view_count + 1)
            )
            if result.rowcount == 0:
                await session.rollback()
                return None
            await session.commit()

            row = await session.scalar(select(TravelPlan).where(TravelPlan.id == plan_id))

        return _to_record(row) if row is not None else None

    async def plan_stats(self, top: int = 5) -> TravelPlanStats:
        """Compute statistics over public plans."""
        public = select_public_plans().subquery()

        async with self._session_factory() as session:
            total = await session.scalar(select(func.count()).select_from(public))
            average = await session.scalar(select(func.avg(public.c.duration)))

            count = func.count().label("plan_count")
            result = await session.execute(
                select(public.c.destination, count)
                .group_by(public.c.destination)
                .order_by(count.desc(), public.c.destination)
                .limit(top)
            )
            destinations = [row.destination for row in result]

        return TravelPlanStats(
            total_plans=total or 0,
            popular_destinations=destinations,
            average_duration=round(float(average), 1) if average is not None else 0.0,
        )
