"""Integration tests for SqlTravelPlanStore against in-memory SQLite."""

from collections.abc import Callable
from datetime import datetime, timezone

import pytest
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.db.models import TravelPlan
from backend.app.db.sql_repositories import SqlTravelPlanStore
from backend.app.models.travel import ItineraryRequest, ItineraryResult, Visibility

ResultBuilder = Callable[[int], ItineraryResult]


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> SqlTravelPlanStore:
    return SqlTravelPlanStore(session_factory)


@pytest.mark.asyncio
async def test_save_stores_request_and_result(
    store: SqlTravelPlanStore,
    session_factory: async_sessionmaker[AsyncSession],
    make_result: ResultBuilder,
) -> None:
    """Test that a saved plan keeps the request fields and the itinerary JSON."""
    result = make_result(2)
    request = ItineraryRequest(
        destination="  Busan ", duration=2, age_group="20s", group_size=3, travel_type="relaxed"
    )

    plan_id = await store.save(request, result, Visibility.public)

    async with session_factory() as session:
        row = await session.scalar(select(TravelPlan).where(TravelPlan.id == plan_id))

    assert row is not None
    assert row.destination == "Busan"
    assert row.duration == 2
    assert row.age_group == "20s"
    assert row.group_size == 3
    assert row.purpose is None
    assert row.travel_type == "relaxed"
    assert row.plan_data == result.model_dump(mode="json")
    assert row.is_public is True
    assert row.view_count == 0
    assert row.deleted_at is None


@pytest.mark.asyncio
async def test_list_public_plans_newest_first(
    store: SqlTravelPlanStore, make_result: ResultBuilder
) -> None:
    """Test that listing returns public plans in reverse creation order."""
    for destination in ["Busan", "Jeju", "Seoul"]:
        await store.save(
            ItineraryRequest(destination=destination, duration=2),
            make_result(2),
            Visibility.public,
        )
    await store.save(
        ItineraryRequest(destination="Hidden", duration=2), make_result(2), Visibility.private
    )

    page = await store.list_public_plans(page=1, limit=10)

    assert page.total == 3
    assert [plan.destination for plan in page.items] == ["Seoul", "Jeju", "Busan"]


@pytest.mark.asyncio
async def test_list_public_plans_paginates(
    store: SqlTravelPlanStore, make_result: ResultBuilder
) -> None:
    """Test that pages slice the ordered result and report the full total."""
    for index in range(5):
        await store.save(
            ItineraryRequest(destination=f"City {index}", duration=1),
            make_result(1),
            Visibility.public,
        )

    second = await store.list_public_plans(page=2, limit=2)
    beyond = await store.list_public_plans(page=4, limit=2)

    assert second.total == 5
    assert [plan.destination for plan in second.items] == ["City 2", "City 1"]
    assert beyond.items == []
    assert beyond.total == 5


@pytest.mark.asyncio
async def test_list_public_plans_filters_destination(
    store: SqlTravelPlanStore, make_result: ResultBuilder
) -> None:
    """Test case-insensitive substring filtering on destination."""
    for destination in ["Busan", "Busan Haeundae", "Jeju"]:
        await store.save(
            ItineraryRequest(destination=destination, duration=2),
            make_result(2),
            Visibility.public,
        )

    page = await store.list_public_plans(page=1, limit=10, destination="busan")

    assert page.total == 2
    assert {plan.destination for plan in page.items} == {"Busan", "Busan Haeundae"}


@pytest.mark.asyncio
async def test_get_public_plan_increments_views(
    store: SqlTravelPlanStore, make_result: ResultBuilder
) -> None:
    """Test that each read counts as one view."""
    plan_id = await store.save(
        ItineraryRequest(destination="Busan", duration=2), make_result(2), Visibility.public
    )

    first = await store.get_public_plan(plan_id)
    second = await store.get_public_plan(plan_id)

    assert first is not None and second is not None
    assert first.view_count == 1
    assert second.view_count == 2
    assert len(second.plan_data["itinerary"]) == 2


@pytest.mark.asyncio
async def test_get_private_or_missing_plan_returns_none(
    store: SqlTravelPlanStore, make_result: ResultBuilder
) -> None:
    """Test that private and unknown plans are not readable."""
    private_id = await store.save(
        ItineraryRequest(destination="Busan", duration=2), make_result(2), Visibility.private
    )

    assert await store.get_public_plan(private_id) is None
    assert await store.get_public_plan(9999) is None


@pytest.mark.asyncio
async def test_soft_deleted_plans_are_hidden(
    store: SqlTravelPlanStore,
    session_factory: async_sessionmaker[AsyncSession],
    make_result: ResultBuilder,
) -> None:
    """Test that deleted_at removes a plan from reads, listings and stats."""
    plan_id = await store.save(
        ItineraryRequest(destination="Busan", duration=2), make_result(2), Visibility.public
    )
    async with session_factory() as session:
        await session.execute(
            update(TravelPlan)
            .where(TravelPlan.id == plan_id)
            .values(deleted_at=datetime.now(timezone.utc))
        )
        await session.commit()

    assert await store.get_public_plan(plan_id) is None
    assert (await store.list_public_plans(page=1, limit=10)).total == 0
    assert (await store.plan_stats()).total_plans == 0


@pytest.mark.asyncio
async def test_plan_stats(store: SqlTravelPlanStore, make_result: ResultBuilder) -> None:
    """Test totals, popularity ranking and average duration over public plans."""
    for destination, duration in [("Busan", 2), ("Busan", 4), ("Jeju", 3), ("Seoul", 1)]:
        await store.save(
            ItineraryRequest(destination=destination, duration=duration),
            make_result(duration),
            Visibility.public,
        )
    await store.save(
        ItineraryRequest(destination="Hidden", duration=30), make_result(1), Visibility.private
    )

    stats = await store.plan_stats(top=2)

    assert stats.total_plans == 4
    assert stats.popular_destinations == ["Busan", "Jeju"]
    assert stats.average_duration == 2.5


@pytest.mark.asyncio
async def test_plan_stats_empty(store: SqlTravelPlanStore) -> None:
    """Test stats over an empty table."""
    stats = await store.plan_stats()

    assert stats.total_plans == 0
    assert stats.popular_destinations == []
    assert stats.average_duration == 0.0
