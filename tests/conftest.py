"""Shared pytest fixtures for all test suites."""

import json
from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from backend.app.db.engine import create_session_factory, create_tables
from backend.app.errors import GenerationError
from backend.app.llm.client import GenerationOutput
from backend.app.models.travel import ItineraryResult

PayloadBuilder = Callable[..., dict[str, Any]]


def _day(day: int, label: str) -> dict[str, Any]:
    return {
        "day": day,
        "morning": {"summary": f"{label} morning", "detail": f"{label} morning detail"},
        "afternoon": {"summary": f"{label} afternoon", "detail": f"{label} afternoon detail"},
        "evening": {"summary": f"{label} evening", "detail": f"{label} evening detail"},
        "night": {"summary": f"{label} night", "detail": f"{label} night detail"},
    }


@pytest.fixture
def itinerary_payload() -> PayloadBuilder:
    """Build itinerary JSON payloads with ``days`` distinct days."""

    def build(days: int = 2, estimated_cost: int = 300000) -> dict[str, Any]:
        return {
            "itinerary": [_day(n, f"Day {n}") for n in range(1, days + 1)],
            "estimated_cost": estimated_cost,
            "cautions": ["Check the weather", "Reserve restaurants early"],
        }

    return build


@pytest.fixture
def make_result(itinerary_payload: PayloadBuilder) -> Callable[[int], ItineraryResult]:
    """Build decoded ItineraryResult instances with ``days`` days."""

    def build(days: int) -> ItineraryResult:
        return ItineraryResult.model_validate_json(json.dumps(itinerary_payload(days)))

    return build


class FakeGenerationClient:
    """Generation client returning canned text or raising a canned error."""

    model = "fake-model"

    def __init__(self, text: str = "", error: GenerationError | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def generate(
        self, prompt: str, *, temperature: float, max_tokens: int
    ) -> GenerationOutput:
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return GenerationOutput(text=self.text, model=self.model)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeGenerationClient]:
    """Create fake generation clients."""
    return FakeGenerationClient


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create in-memory async SQLite engine with all tables."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the in-memory engine."""
    return create_session_factory(sqlite_engine)
