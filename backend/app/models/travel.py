"""Travel itinerary models - request in, strict itinerary out."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class Visibility(str, Enum):
    """Visibility of a stored travel plan."""

    public = "public"
    private = "private"


class ItineraryRequest(BaseModel):
    """Inbound travel request.

    Bounds are checked by ``validate_request`` so that violations surface as
    ``InvalidRequestError`` with the offending field. ``None`` means the
    optional field was not supplied.
    """

    destination: str = Field(..., description="Destination city or region")
    duration: StrictInt = Field(..., description="Trip length in days (1-30)")
    age_group: str | None = Field(None, description="Traveler age group label")
    group_size: StrictInt | None = Field(None, description="Number of travelers (1-50)")
    purpose: str | None = Field(None, description="Trip purpose label")
    travel_type: str | None = Field(None, description="Travel style label")


class PromptContext(BaseModel):
    """Fully-resolved prompt input with every default applied."""

    model_config = ConfigDict(frozen=True)

    destination: str
    duration: int
    age_group: str
    group_size: str
    purpose: str
    travel_type: str


class ActivityBlock(BaseModel):
    """One part of a day: short label plus longer description."""

    model_config = ConfigDict(strict=True)

    summary: str
    detail: str


class DayPlan(BaseModel):
    """Plan for a single day (1-based index)."""

    model_config = ConfigDict(strict=True)

    day: int
    morning: ActivityBlock
    afternoon: ActivityBlock
    evening: ActivityBlock
    night: ActivityBlock


class ItineraryResult(BaseModel):
    """Complete itinerary as returned to the caller.

    Strict: no type coercion, so model drift like ``"estimated_cost": "500"``
    is rejected instead of silently accepted.
    """

    model_config = ConfigDict(strict=True)

    itinerary: list[DayPlan] = Field(..., min_length=1)
    estimated_cost: int = Field(..., ge=0, description="Per-traveler cost estimate")
    cautions: list[str]
