"""Models package - re-exports for convenience."""

from backend.app.models.travel import (
    ActivityBlock,
    DayPlan,
    ItineraryRequest,
    ItineraryResult,
    PromptContext,
    Visibility,
)

__all__ = [
    "ActivityBlock",
    "DayPlan",
    "ItineraryRequest",
    "ItineraryResult",
    "PromptContext",
    "Visibility",
]
