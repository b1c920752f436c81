"""Day-count reconciliation.

Forces a decoded itinerary to exactly the requested number of days:

- too many days: the tail is dropped
- too few days: the last day's activities are repeated under new day numbers

Padding is a lossy repair. It returns a plausible itinerary instead of failing
the request on a day-count mismatch. Every kept day is also renumbered to its
position, so the result always carries days 1..duration.
"""

import logging
from enum import Enum

from backend.app.models.travel import DayPlan, ItineraryResult

logger = logging.getLogger(__name__)


class ReconcileAction(str, Enum):
    """What reconciliation did to the day list."""

    unchanged = "unchanged"
    truncated = "truncated"
    padded = "padded"


def reconcile_action(day_count: int, duration: int) -> ReconcileAction:
    """Classify the adjustment needed for a day count."""
    if day_count > duration:
        return ReconcileAction.truncated
    if day_count < duration:
        return ReconcileAction.padded
    return ReconcileAction.unchanged


def _renumbered(day: DayPlan, index: int) -> DayPlan:
    if day.day == index:
        return day
    return day.model_copy(update={"day": index})


def reconcile_itinerary(result: ItineraryResult, duration: int) -> ItineraryResult:
    """Return an itinerary with exactly ``duration`` contiguous days.

    ``result`` is never modified. ``ItineraryResult`` cannot be built with zero
    days, so there is always a last day to pad from.

    Raises:
        ValueError: If ``duration`` is below one (rejected by request validation).
    """
    if duration < 1:
        raise ValueError(f"duration must be positive, got {duration}")

    days = result.itinerary
    action = reconcile_action(len(days), duration)

    kept = days[:duration]
    adjusted = [_renumbered(day, index) for index, day in enumerate(kept, start=1)]

    if action is ReconcileAction.padded:
        last = kept[-1]
        for index in range(len(kept) + 1, duration + 1):
            adjusted.append(last.model_copy(update={"day": index}, deep=True))

    if action is not ReconcileAction.unchanged:
        logger.info(
            f"Reconciled itinerary: {action.value} from {len(days)} to {duration} days"
        )

    if action is ReconcileAction.unchanged and all(a is b for a, b in zip(adjusted, days)):
        return result

    return result.model_copy(update={"itinerary": adjusted})
