"""Request validation - runs before any prompt is built."""

from backend.app.errors import InvalidRequestError
from backend.app.models.travel import ItineraryRequest

MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 30
MIN_GROUP_SIZE = 1
MAX_GROUP_SIZE = 50


def validate_request(request: ItineraryRequest) -> None:
    """Check an itinerary request for well-formedness.

    Raises:
        InvalidRequestError: With the offending field and a reason.
    """
    if not request.destination.strip():
        raise InvalidRequestError("destination", "destination is required")

    if not MIN_DURATION_DAYS <= request.duration <= MAX_DURATION_DAYS:
        raise InvalidRequestError(
            "duration",
            f"duration must be between {MIN_DURATION_DAYS} and {MAX_DURATION_DAYS} days",
        )

    if request.group_size is not None and not (
        MIN_GROUP_SIZE <= request.group_size <= MAX_GROUP_SIZE
    ):
        raise InvalidRequestError(
            "group_size",
            f"group_size must be between {MIN_GROUP_SIZE} and {MAX_GROUP_SIZE}",
        )
