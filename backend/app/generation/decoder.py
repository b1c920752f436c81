"""Strict decoding of extracted JSON into ``ItineraryResult``."""

import logging

from pydantic import ValidationError

from backend.app.errors import MalformedResponseError
from backend.app.models.travel import ItineraryResult

logger = logging.getLogger(__name__)


def _summarize_errors(exc: ValidationError, limit: int = 3) -> str:
    parts = []
    for error in exc.errors()[:limit]:
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    if exc.error_count() > limit:
        parts.append(f"(+{exc.error_count() - limit} more)")
    return "; ".join(parts)


def decode_itinerary(json_text: str, raw_text: str | None = None) -> ItineraryResult:
    """Decode JSON text into an itinerary, failing loudly on any structural issue.

    Args:
        json_text: Output of ``extract_json``
        raw_text: Unprocessed generation text, attached to the error for diagnostics
            (defaults to ``json_text``)

    Returns:
        Decoded itinerary with at least one day

    Raises:
        MalformedResponseError: Invalid JSON, missing field, wrong type, or no days
    """
    original = json_text if raw_text is None else raw_text

    try:
        return ItineraryResult.model_validate_json(json_text)
    except ValidationError as e:
        reason = _summarize_errors(e)
        logger.warning(f"Generation output failed schema decode: {reason}")
        raise MalformedResponseError(original, reason) from e
