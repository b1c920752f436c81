"""Error taxonomy for the itinerary generation pipeline."""

from enum import Enum


class ItineraryError(Exception):
    """Base class for failures that terminate a generation request."""


class InvalidRequestError(ItineraryError):
    """Caller input fault; raised before any external call is made."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class GenerationErrorKind(str, Enum):
    """Why the generation provider failed."""

    unavailable = "unavailable"
    rate_limited = "rate_limited"
    other = "other"


class GenerationError(ItineraryError):
    """Generation provider fault; no itinerary is returned or persisted."""

    def __init__(self, kind: GenerationErrorKind, message: str = ""):
        self.kind = kind
        self.message = message
        super().__init__(f"generation failed ({kind.value}): {message}")


class MalformedResponseError(ItineraryError):
    """Generated text could not be reduced to the itinerary schema."""

    def __init__(self, raw_text: str, reason: str = ""):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"malformed generation response: {reason}")
