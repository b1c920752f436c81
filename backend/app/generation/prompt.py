"""Prompt builder - renders an itinerary request into a generation prompt.

Rendering is pure: the same request always yields a byte-identical prompt.
"""

from backend.app.models.travel import ItineraryRequest, PromptContext

DEFAULT_AGE_GROUP = "unspecified age group"
DEFAULT_PURPOSE = "general sightseeing"
DEFAULT_TRAVEL_TYPE = "balanced trip"
SOLO_GROUP = "solo"

# Currency the model is asked to estimate per-traveler cost in
COST_CURRENCY = "KRW"

OUTPUT_FORMAT = """{
  "itinerary": [
    {
      "day": 1,
      "morning": {
        "summary": "Short morning activity summary",
        "detail": "Detailed morning activity description"
      },
      "afternoon": {
        "summary": "Short afternoon activity summary",
        "detail": "Detailed afternoon activity description"
      },
      "evening": {
        "summary": "Short evening activity summary",
        "detail": "Detailed evening activity description"
      },
      "night": {
        "summary": "Short night activity summary",
        "detail": "Detailed night activity description"
      }
    }
  ],
  "estimated_cost": 0,
  "cautions": ["Caution 1", "Caution 2"]
}"""


def _label_or_default(value: str | None, default: str) -> str:
    if value is None or not value.strip():
        return default
    return value.strip()


def group_size_text(group_size: int | None) -> str:
    """Render group size; absent and 1 are both a solo trip."""
    if group_size is None or group_size == 1:
        return SOLO_GROUP
    return f"{group_size} people"


def build_prompt_context(request: ItineraryRequest) -> PromptContext:
    """Resolve every optional field of a request to its rendered label."""
    return PromptContext(
        destination=request.destination.strip(),
        duration=request.duration,
        age_group=_label_or_default(request.age_group, DEFAULT_AGE_GROUP),
        group_size=group_size_text(request.group_size),
        purpose=_label_or_default(request.purpose, DEFAULT_PURPOSE),
        travel_type=_label_or_default(request.travel_type, DEFAULT_TRAVEL_TYPE),
    )


def render_prompt(context: PromptContext) -> str:
    """Render the generation prompt for a resolved context."""
    return (
        f"I am planning a {context.duration}-day trip to {context.destination}.\n"
        f"Age group: {context.age_group}. Group: {context.group_size}.\n"
        f'Trip purpose: "{context.purpose}". Travel style: "{context.travel_type}".\n'
        "\n"
        "Respond with exactly the following JSON format. Return only the JSON object, "
        "with no explanations or any other text:\n"
        "\n"
        f"{OUTPUT_FORMAT}\n"
        "\n"
        f"The itinerary array must contain exactly {context.duration} day objects, "
        f"numbered 1 to {context.duration}. "
        "Make each day realistic and specific. "
        f"estimated_cost is an integer (digits only) estimating the cost per person "
        f"in {COST_CURRENCY}. cautions is a list of short strings."
    )


def build_prompt(request: ItineraryRequest) -> str:
    """Build the generation prompt for a validated request."""
    return render_prompt(build_prompt_context(request))
