"""Tests for strict itinerary decoding."""

import json
from collections.abc import Callable
from typing import Any

import pytest

from backend.app.errors import MalformedResponseError
from backend.app.generation.decoder import decode_itinerary
from backend.app.generation.extract import extract_json

PayloadBuilder = Callable[..., dict[str, Any]]


def test_decodes_valid_payload(itinerary_payload: PayloadBuilder) -> None:
    """Test that a well-formed payload decodes into the schema."""
    result = decode_itinerary(json.dumps(itinerary_payload(2)))

    assert [day.day for day in result.itinerary] == [1, 2]
    assert result.itinerary[1].night.summary == "Day 2 night"
    assert result.estimated_cost == 300000
    assert result.cautions == ["Check the weather", "Reserve restaurants early"]


def test_extra_fields_are_ignored(itinerary_payload: PayloadBuilder) -> None:
    """Test that unknown keys do not fail decoding."""
    payload = itinerary_payload(1)
    payload["currency"] = "KRW"

    result = decode_itinerary(json.dumps(payload))

    assert len(result.itinerary) == 1


def test_invalid_json_fails() -> None:
    """Test that syntactically invalid JSON raises MalformedResponseError."""
    with pytest.raises(MalformedResponseError):
        decode_itinerary('{"itinerary": [')


def test_prose_without_json_fails_after_extraction() -> None:
    """Test that text with no JSON flows through extraction and fails decoding."""
    raw = "I'm sorry, I cannot help with that."

    with pytest.raises(MalformedResponseError) as exc_info:
        decode_itinerary(extract_json(raw), raw)

    assert exc_info.value.raw_text == raw


@pytest.mark.parametrize("missing", ["itinerary", "estimated_cost", "cautions"])
def test_missing_top_level_field_fails(itinerary_payload: PayloadBuilder, missing: str) -> None:
    """Test that each required top-level field is enforced."""
    payload = itinerary_payload(1)
    del payload[missing]

    with pytest.raises(MalformedResponseError):
        decode_itinerary(json.dumps(payload))


def test_missing_time_of_day_block_fails(itinerary_payload: PayloadBuilder) -> None:
    """Test that a day without its night block is rejected."""
    payload = itinerary_payload(1)
    del payload["itinerary"][0]["night"]

    with pytest.raises(MalformedResponseError) as exc_info:
        decode_itinerary(json.dumps(payload))

    assert "night" in exc_info.value.reason


def test_missing_detail_fails(itinerary_payload: PayloadBuilder) -> None:
    """Test that an activity without detail is rejected."""
    payload = itinerary_payload(1)
    del payload["itinerary"][0]["morning"]["detail"]

    with pytest.raises(MalformedResponseError):
        decode_itinerary(json.dumps(payload))


@pytest.mark.parametrize("cost", ["300000", 300000.5, None])
def test_wrong_cost_type_fails(itinerary_payload: PayloadBuilder, cost: Any) -> None:
    """Test that non-integer costs are not coerced."""
    payload = itinerary_payload(1)
    payload["estimated_cost"] = cost

    with pytest.raises(MalformedResponseError):
        decode_itinerary(json.dumps(payload))


def test_negative_cost_fails(itinerary_payload: PayloadBuilder) -> None:
    """Test that a negative cost estimate is rejected."""
    payload = itinerary_payload(1, estimated_cost=-1)

    with pytest.raises(MalformedResponseError):
        decode_itinerary(json.dumps(payload))


def test_string_day_number_fails(itinerary_payload: PayloadBuilder) -> None:
    """Test that "day": "1" is a type error, not coerced."""
    payload = itinerary_payload(1)
    payload["itinerary"][0]["day"] = "1"

    with pytest.raises(MalformedResponseError):
        decode_itinerary(json.dumps(payload))


def test_empty_itinerary_fails(itinerary_payload: PayloadBuilder) -> None:
    """Test that a zero-day itinerary is a decode failure."""
    payload = itinerary_payload(1)
    payload["itinerary"] = []

    with pytest.raises(MalformedResponseError):
        decode_itinerary(json.dumps(payload))


def test_error_carries_raw_text() -> None:
    """Test that the unprocessed text is attached for diagnostics."""
    raw = "Here you go: {not json}"

    with pytest.raises(MalformedResponseError) as exc_info:
        decode_itinerary(extract_json(raw), raw)

    assert exc_info.value.raw_text == raw
