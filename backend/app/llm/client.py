"""Generation clients for itinerary text generation.

Security: API key comes from settings (environment) only, never hardcoded.
Provides a deterministic stub when no key is present for local runs and tests.
"""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import openai
from openai import AsyncOpenAI

from backend.app.config import Settings
from backend.app.errors import GenerationError, GenerationErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOutput:
    """Raw generated text and the model that produced it."""

    text: str
    model: str


class GenerationClient(Protocol):
    """Protocol for text generation capabilities.

    Implementations are shared across concurrent requests: per-call parameters
    must never be stored on the instance.
    """

    async def generate(
        self, prompt: str, *, temperature: float, max_tokens: int
    ) -> GenerationOutput:
        """Generate text for a prompt.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature in [0, 2]
            max_tokens: Output token ceiling

        Returns:
            GenerationOutput with the raw generated text

        Raises:
            GenerationError: unavailable, rate_limited or other
        """
        ...

    async def close(self) -> None:
        """Release underlying connections."""
        ...


class DeterministicStubClient:
    """Deterministic stub client (no API key, no network).

    Emits a fixed itinerary wrapped in prose, the way chat models tend to.
    """

    model = "stub"

    def __init__(self, days: int = 1) -> None:
        self.days = days

    async def generate(
        self, prompt: str, *, temperature: float, max_tokens: int
    ) -> GenerationOutput:
        """Generate deterministic stub itinerary text."""
        itinerary = [
            {
                "day": day,
                "morning": {
                    "summary": f"Day {day} old town walk",
                    "detail": "Stroll the historic center and stop for breakfast at a local cafe.",
                },
                "afternoon": {
                    "summary": f"Day {day} museum visit",
                    "detail": "Spend the afternoon at the main city museum.",
                },
                "evening": {
                    "summary": f"Day {day} market dinner",
                    "detail": "Try regional dishes at the evening food market.",
                },
                "night": {
                    "summary": f"Day {day} night view",
                    "detail": "Finish the day at a viewpoint overlooking the city lights.",
                },
            }
            for day in range(1, self.days + 1)
        ]
        payload = {
            "itinerary": itinerary,
            "estimated_cost": 150000 * self.days,
            "cautions": ["Check the weather forecast", "Book popular venues in advance"],
        }
        text = (
            "Here is your itinerary:\n"
            f"{json.dumps(payload, ensure_ascii=False, indent=2)}\n"
            "*This is a stub response generated without a language model.*"
        )
        return GenerationOutput(text=text, model=self.model)

    async def close(self) -> None:
        """Nothing to release."""


class OpenAIGenerationClient:
    """Generation client for OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
    ):
        """Initialize client.

        Args:
            api_key: Provider API key (read from environment)
            model: Model name, e.g. gemma-3-27b-it
            base_url: OpenAI-compatible endpoint; None for the OpenAI default
            timeout_seconds: Bound on a single generation call
        """
        # SDK retries disabled: a failed call surfaces as GenerationError
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model

    async def generate(
        self, prompt: str, *, temperature: float, max_tokens: int
    ) -> GenerationOutput:
        """Generate itinerary text with a single chat completion call."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.RateLimitError as e:
            raise GenerationError(GenerationErrorKind.rate_limited, str(e)) from e
        except (openai.APIConnectionError, openai.InternalServerError) as e:
            raise GenerationError(GenerationErrorKind.unavailable, str(e)) from e
        except openai.OpenAIError as e:
            raise GenerationError(GenerationErrorKind.other, str(e)) from e

        if not response.choices:
            raise GenerationError(GenerationErrorKind.other, "no content generated")

        text = response.choices[0].message.content or ""
        if not text.strip():
            raise GenerationError(GenerationErrorKind.other, "no content generated")

        return GenerationOutput(text=text, model=response.model or self.model)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()


def get_generation_client(settings: Settings) -> GenerationClient:
    """Factory function to get the generation client for the configured provider.

    Returns:
        OpenAIGenerationClient if an API key is configured, DeterministicStubClient otherwise
    """
    api_key = settings.generation_api_key

    if api_key and api_key.get_secret_value():
        logger.info(f"Using OpenAI-compatible generation client, model={settings.generation_model}")
        return OpenAIGenerationClient(
            api_key=api_key.get_secret_value(),
            model=settings.generation_model,
            base_url=settings.generation_base_url,
            timeout_seconds=settings.generation_timeout_seconds,
        )

    logger.warning("No generation API key configured, using deterministic stub client")
    return DeterministicStubClient()
