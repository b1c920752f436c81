"""Raw text generation endpoint for operator testing."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.app.api.deps import get_app_settings, get_generation_client
from backend.app.config import Settings
from backend.app.errors import InvalidRequestError
from backend.app.llm.client import GenerationClient

router = APIRouter(prefix="/llm", tags=["llm"])


class RawGenerateRequest(BaseModel):
    """Request body for POST /llm/generate."""

    prompt: str
    temperature: float | None = None
    max_tokens: int | None = None


@router.post("/generate")
async def generate_text(
    request: RawGenerateRequest,
    client: Annotated[GenerationClient, Depends(get_generation_client)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> dict[str, Any]:
    """Pass a prompt straight to the generation client."""
    if not request.prompt.strip():
        raise InvalidRequestError("prompt", "prompt is required")

    temperature = (
        settings.generation_temperature if request.temperature is None else request.temperature
    )
    max_tokens = (
        settings.generation_max_tokens if request.max_tokens is None else request.max_tokens
    )

    if not 0.0 <= temperature <= 2.0:
        raise InvalidRequestError("temperature", "temperature must be between 0 and 2")
    if max_tokens <= 0:
        raise InvalidRequestError("max_tokens", "max_tokens must be positive")

    output = await client.generate(request.prompt, temperature=temperature, max_tokens=max_tokens)

    return {
        "success": True,
        "data": {
            "generated_text": output.text,
            "model": output.model,
            "prompt": request.prompt,
        },
    }
