"""Itinerary generation pipeline.

Received -> Validated -> Prompted -> Generated -> Extracted -> Decoded ->
Reconciled -> Returned, with persistence branching off asynchronously after
reconciliation. Validation, generation and decode failures are terminal:
the error propagates to the caller and nothing is persisted.
"""

import logging
import time
import uuid
from dataclasses import dataclass

from backend.app.errors import GenerationError, InvalidRequestError, MalformedResponseError
from backend.app.generation.decoder import decode_itinerary
from backend.app.generation.extract import extract_json
from backend.app.generation.prompt import build_prompt
from backend.app.generation.reconcile import reconcile_action, reconcile_itinerary
from backend.app.generation.validation import validate_request
from backend.app.llm.client import GenerationClient
from backend.app.models.travel import ItineraryRequest, ItineraryResult
from backend.app.persistence.notifier import PersistenceNotifier
from backend.app.utils.logging import StructuredPipelineLogger
from backend.app.utils.metrics import PrometheusPipelineMetrics

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 8192


@dataclass(frozen=True)
class PipelineOutput:
    """Reconciled itinerary plus the model that generated it."""

    result: ItineraryResult
    model: str


class ItineraryPipeline:
    """Turns an itinerary request into a reconciled itinerary.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        client: GenerationClient,
        *,
        notifier: PersistenceNotifier | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        metrics: PrometheusPipelineMetrics | None = None,
        stage_logger: StructuredPipelineLogger | None = None,
    ) -> None:
        self.client = client
        self.notifier = notifier
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.metrics = metrics or PrometheusPipelineMetrics()
        self.stage_logger = stage_logger or StructuredPipelineLogger()

    def _resolve_parameters(
        self, temperature: float | None, max_tokens: int | None
    ) -> tuple[float, int]:
        resolved_temperature = self.temperature if temperature is None else temperature
        resolved_max_tokens = self.max_tokens if max_tokens is None else max_tokens

        if not 0.0 <= resolved_temperature <= 2.0:
            raise InvalidRequestError("temperature", "temperature must be between 0 and 2")
        if resolved_max_tokens <= 0:
            raise InvalidRequestError("max_tokens", "max_tokens must be positive")

        return resolved_temperature, resolved_max_tokens

    async def generate(
        self,
        request: ItineraryRequest,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        request_id: str | None = None,
    ) -> PipelineOutput:
        """Run the full pipeline for one request.

        Args:
            request: Inbound itinerary request
            temperature: Per-call override of the default temperature
            max_tokens: Per-call override of the default token ceiling
            request_id: Correlation id for logs (generated if omitted)

        Returns:
            PipelineOutput with exactly ``request.duration`` days

        Raises:
            InvalidRequestError: Request rejected before any external call
            GenerationError: Provider failure
            MalformedResponseError: Output not reducible to the itinerary schema
        """
        request_id = request_id or uuid.uuid4().hex[:12]

        try:
            validate_request(request)
            call_temperature, call_max_tokens = self._resolve_parameters(temperature, max_tokens)
        except InvalidRequestError as e:
            self.stage_logger.log_stage(request_id, "validate", "failed", field=e.field)
            raise

        prompt = build_prompt(request)
        logger.info(
            f"Generated prompt for destination: {request.destination}, "
            f"duration: {request.duration} days"
        )

        start = time.perf_counter()
        try:
            output = await self.client.generate(
                prompt, temperature=call_temperature, max_tokens=call_max_tokens
            )
        except GenerationError as e:
            latency_ms = (time.perf_counter() - start) * 1000
            self.metrics.record_generation("error", latency_ms)
            self.metrics.inc_generation_error(e.kind.value)
            self.stage_logger.log_stage(
                request_id, "generate", "failed", latency_ms, kind=e.kind.value
            )
            raise

        latency_ms = (time.perf_counter() - start) * 1000
        self.metrics.record_generation("success", latency_ms)
        self.stage_logger.log_stage(request_id, "generate", "ok", latency_ms, model=output.model)

        json_text = extract_json(output.text)

        try:
            decoded = decode_itinerary(json_text, output.text)
        except MalformedResponseError as e:
            self.metrics.inc_malformed()
            self.stage_logger.log_stage(request_id, "decode", "failed", reason=e.reason)
            logger.debug(f"Raw generation output: {output.text}")
            raise

        action = reconcile_action(len(decoded.itinerary), request.duration)
        result = reconcile_itinerary(decoded, request.duration)
        self.metrics.inc_reconciliation(action.value)
        self.stage_logger.log_stage(
            request_id, "reconcile", "ok", action=action.value, days=len(result.itinerary)
        )

        if self.notifier is not None:
            self.notifier.notify(request, result)

        return PipelineOutput(result=result, model=output.model)
