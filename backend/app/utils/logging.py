"""Structured logging for itinerary pipeline stages."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class StructuredPipelineLogger:
    """Structured logger for pipeline stage outcomes."""

    def log_stage(
        self,
        request_id: str,
        stage: str,
        outcome: str,
        latency_ms: float | None = None,
        **details: Any,
    ) -> None:
        """Log one pipeline stage transition with structured data."""
        log_data: dict[str, Any] = {
            "request_id": request_id,
            "stage": stage,
            "outcome": outcome,
        }

        if latency_ms is not None:
            log_data["latency_ms"] = round(latency_ms, 2)

        log_data.update(details)

        log_msg = f"Pipeline stage: {stage} - {outcome}"

        if outcome == "ok":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
