"""Structured logging for counter increments."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at application start."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class StructuredCounterLogger:
    """Structured logger for view/download counter increments."""

    def log_increment(
        self,
        document_id: int,
        counter: str,
        outcome: str,
        latency_ms: float,
        new_count: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log one increment attempt with structured data."""
        log_data: dict[str, Any] = {
            "document_id": document_id,
            "counter": counter,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if new_count is not None:
            log_data["new_count"] = new_count
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Counter increment: {counter} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
