"""Structured logging for aggregate writes."""

import logging
from typing import Any

from twintravel.app.db.context import TwinContext

logger = logging.getLogger(__name__)


class StructuredWriteLogger:
    """Structured logger for document store writes."""

    def log_attempt(
        self,
        ctx: TwinContext,
        operation: str,
        travel_id: str,
        attempt: int,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log one write attempt with structured data."""
        log_data: dict[str, Any] = {
            "twin_id": ctx.twin_id,
            "travel_id": travel_id,
            "operation": operation,
            "attempt": attempt,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Store write: {operation} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
