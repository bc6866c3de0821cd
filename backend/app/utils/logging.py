"""Structured logging for provider calls."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredProviderLogger:
    """Structured logger for external provider calls."""

    def log_call(
        self,
        provider: str,
        outcome: str,
        latency_ms: float,
        reason: str | None = None,
        error: str | None = None,
    ) -> None:
        """Log provider call outcome with structured data."""
        log_data: dict[str, Any] = {
            "provider": provider,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if reason:
            log_data["reason"] = reason
        if error:
            log_data["error"] = error

        log_msg = f"Provider call: {provider} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
